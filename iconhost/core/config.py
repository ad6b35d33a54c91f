import os
from pydantic import BaseModel
from typing import Optional, Tuple

class Settings(BaseModel):
    """for reading environment-driven configuration.

    Values have sensible defaults for running the gallery from a local checkout.
    """
    icons_dir: str = os.getenv("ICONS_DIR", "icons")
    max_file_size: int = int(os.getenv("MAX_FILE_SIZE", str(50 * 1024 * 1024)))
    supported_formats: Tuple[str, ...] = (".svg", ".png", ".ico", ".webp")
    default_categories: Tuple[str, ...] = ("social", "ui", "brands", "flags", "custom")
    cdn_base: str = os.getenv("CDN_BASE", "https://cdn.jsdelivr.net/gh")
    repo_owner: str = os.getenv("REPO_OWNER", "dwirx")
    repo_name: str = os.getenv("REPO_NAME", "my-icons")
    branch: str = os.getenv("GITHUB_BRANCH", "main")
    url_mode: str = os.getenv("URL_MODE", "cdn")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    github_token: Optional[str] = os.getenv("GITHUB_TOKEN")
    github_api_url: str = os.getenv("GITHUB_API_URL", "https://api.github.com")
    github_dispatch_event: str = os.getenv("GITHUB_DISPATCH_EVENT", "icon-update")
    commit_message_prefix: str = os.getenv("COMMIT_MESSAGE_PREFIX", "Auto-update:")

settings = Settings()
