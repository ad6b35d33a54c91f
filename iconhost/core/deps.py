from .config import settings
from ..github.mirror import GitHubConfig, GitHubMirror
from ..icons.pipeline import UploadPipeline
from ..icons.store import CategoryStore
from ..icons.urls import UrlBuilder


def url_builder() -> UrlBuilder:
    """Build the URL generator from our configured repository and mode."""
    return UrlBuilder(
        cdn_base=settings.cdn_base,
        repo_owner=settings.repo_owner,
        repo_name=settings.repo_name,
        branch=settings.branch,
        mode=settings.url_mode,
    )

def category_store() -> CategoryStore:
    return CategoryStore(
        settings.icons_dir,
        supported_formats=settings.supported_formats,
        url_for=url_builder(),
    )

def upload_pipeline() -> UploadPipeline:
    return UploadPipeline(
        category_store(),
        max_file_size=settings.max_file_size,
        supported_formats=settings.supported_formats,
    )

def github_mirror() -> GitHubMirror:
    """Return a mirror client for the configured repository."""
    return GitHubMirror(
        GitHubConfig(
            token=settings.github_token,
            repo_owner=settings.repo_owner,
            repo_name=settings.repo_name,
            api_url=settings.github_api_url,
            dispatch_event=settings.github_dispatch_event,
            commit_message_prefix=settings.commit_message_prefix,
        )
    )
