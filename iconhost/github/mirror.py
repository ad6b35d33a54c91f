"""Mirror icon changes to the GitHub repository backing the CDN.

Uploads and deletes fire a `repository_dispatch` event; a workflow in the
repository does the actual git commit. Mirroring is best effort and never
fails the request that triggered it.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class GitHubConfig(BaseModel):
    token: Optional[str] = None
    repo_owner: str = ""
    repo_name: str = ""
    api_url: str = "https://api.github.com"
    dispatch_event: str = "icon-update"
    commit_message_prefix: str = "Auto-update:"
    timeout: float = 10.0

    @property
    def configured(self) -> bool:
        return bool(self.token and self.repo_owner and self.repo_name)


class GitHubMirror:
    def __init__(self, config: GitHubConfig, transport: Optional[httpx.BaseTransport] = None):
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.Client:
        headers = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "iconhost",
        }
        if self.config.token:
            headers["Authorization"] = f"token {self.config.token}"
        return httpx.Client(
            base_url=self.config.api_url,
            headers=headers,
            timeout=self.config.timeout,
            transport=self._transport,
        )

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.config.repo_owner}/{self.config.repo_name}"

    def commit_message(self, action: str, file_name: str, category: str) -> str:
        if action == "delete":
            return f"{self.config.commit_message_prefix} Delete icon: {file_name} from {category}"
        return f"{self.config.commit_message_prefix} Add icon: {file_name} to {category}"

    def notify(self, action: str, file_name: str, category: str) -> bool:
        """Send a repository_dispatch for an upload or delete. Returns True when sent."""
        if not self.config.configured:
            logger.debug("GitHub mirroring not configured, skipping %s of %s", action, file_name)
            return False

        payload: Dict[str, Any] = {
            "event_type": self.config.dispatch_event,
            "client_payload": {
                "action": action,
                "message": self.commit_message(action, file_name, category),
                "file": file_name,
                "category": category,
            },
        }
        try:
            with self._client() as client:
                resp = client.post(f"{self._repo_path}/dispatches", json=payload)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("GitHub dispatch for %s/%s failed: %s", category, file_name, e)
            return False
        logger.info("GitHub dispatch sent for %s %s/%s", action, category, file_name)
        return True

    def repository_info(self) -> Dict[str, Any]:
        if not (self.config.repo_owner and self.config.repo_name):
            return {"configured": False}

        with self._client() as client:
            resp = client.get(self._repo_path)
            resp.raise_for_status()
            data = resp.json()

        parent = data.get("parent")
        return {
            "configured": True,
            "name": data.get("name"),
            "full_name": data.get("full_name"),
            "description": data.get("description"),
            "default_branch": data.get("default_branch"),
            "stars": data.get("stargazers_count"),
            "forks": data.get("forks_count"),
            "is_fork": bool(data.get("fork")),
            "parent": (
                {"owner": parent["owner"]["login"], "name": parent["name"], "full_name": parent.get("full_name")}
                if parent else None
            ),
        }
