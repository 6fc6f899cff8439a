from urllib.parse import quote

import httpx
import structlog

from app.core.config import Settings
from app.integrations.storage.base import (
    Absent,
    ContentStore,
    Present,
    RemoteObjectState,
    RemoteRejected,
    RemoteStoreError,
)

logger = structlog.get_logger()

GITHUB_API_VERSION = "2022-11-28"


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return response.text or f"HTTP {response.status_code}"


class GitHubContentStore(ContentStore):
    name = "github"

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self.owner = settings.github_owner
        self.repo = settings.github_repo
        self.branch = settings.github_branch
        self.raw_base_url = settings.raw_content_base_url.rstrip("/")
        self.client = client or httpx.AsyncClient(
            base_url=settings.github_api_url.rstrip("/"),
            timeout=settings.remote_timeout_seconds,
        )
        self.headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {settings.github_token}",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def _contents_url(self, path: str) -> str:
        return f"/repos/{self.owner}/{self.repo}/contents/{quote(path)}"

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            return await self.client.request(method, url, headers=self.headers, **kwargs)
        except httpx.TimeoutException as exc:
            raise RemoteStoreError(f"GitHub request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise RemoteStoreError(f"GitHub request failed: {exc}") from exc

    async def verify_access(self) -> None:
        response = await self._request("GET", f"/repos/{self.owner}/{self.repo}")
        if response.is_error:
            raise RemoteStoreError(_error_message(response), response.status_code)
        logger.info("github_repository_connected", owner=self.owner, repo=self.repo, branch=self.branch)

    async def get_content(self, path: str) -> RemoteObjectState:
        response = await self._request("GET", self._contents_url(path), params={"ref": self.branch})
        if response.status_code == 404:
            return Absent()
        if response.is_error:
            raise RemoteStoreError(_error_message(response), response.status_code)
        payload = response.json()
        # directories come back as a list of entries
        if isinstance(payload, dict):
            return Present(sha=payload.get("sha"))
        return Present()

    async def create_or_update_content(
        self,
        path: str,
        content_b64: str,
        message: str,
        branch: str,
        sha: str | None = None,
    ) -> None:
        body = {"message": message, "content": content_b64, "branch": branch}
        if sha:
            body["sha"] = sha
        response = await self._request("PUT", self._contents_url(path), json=body)
        if response.is_error:
            raise RemoteRejected(_error_message(response), response.status_code)

    def public_url(self, path: str) -> str:
        return f"{self.raw_base_url}/{self.owner}/{self.repo}/{self.branch}/{path}"

    async def aclose(self) -> None:
        await self.client.aclose()
