"""Thin async wrapper over the GitHub REST endpoints the service uses.

Each method is one network round trip. Non-2xx answers become
``UpstreamError`` (carrying status and body); stale-hash rejections on content
writes become ``ConflictError``. Nothing here retries.
"""

from __future__ import annotations

import base64
import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from tenkai.errors import ConflictError, DraftExistsError, UpstreamError
from tenkai.models.github import GitHubContent, GitHubRepository, GitHubUser

if TYPE_CHECKING:
    from tenkai.config import GitHubConfig

logger = logging.getLogger(__name__)

_HTTP_OK = 200
_HTTP_CREATED = 201
_HTTP_NOT_FOUND = 404
_HTTP_CONFLICT = 409
_HTTP_UNPROCESSABLE = 422

_API_VERSION = "2022-11-28"


def _repo_path(repository: str) -> str:
    return quote(repository.strip("/"), safe="/")


def _content_path(path: str) -> str:
    return quote(path.strip("/"), safe="/")


class GitHubClient:
    """GitHub API calls authenticated with one caller's access token."""

    def __init__(self, http: httpx.AsyncClient, token: str, config: GitHubConfig) -> None:
        self._http = http
        self._config = config
        self._base_url = config.api_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": config.user_agent,
            "X-GitHub-Api-Version": _API_VERSION,
        }

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        url = f"{self._base_url}{path}"
        try:
            return await self._http.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers,
                timeout=self._config.timeout_seconds,
            )
        except httpx.HTTPError as exc:
            logger.warning("GitHub request failed: method=%s path=%s error=%s", method, path, exc)
            raise UpstreamError(f"GitHub request failed: {exc}") from exc

    @staticmethod
    def _error(response: httpx.Response) -> UpstreamError:
        return UpstreamError(
            f"GitHub API error: {response.status_code}, {response.text}",
            status=response.status_code,
            body=response.text,
        )

    @classmethod
    def _json(cls, response: httpx.Response, *expected: int) -> Any:
        if response.status_code not in expected:
            raise cls._error(response)
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(
                f"GitHub returned invalid JSON: {exc}",
                status=response.status_code,
                body=response.text,
            ) from exc

    async def get_user(self) -> GitHubUser:
        response = await self._send("GET", "/user")
        return GitHubUser.model_validate(self._json(response, _HTTP_OK))

    async def list_repositories(self) -> list[GitHubRepository]:
        response = await self._send(
            "GET", "/user/repos", params={"sort": "updated", "per_page": 100}
        )
        return [GitHubRepository.model_validate(r) for r in self._json(response, _HTTP_OK)]

    async def get_repository(self, repository: str) -> dict[str, Any] | None:
        """Return the repository resource, or None if it does not exist."""
        response = await self._send("GET", f"/repos/{_repo_path(repository)}")
        if response.status_code == _HTTP_NOT_FOUND:
            return None
        return self._json(response, _HTTP_OK)

    async def create_repository(
        self,
        name: str,
        *,
        description: str = "",
        private: bool = True,
        auto_init: bool = True,
    ) -> dict[str, Any]:
        response = await self._send(
            "POST",
            "/user/repos",
            json={
                "name": name,
                "description": description,
                "private": private,
                "auto_init": auto_init,
            },
        )
        return self._json(response, _HTTP_CREATED)

    async def get_content(
        self, repository: str, path: str, ref: str | None = None
    ) -> GitHubContent | None:
        """Read a file entry, or None if the path (or repository) does not exist."""
        params = {"ref": ref} if ref else None
        response = await self._send(
            "GET",
            f"/repos/{_repo_path(repository)}/contents/{_content_path(path)}",
            params=params,
        )
        if response.status_code == _HTTP_NOT_FOUND:
            return None
        payload = self._json(response, _HTTP_OK)
        # a directory path answers 200 with a list of entries
        if not isinstance(payload, dict) or payload.get("type", "file") != "file":
            raise UpstreamError(
                f"not a file: {path}", status=response.status_code, body=response.text
            )
        try:
            return GitHubContent.model_validate(payload)
        except ValidationError as exc:
            raise UpstreamError(
                f"unexpected content entry for {path}: {exc}",
                status=response.status_code,
                body=response.text,
            ) from exc

    async def put_content(
        self,
        repository: str,
        path: str,
        *,
        message: str,
        content: bytes,
        branch: str | None = None,
        sha: str | None = None,
    ) -> dict[str, Any]:
        """Create or replace a file. ``sha`` must be the current blob hash when replacing."""
        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content).decode("ascii"),
        }
        if branch:
            body["branch"] = branch
        if sha:
            body["sha"] = sha
        response = await self._send(
            "PUT",
            f"/repos/{_repo_path(repository)}/contents/{_content_path(path)}",
            json=body,
        )
        if response.status_code == _HTTP_CONFLICT or (
            response.status_code == _HTTP_UNPROCESSABLE and "sha" in response.text
        ):
            raise ConflictError(
                f"stale content hash for {path}: {response.text}",
                status=response.status_code,
                body=response.text,
            )
        return self._json(response, _HTTP_OK, _HTTP_CREATED)

    async def list_branches(self, repository: str) -> list[dict[str, Any]]:
        response = await self._send("GET", f"/repos/{_repo_path(repository)}/branches")
        return self._json(response, _HTTP_OK)

    async def get_branch_sha(self, repository: str, branch: str) -> str:
        """Return the commit hash the branch ref points at."""
        response = await self._send(
            "GET", f"/repos/{_repo_path(repository)}/git/ref/heads/{_content_path(branch)}"
        )
        ref = self._json(response, _HTTP_OK)
        return ref["object"]["sha"]

    async def create_ref(self, repository: str, branch: str, sha: str) -> dict[str, Any]:
        """Create ``refs/heads/<branch>``; an existing ref raises ``DraftExistsError``."""
        response = await self._send(
            "POST",
            f"/repos/{_repo_path(repository)}/git/refs",
            json={"ref": f"refs/heads/{branch}", "sha": sha},
        )
        if response.status_code == _HTTP_UNPROCESSABLE and "already exists" in response.text:
            raise DraftExistsError(branch)
        return self._json(response, _HTTP_CREATED)

    async def create_pull(
        self, repository: str, *, title: str, body: str, head: str, base: str
    ) -> dict[str, Any]:
        response = await self._send(
            "POST",
            f"/repos/{_repo_path(repository)}/pulls",
            json={"title": title, "body": body, "head": head, "base": base},
        )
        return self._json(response, _HTTP_CREATED)

    async def request_reviewers(
        self, repository: str, number: int, reviewers: list[str]
    ) -> dict[str, Any]:
        response = await self._send(
            "POST",
            f"/repos/{_repo_path(repository)}/pulls/{number}/requested_reviewers",
            json={"reviewers": reviewers},
        )
        return self._json(response, _HTTP_OK, _HTTP_CREATED)
