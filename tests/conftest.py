"""Shared fixtures: settings, a real git repository, and an in-memory GitHub."""

from __future__ import annotations

import base64
import hashlib
import json
import re
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from tenkai.config import AppConfig, GeminiConfig, GitHubConfig, Settings
from tenkai.github.client import GitHubClient

API_URL = "https://api.github.test"
OAUTH_URL = "https://github.test/login/oauth/access_token"
TOKEN = "gho_test_token"
LOGIN = "writer"

_REPO_PATH = re.compile(r"^/repos/(?P<owner>[^/]+)/(?P<name>[^/]+)(?P<rest>/.*)?$")


def _sha(*parts: str) -> str:
    return hashlib.sha1("\0".join(parts).encode("utf-8")).hexdigest()  # noqa: S324


@dataclass
class FakeGitHub:
    """Just enough of the GitHub REST API to exercise the client end to end.

    Files are keyed by ``(repository, branch, path)``. Content writes enforce
    the blob hash the way GitHub does: a stale hash is a 409 and a missing
    hash for an existing file is a 422 mentioning ``sha``.
    """

    repositories: dict[str, dict[str, Any]] = field(default_factory=dict)
    branches: dict[tuple[str, str], str] = field(default_factory=dict)
    files: dict[tuple[str, str, str], tuple[str, str]] = field(default_factory=dict)
    pulls: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    directories: set[tuple[str, str]] = field(default_factory=set)
    failing_paths: dict[str, int] = field(default_factory=dict)
    reviewers_fail: bool = False
    requests: list[httpx.Request] = field(default_factory=list)

    def add_repository(self, full_name: str, *, branch: str = "main") -> None:
        owner, name = full_name.split("/", 1)
        self.repositories[full_name] = {
            "id": len(self.repositories) + 1,
            "name": name,
            "full_name": full_name,
            "private": True,
            "html_url": f"https://github.test/{full_name}",
            "clone_url": f"https://github.test/{full_name}.git",
            "owner": {"login": owner},
        }
        self.branches[(full_name, branch)] = _sha(full_name, branch)

    def add_file(self, repository: str, path: str, content: str, *, branch: str = "main") -> str:
        sha = _sha(repository, branch, path, content)
        self.files[(repository, branch, path)] = (content, sha)
        return sha

    def read(self, repository: str, path: str, *, branch: str = "main") -> str | None:
        entry = self.files.get((repository, branch, path))
        return entry[0] if entry else None

    # -- transport --

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if str(request.url).startswith(OAUTH_URL):
            return self._oauth(request)
        if request.headers.get("Authorization") != f"Bearer {TOKEN}":
            return httpx.Response(401, json={"message": "Bad credentials"})

        path = request.url.path
        if path == "/user":
            return httpx.Response(200, json={"id": 1, "login": LOGIN, "name": "Writer"})
        if path == "/user/repos":
            if request.method == "POST":
                return self._create_repository(json.loads(request.content))
            return httpx.Response(200, json=list(self.repositories.values()))

        match = _REPO_PATH.match(path)
        if match is None:
            return httpx.Response(404, json={"message": "Not Found"})
        repository = f"{match['owner']}/{match['name']}"
        if repository not in self.repositories:
            return httpx.Response(404, json={"message": "Not Found"})
        rest = match["rest"] or ""
        body = json.loads(request.content) if request.content else {}

        if rest == "":
            return httpx.Response(200, json=self.repositories[repository])
        if rest.startswith("/contents/"):
            file_path = rest[len("/contents/") :]
            if request.method == "PUT":
                return self._put_content(repository, file_path, body)
            branch = request.url.params.get("ref", "main")
            return self._get_content(repository, file_path, branch)
        if rest == "/branches":
            return httpx.Response(
                200,
                json=[
                    {"name": name, "protected": False, "commit": {"sha": sha}}
                    for (repo, name), sha in self.branches.items()
                    if repo == repository
                ],
            )
        if rest.startswith("/git/ref/heads/"):
            sha = self.branches.get((repository, rest[len("/git/ref/heads/") :]))
            if sha is None:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json={"object": {"sha": sha, "type": "commit"}})
        if rest == "/git/refs":
            name = body["ref"].removeprefix("refs/heads/")
            if (repository, name) in self.branches:
                return httpx.Response(422, json={"message": "Reference already exists"})
            self.branches[(repository, name)] = body["sha"]
            return httpx.Response(201, json={"ref": body["ref"], "object": {"sha": body["sha"]}})
        if rest == "/pulls":
            pulls = self.pulls.setdefault(repository, [])
            pull = {
                "number": len(pulls) + 1,
                "html_url": f"https://github.test/{repository}/pull/{len(pulls) + 1}",
                **body,
            }
            pulls.append(pull)
            return httpx.Response(201, json=pull)
        if rest.endswith("/requested_reviewers"):
            if self.reviewers_fail:
                return httpx.Response(
                    422, json={"message": "Reviews may only be requested from collaborators."}
                )
            return httpx.Response(201, json={"requested_reviewers": body["reviewers"]})
        return httpx.Response(404, json={"message": "Not Found"})

    def _oauth(self, request: httpx.Request) -> httpx.Response:
        form = dict(pair.split("=", 1) for pair in request.content.decode().split("&"))
        if form.get("code") == "good-code":
            return httpx.Response(200, json={"access_token": TOKEN, "token_type": "bearer"})
        return httpx.Response(200, json={"error": "bad_verification_code"})

    def _create_repository(self, body: dict[str, Any]) -> httpx.Response:
        full_name = f"{LOGIN}/{body['name']}"
        if full_name in self.repositories:
            return httpx.Response(422, json={"message": "name already exists on this account"})
        self.add_repository(full_name)
        return httpx.Response(201, json=self.repositories[full_name])

    def _get_content(self, repository: str, path: str, branch: str) -> httpx.Response:
        if (repository, path) in self.directories:
            return httpx.Response(
                200,
                json=[{"name": "a.md", "path": f"{path}/a.md", "sha": "0" * 40, "type": "file"}],
            )
        entry = self.files.get((repository, branch, path))
        if entry is None:
            return httpx.Response(404, json={"message": "Not Found"})
        content, sha = entry
        encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
        return httpx.Response(
            200,
            json={
                "name": path.rsplit("/", 1)[-1],
                "path": path,
                "sha": sha,
                "size": len(content),
                "type": "file",
                "content": "\n".join(encoded[i : i + 60] for i in range(0, len(encoded), 60)),
                "encoding": "base64",
            },
        )

    def _put_content(self, repository: str, path: str, body: dict[str, Any]) -> httpx.Response:
        if path in self.failing_paths:
            return httpx.Response(self.failing_paths[path], json={"message": "Server Error"})
        branch = body.get("branch", "main")
        current = self.files.get((repository, branch, path))
        if current is not None and "sha" not in body:
            return httpx.Response(
                422, json={"message": "Invalid request.\n\n\"sha\" wasn't supplied."}
            )
        if current is not None and body["sha"] != current[1]:
            return httpx.Response(409, json={"message": f"{path} does not match {body['sha']}"})
        content = base64.b64decode(body["content"]).decode("utf-8")
        sha = self.add_file(repository, path, content, branch=branch)
        return httpx.Response(
            201 if current is None else 200,
            json={"content": {"name": path.rsplit("/", 1)[-1], "path": path, "sha": sha}},
        )


@pytest.fixture
def github_config() -> GitHubConfig:
    return GitHubConfig(
        client_id="client-id",
        client_secret="client-secret",
        api_url=API_URL,
        oauth_url=OAUTH_URL,
    )


@pytest.fixture
def settings(github_config: GitHubConfig) -> Settings:
    return Settings(
        app=AppConfig(env="test", frontend_url="http://localhost:3000", log_level="INFO"),
        gemini=GeminiConfig(api_key=""),
        github=github_config,
    )


@pytest.fixture
def fake_github() -> FakeGitHub:
    fake = FakeGitHub()
    fake.add_repository(f"{LOGIN}/novel")
    return fake


@pytest.fixture
def http(fake_github: FakeGitHub) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_github.handler))


@pytest.fixture
def github_client(http: httpx.AsyncClient, github_config: GitHubConfig) -> GitHubClient:
    return GitHubClient(http, TOKEN, github_config)
