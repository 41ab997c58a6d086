"""Subsets of GitHub REST API resources used by the service."""

from __future__ import annotations

from pydantic import BaseModel


class GitHubUser(BaseModel):
    id: int
    login: str
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None


class GitHubRepository(BaseModel):
    id: int
    name: str
    full_name: str
    private: bool = False
    html_url: str = ""
    clone_url: str = ""


class GitHubContent(BaseModel):
    """A file entry from the contents API. ``content`` is base64 with line breaks."""

    name: str
    path: str
    sha: str
    size: int = 0
    type: str = "file"
    content: str = ""
    encoding: str = "base64"
    html_url: str | None = None
    download_url: str | None = None
