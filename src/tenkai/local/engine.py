"""Versioning operations on a repository the process owns on local disk.

GitPython calls are blocking, so they run in a worker thread. Each engine
holds an ``asyncio.Lock`` for the whole of every operation, which serialises
all work on one repository; different repositories proceed independently.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

import git
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from tenkai.errors import DraftExistsError, DraftNotFoundError, RepositoryError
from tenkai.models.local import DraftInfo, HistoryEntry, SaveResult, StatusSummary

if TYPE_CHECKING:
    from collections.abc import Callable

    from tenkai.agents.generator import TextGenerator

T = TypeVar("T")

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"
AUTOSAVE_SUFFIX = "自動保存"
SHORT_ID_LENGTH = 7

_CHANGE_KINDS = {
    "A": "added",
    "D": "deleted",
    "M": "modified",
    "R": "renamed",
    "C": "copied",
    "T": "type changed",
}


def default_message(now: datetime | None = None) -> str:
    """Timestamped message used when the author gives none."""
    return f"{(now or datetime.now()).strftime(TIMESTAMP_FORMAT)} - {AUTOSAVE_SUFFIX}"


class LocalEngine:
    """One repository on disk plus the lock that guards it."""

    def __init__(
        self,
        repo: git.Repo,
        *,
        generator: TextGenerator | None = None,
        author_name: str = "tenkai",
        author_email: str = "tenkai@example.com",
    ) -> None:
        self._repo = repo
        self._generator = generator
        self._actor = git.Actor(author_name, author_email)
        self._lock = asyncio.Lock()

    @classmethod
    def open_or_init(
        cls,
        path: str | Path,
        *,
        generator: TextGenerator | None = None,
        author_name: str = "tenkai",
        author_email: str = "tenkai@example.com",
    ) -> LocalEngine:
        """Open the repository at ``path``, initialising an empty one if none exists."""
        path = Path(path).expanduser()
        try:
            repo = git.Repo(path)
            logger.info("Repository opened: path=%s", path)
        except (InvalidGitRepositoryError, NoSuchPathError):
            try:
                repo = git.Repo.init(path, mkdir=True)
            except (OSError, GitCommandError) as exc:
                raise RepositoryError(f"failed to initialise repository at {path}: {exc}") from exc
            logger.info("Repository initialised: path=%s", path)
        except (OSError, GitCommandError) as exc:
            raise RepositoryError(f"failed to open repository at {path}: {exc}") from exc
        return cls(
            repo, generator=generator, author_name=author_name, author_email=author_email
        )

    @property
    def path(self) -> Path:
        return Path(self._repo.working_tree_dir or self._repo.git_dir)

    @property
    def lock(self) -> asyncio.Lock:
        return self._lock

    # -- blocking helpers, always called from a worker thread under the lock --

    def _has_revisions(self) -> bool:
        return self._repo.head.is_valid()

    def _current_branch(self) -> str | None:
        try:
            return self._repo.active_branch.name
        except TypeError:
            # detached HEAD
            return None

    def _collect_changes(self) -> dict[str, str]:
        """Map every changed path (staged, unstaged, untracked) to a change kind."""
        changes: dict[str, str] = {}
        if self._has_revisions():
            for diff in self._repo.head.commit.diff():
                path = diff.b_path or diff.a_path
                changes[path] = _CHANGE_KINDS.get(diff.change_type, diff.change_type)
        else:
            for path, _stage in self._repo.index.entries:
                changes[path] = _CHANGE_KINDS["A"]
        for diff in self._repo.index.diff(None):
            path = diff.a_path or diff.b_path
            changes.setdefault(path, _CHANGE_KINDS.get(diff.change_type, diff.change_type))
        for path in self._repo.untracked_files:
            changes.setdefault(path, "untracked")
        return changes

    def _stage_all(self) -> str:
        self._repo.git.add(A=True)
        changes = self._collect_changes()
        return "\n".join(f"{path}: {kind}" for path, kind in sorted(changes.items()))

    def _commit(self, message: str) -> str:
        commit = self._repo.index.commit(message, author=self._actor, committer=self._actor)
        return commit.hexsha

    def _history(self, limit: int) -> list[HistoryEntry]:
        if not self._has_revisions():
            return []
        commits = self._repo.iter_commits("HEAD", max_count=limit)
        return [
            HistoryEntry(
                id=c.hexsha[:SHORT_ID_LENGTH],
                date=c.authored_datetime.strftime(TIMESTAMP_FORMAT),
                message=str(c.message).strip(),
                author=c.author.name or "",
            )
            for c in commits
        ]

    def _create_draft(self, name: str) -> None:
        if name in self._repo.heads:
            raise DraftExistsError(name)
        if not self._has_revisions():
            raise RepositoryError("cannot create a draft before the first save")
        self._repo.create_head(name).checkout()

    def _list_drafts(self) -> list[DraftInfo]:
        current = self._current_branch()
        return [
            DraftInfo(name=head.name, current=head.name == current) for head in self._repo.heads
        ]

    def _switch_draft(self, name: str) -> None:
        if name not in self._repo.heads:
            raise DraftNotFoundError(name)
        self._repo.heads[name].checkout()

    def _status(self) -> StatusSummary:
        modified = len(self._collect_changes())
        return StatusSummary(
            current=self._current_branch(), modified=modified, has_changes=modified > 0
        )

    async def _run(self, func: Callable[..., T], *args: object) -> T:
        try:
            return await asyncio.to_thread(func, *args)
        except RepositoryError:
            raise
        except (GitCommandError, ValueError, OSError) as exc:
            raise RepositoryError(str(exc)) from exc

    # -- operations --

    async def save(self, message: str = "", *, use_generated_message: bool = False) -> SaveResult:
        """Stage every change and commit it.

        With ``use_generated_message`` the message comes from the text
        generator when one is configured; a failure there falls back to the
        given or timestamped message and never blocks the commit.
        """
        async with self._lock:
            changes = await self._run(self._stage_all)
            final_message = message or default_message()
            if use_generated_message and self._generator is not None and self._generator.enabled:
                final_message = await self._generator.commit_message(changes, final_message)
            hexsha = await self._run(self._commit, final_message)
        logger.info("Saved: path=%s commit=%s", self.path, hexsha[:SHORT_ID_LENGTH])
        return SaveResult(commit=hexsha[:SHORT_ID_LENGTH], message=final_message)

    async def history(self, limit: int = 20) -> list[HistoryEntry]:
        async with self._lock:
            return await self._run(self._history, limit)

    async def create_draft(self, name: str) -> None:
        """Create branch ``name`` at the current tip and switch to it."""
        async with self._lock:
            await self._run(self._create_draft, name)
        logger.info("Draft created: path=%s name=%s", self.path, name)

    async def list_drafts(self) -> list[DraftInfo]:
        async with self._lock:
            return await self._run(self._list_drafts)

    async def switch_draft(self, name: str) -> None:
        async with self._lock:
            await self._run(self._switch_draft, name)
        logger.info("Draft switched: path=%s name=%s", self.path, name)

    async def status(self) -> StatusSummary:
        async with self._lock:
            return await self._run(self._status)
