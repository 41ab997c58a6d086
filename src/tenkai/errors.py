"""Error taxonomy shared by the local and remote engines.

Every error carries the HTTP status it maps to, an optional localized message
for the author, and the raw detail from the failing backend. Routes fill in
the operation-specific message with :func:`describe_failure`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Iterator

DEFAULT_FAILURE_MESSAGE = "処理に失敗しました"


class TenkaiError(Exception):
    """Base class for errors rendered into the response envelope."""

    status_code: ClassVar[int] = 500
    default_message: ClassVar[str | None] = None

    def __init__(self, detail: str = "", *, message: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.message = message or self.default_message


class NotInitializedError(TenkaiError):
    """No local repository has been opened yet."""

    status_code = 400
    default_message = "先に初期化してください"


class ValidationError(TenkaiError):
    status_code = 400
    default_message = "リクエストが不正です"


class AuthenticationError(TenkaiError):
    status_code = 401
    default_message = "認証が必要です"


class AIUnavailableError(TenkaiError):
    status_code = 400
    default_message = "AI機能が初期化されていません"


class RepositoryError(TenkaiError):
    """The local repository could not be opened, read, or written."""


class DraftExistsError(RepositoryError):
    def __init__(self, name: str, *, message: str | None = None) -> None:
        super().__init__(f"draft already exists: {name}", message=message)
        self.name = name


class DraftNotFoundError(RepositoryError):
    def __init__(self, name: str, *, message: str | None = None) -> None:
        super().__init__(f"draft not found: {name}", message=message)
        self.name = name


class UpstreamError(TenkaiError):
    """A remote API answered with a non-2xx status or could not be reached."""

    def __init__(
        self,
        detail: str,
        *,
        status: int | None = None,
        body: str = "",
        message: str | None = None,
    ) -> None:
        super().__init__(detail, message=message)
        self.status = status
        self.body = body


class ConflictError(UpstreamError):
    """A remote write was rejected because its content hash is stale."""

    status_code = 409


@contextmanager
def describe_failure(message: str) -> Iterator[None]:
    """Attach ``message`` to any TenkaiError raised inside the block that lacks one."""
    try:
        yield
    except TenkaiError as exc:
        if exc.message is None:
            exc.message = message
        raise
