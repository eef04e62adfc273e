"""Error taxonomy for mail queries and PDF rendering.

Every failure raised by this package is an :class:`InboxPdfError` whose
``kind`` is one of the closed set in :class:`ErrorKind`.  Callers should
dispatch on ``error.kind`` with ``match`` rather than on the subclass::

    match exc.kind:
        case ErrorKind.VALIDATION: ...
        case ErrorKind.UPSTREAM: ...
        case ErrorKind.NOT_FOUND: ...
        case ErrorKind.RENDER: ...
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    """The four failure categories surfaced to callers."""

    VALIDATION = "validation"
    UPSTREAM = "upstream"
    NOT_FOUND = "not_found"
    RENDER = "render"


class InboxPdfError(Exception):
    """Base error carrying a message and an optional underlying cause."""

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})"


class ValidationError(InboxPdfError):
    """Bad caller input.  Raised before any network call is made."""

    kind = ErrorKind.VALIDATION


class UpstreamError(InboxPdfError):
    """The mail provider call failed or was rejected."""

    kind = ErrorKind.UPSTREAM

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.status_code = status_code


class MalformedMessageError(UpstreamError):
    """A fetched message lacks the header structure needed to build an Email."""

    def __init__(self, message_id: str, reason: str) -> None:
        super().__init__(f"Message {message_id} is malformed: {reason}")
        self.message_id = message_id


class NotFoundError(InboxPdfError):
    """No email matched a single-email request."""

    kind = ErrorKind.NOT_FOUND


class RenderError(InboxPdfError):
    """The rendering engine failed to produce PDF bytes."""

    kind = ErrorKind.RENDER
