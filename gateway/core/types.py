"""Request-scoped value types shared by the dispatcher and adapters.

Architectural role:
    Defines the transient structures created at the start of one request and
    discarded at its end. Nothing here is shared or mutated across requests.

Error model:
    Adapters do not raise for expected failures. They return an `Outcome`
    carrying either a value or a `CoreError {kind, status, message}`; the HTTP
    layer is the single place that turns a `CoreError` into a response.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure taxonomy used across adapter boundaries."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    UPSTREAM = "upstream"
    INTERNAL = "internal"


DEFAULT_STATUS = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.CONFIGURATION: 500,
    ErrorKind.PAYLOAD_TOO_LARGE: 413,
    ErrorKind.UPSTREAM: 502,
    ErrorKind.INTERNAL: 500,
}


@dataclass(frozen=True)
class CoreError:
    """Tagged failure returned by adapters and the dispatcher.

    Attributes:
        kind: Failure category.
        message: Short user-visible message.
        status: Explicit HTTP status (for example the upstream's own status).
            `None` falls back to the category default.
    """

    kind: ErrorKind
    message: str
    status: int | None = None

    @property
    def http_status(self) -> int:
        return self.status or DEFAULT_STATUS[self.kind]

    def to_body(self) -> dict:
        return {"error": {"message": self.message}}


@dataclass(frozen=True)
class Outcome:
    """Result of one adapter call: exactly one of `value` / `error` is meaningful."""

    value: Any = None
    error: CoreError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any) -> "Outcome":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str, status: int | None = None) -> "Outcome":
        return cls(error=CoreError(kind=kind, message=message, status=status))


@dataclass(frozen=True)
class Attachment:
    """One uploaded file buffered in memory."""

    data: bytes
    mime_type: str
    filename: str | None = None


@dataclass(frozen=True)
class InboundRequest:
    """Parsed multipart request before validation.

    `has_message_field` / `has_mode_field` record whether the field was present
    at all, which distinguishes an empty field from a parser that yielded
    nothing.
    """

    message: str | None = None
    mode: str | None = None
    attachments: tuple[Attachment, ...] = field(default_factory=tuple)
    has_message_field: bool = False
    has_mode_field: bool = False


@dataclass(frozen=True)
class UpstreamErrorInfo:
    """Upstream error body as read from the wire; only used for normalization."""

    parsed: dict | None = None
    raw: str = ""
    status: int | None = None
