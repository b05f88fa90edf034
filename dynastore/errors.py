from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class DdbError(Exception):
    """Base error for store operations.

    Carries enough context (operation, table, key, AWS request id) for a
    caller to log or render the failure without inspecting `cause`.
    """

    message: str
    operation: str | None = None
    table_name: str | None = None
    key: dict[str, Any] | None = None
    aws_request_id: str | None = None
    retryable: bool = False
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class DdbValidation(DdbError):
    pass


@dataclass(slots=True)
class InvalidCursor(DdbValidation):
    """A continuation token that cannot be decoded for this key schema."""

    cursor: str | None = None


@dataclass(slots=True)
class UnsupportedFilter(DdbValidation):
    field: str | None = None
    comparator: str | None = None


# --- failures reported by the backing store / its client ---


@dataclass(slots=True)
class DdbTransportError(DdbError):
    pass


@dataclass(slots=True)
class DdbRequestRejected(DdbTransportError):
    pass


@dataclass(slots=True)
class DdbThrottled(DdbTransportError):
    pass


@dataclass(slots=True)
class DdbUnavailable(DdbTransportError):
    pass


@dataclass(slots=True)
class DdbInternal(DdbTransportError):
    pass
