from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Iterable, Literal, Optional, TypeVar

T = TypeVar("T")

ResultKind = Literal["ok", "login_required", "blocked", "http_status", "failed"]


class MissingElementError(LookupError):
    """A node required to build a record is absent from the document."""


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """
    Outcome of a top-level parse.

    - ok: `value` holds the record
    - login_required: rows absent and the login wall is shown
    - blocked: anchor content absent (removed, restricted or unknown page)
    - http_status: transport answered with a non-2xx `status_code`
    - failed: anything else; `reason` carries the error text
    """

    kind: ResultKind
    value: Optional[T] = None
    status_code: Optional[int] = None
    reason: Optional[str] = None

    @property
    def is_ok(self) -> bool:
        return self.kind == "ok"

    @classmethod
    def ok(cls, value: T) -> "ParseResult[T]":
        return cls(kind="ok", value=value)

    @classmethod
    def login_required(cls) -> "ParseResult[T]":
        return cls(kind="login_required", reason="login required")

    @classmethod
    def blocked(cls, reason: str = "content blocked or removed") -> "ParseResult[T]":
        return cls(kind="blocked", reason=reason)

    @classmethod
    def http_status(cls, status_code: Optional[int], reason: Optional[str] = None) -> "ParseResult[T]":
        return cls(kind="http_status", status_code=status_code, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "ParseResult[T]":
        return cls(kind="failed", reason=reason)


@dataclass(frozen=True)
class ItemResult(Generic[T]):
    """Per-row / per-position outcome: either a value or the reason it was skipped."""

    value: Optional[T] = None
    reason: Optional[str] = None

    @property
    def is_ok(self) -> bool:
        return self.reason is None

    @classmethod
    def ok(cls, value: T) -> "ItemResult[T]":
        return cls(value=value)

    @classmethod
    def skipped(cls, reason: str) -> "ItemResult[T]":
        return cls(reason=reason)


def collect_ok(items: Iterable[ItemResult[T]]) -> list[T]:
    """Keep ok values, in order."""
    return [it.value for it in items if it.is_ok]  # type: ignore[misc]
