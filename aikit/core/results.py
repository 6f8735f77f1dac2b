"""Single outcome type shared by the generation helpers and the RAG chain.

Every public call returns a Result instead of mixing sentinel strings, empty
values and exceptions. Callers that prefer exceptions use Result.unwrap().
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


class Status(str, Enum):
    OK = "ok"
    NOT_CONFIGURED = "not_configured"
    UPSTREAM_ERROR = "upstream_error"
    NOT_LOADED = "not_loaded"


class AikitError(RuntimeError):
    """Base class for errors raised by aikit."""


class NotConfiguredError(AikitError):
    """A provider needed by the call was never set up."""


class UpstreamError(AikitError):
    """A provider or transport call failed."""


class NotLoadedError(AikitError):
    """A RAG chain was queried before preload finished."""


class RagStateError(AikitError):
    """A RAG chain was asked to make a transition it cannot make."""


class RagPreloadError(AikitError):
    """A preload step failed; the chain stays empty."""

    def __init__(self, step: str, message: str):
        super().__init__(f"RAG preload failed at '{step}': {message}")
        self.step = step


_ERRORS = {
    Status.NOT_CONFIGURED: NotConfiguredError,
    Status.UPSTREAM_ERROR: UpstreamError,
    Status.NOT_LOADED: NotLoadedError,
}


@dataclass(frozen=True)
class Result(Generic[T]):
    status: Status
    value: Optional[T] = None
    detail: str = ""
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    @classmethod
    def success(cls, value: Any, detail: str = "") -> "Result":
        return cls(Status.OK, value, detail)

    @classmethod
    def not_configured(cls, detail: str) -> "Result":
        return cls(Status.NOT_CONFIGURED, None, detail)

    @classmethod
    def upstream_error(cls, detail: str, cause: Optional[BaseException] = None) -> "Result":
        return cls(Status.UPSTREAM_ERROR, None, detail, cause)

    @classmethod
    def not_loaded(cls, detail: str = "RAG chain model wasn't loaded") -> "Result":
        return cls(Status.NOT_LOADED, None, detail)

    def unwrap(self) -> T:
        """Return the value, or raise the typed error matching the status.

        Upstream errors are chained to the provider exception that caused them.
        """
        if self.ok:
            return self.value  # type: ignore[return-value]
        raise _ERRORS[self.status](self.detail) from self.cause

    def unwrap_or(self, default: T) -> T:
        return self.value if self.ok else default  # type: ignore[return-value]
