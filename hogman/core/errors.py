"""Error taxonomy shared by the credential store, HTTP client and CLI."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    """Closed set of failure kinds surfaced to the caller."""

    NO_ACCOUNT = "NO_ACCOUNT"
    NO_PROJECT = "NO_PROJECT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    SERVER_ERROR = "SERVER_ERROR"
    API_ERROR = "API_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
    UNKNOWN = "UNKNOWN_ERROR"


class HogmanError(Exception):
    """A classified failure: kind, human message and optional HTTP status."""

    def __init__(self, kind: ErrorKind, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status = status

    @property
    def code(self) -> str:
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        """Structured form used for JSON error output."""
        data: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.status is not None:
            data["status"] = self.status
        return data

    def __repr__(self) -> str:
        return f"HogmanError({self.code}, {self.message!r}, status={self.status})"
