"""Errors raised by the ingestion side of the package."""
from __future__ import annotations


class FeedParseError(ValueError):
    """A feed document is not well-formed XML."""

    def __init__(self, message: str, location: str | None = None) -> None:
        super().__init__(message)
        self.location = location

    def __str__(self) -> str:
        base = super().__str__()
        return f"{self.location}: {base}" if self.location else base


class FeedFetchError(RuntimeError):
    """A feed location answered with an error status."""

    def __init__(self, location: str, status: int | None = None, reason: str = "") -> None:
        detail = f"HTTP {status}" if status is not None else "fetch failed"
        if reason:
            detail = f"{detail} {reason}"
        super().__init__(f"{location}: {detail}")
        self.location = location
        self.status = status
