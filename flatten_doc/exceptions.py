"""
Exceptions raised by the flatten-doc crawl engine.
"""
from __future__ import annotations

from typing import Optional


class FlattenError(Exception):
    """The run cannot start: the root URL could not be dispatched."""


class FetchError(Exception):
    """A page request failed for good after its retries."""

    def __init__(self, url: str, status: Optional[int], reason: object = None) -> None:
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else f"transport error: {reason}"
        super().__init__(f"{url}: {detail}")


class SourceDownloadError(Exception):
    """A source file could not be downloaded within its retry allowance."""

    def __init__(self, url: str, attempts: int, reason: object = None) -> None:
        self.url = url
        self.attempts = attempts
        self.reason = reason
        super().__init__(f"{url}: failed after {attempts} attempt(s): {reason}")
