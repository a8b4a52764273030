"""
Per-request retry bookkeeping shared by page fetches and source downloads.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

MAX_BACKOFF: float = 60.0


@dataclass(slots=True)
class RetryContext:
    """Failure counter attached to one request; survives re-issues of that request."""

    url: str
    retries: int = 0
    last_error: object = None

    def can_retry(self, max_retries: int) -> bool:
        return self.retries < max_retries

    def record(self, error: object) -> int:
        """Count one more re-issue and remember why. Returns the new count."""
        self.retries += 1
        self.last_error = error
        return self.retries


def is_retryable(status: Optional[int]) -> bool:
    """Transport failures (no status) and HTTP error statuses are retried."""
    return status is None or status >= 400


def backoff_delay(retries: int, unit: float) -> float:
    """Exponential backoff for the given retry number, capped at MAX_BACKOFF."""
    if unit <= 0 or retries <= 0:
        return 0.0
    return min(unit * 2 ** (retries - 1), MAX_BACKOFF)
