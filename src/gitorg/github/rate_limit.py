"""GitHub API rate limit monitoring."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone

import httpx

logger = logging.getLogger(__name__)


def format_reset(reset: int | float) -> str:
    """Format an epoch reset time as ``HH:MM:SS UTC``."""
    try:
        dt = datetime.fromtimestamp(reset, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return str(reset)
    return dt.strftime("%H:%M:%S UTC")


def _header_number(response: httpx.Response, name: str) -> float | None:
    value = response.headers.get(name)
    if value is None:
        return None
    try:
        number = float(value)
    except ValueError:
        number = math.nan
    if not math.isfinite(number):
        logger.debug("ignoring malformed %s header: %r", name, value)
        return None
    return number


def reset_label(response: httpx.Response) -> str:
    """Reset time from the response headers, or ``unknown``."""
    reset = _header_number(response, "X-RateLimit-Reset")
    return format_reset(reset) if reset is not None else "unknown"


def is_rate_limited(response: httpx.Response) -> bool:
    """True if the response is a rejection caused by an exhausted budget."""
    return (
        response.status_code in (403, 429)
        and response.headers.get("X-RateLimit-Remaining") == "0"
    )


class RateLimitMonitor:
    """Tracks GitHub API rate limit from response headers.

    Advisory only: nothing here sleeps or retries.
    """

    def __init__(self, threshold: int = 100) -> None:
        self._remaining: int | None = None
        self._reset_at: float | None = None
        self._threshold = threshold

    @property
    def remaining(self) -> int | None:
        return self._remaining

    @property
    def reset_at(self) -> float | None:
        return self._reset_at

    @property
    def is_low(self) -> bool:
        return self._remaining is not None and self._remaining < self._threshold

    def update(self, response: httpx.Response) -> None:
        # Unparseable headers are ignored; the last good values stay.
        remaining = _header_number(response, "X-RateLimit-Remaining")
        reset_at = _header_number(response, "X-RateLimit-Reset")
        if remaining is not None:
            self._remaining = int(remaining)
        if reset_at is not None:
            self._reset_at = reset_at
        if self.is_low:
            logger.debug(
                "rate limit low: %s calls remaining (resets at %s)",
                self._remaining,
                format_reset(self._reset_at) if self._reset_at is not None else "?",
            )
