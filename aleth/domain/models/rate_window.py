"""Domain models for per-identity rate limiting state."""

from dataclasses import dataclass


@dataclass
class RateWindow:
    """Request count for one identity inside a fixed window.

    Times are milliseconds since the epoch (or whatever the limiter's clock
    returns).
    """

    count: int
    window_end: float

    def is_expired(self, now: float) -> bool:
        """A window is over once ``now`` reaches its end."""
        return now >= self.window_end


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate limit check."""

    allowed: bool
    retry_after_seconds: int = 0
    remaining: int = 0
