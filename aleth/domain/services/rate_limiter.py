"""Per-identity request quota over a fixed window."""

import asyncio
import logging
import math
import threading
import time
from typing import Callable, Dict, Optional

from ..errors import RateLimitError
from ..models.rate_window import RateLimitDecision, RateWindow

logger = logging.getLogger(__name__)

DEFAULT_MAX_REQUESTS = 2
DEFAULT_WINDOW_MS = 60_000


def wall_clock_ms() -> float:
    """Current wall-clock time in milliseconds."""
    return time.time() * 1000


class RateLimiter:
    """Bounds how many analyses one identity may request per window.

    Windows are fixed, not sliding: the first request opens a window of
    ``window_ms`` and up to ``max_requests`` requests are allowed until it
    ends. All access to the window store is serialized by one lock, so two
    concurrent checks can never both take the last slot.
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_MAX_REQUESTS,
        window_ms: float = DEFAULT_WINDOW_MS,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize the limiter.

        Args:
            max_requests: Requests allowed per window
            window_ms: Window length in milliseconds
            clock: Zero-argument callable returning the current time in ms
        """
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_ms <= 0:
            raise ValueError("window_ms must be positive")

        self.max_requests = max_requests
        self.window_ms = window_ms
        self._clock = clock or wall_clock_ms
        self._windows: Dict[str, RateWindow] = {}
        self._lock = threading.Lock()
        self._sweeper: Optional[asyncio.Task] = None

    def check(self, identity: str, now: Optional[float] = None) -> RateLimitDecision:
        """Record a request for ``identity`` and decide whether it may proceed."""
        now = self._clock() if now is None else now

        with self._lock:
            window = self._windows.get(identity)

            if window is None or window.is_expired(now):
                self._windows[identity] = RateWindow(count=1, window_end=now + self.window_ms)
                return RateLimitDecision(allowed=True, remaining=self.max_requests - 1)

            if window.count < self.max_requests:
                window.count += 1
                return RateLimitDecision(allowed=True, remaining=self.max_requests - window.count)

            retry_after = math.ceil((window.window_end - now) / 1000)
            return RateLimitDecision(allowed=False, retry_after_seconds=retry_after)

    def acquire(self, identity: str, now: Optional[float] = None) -> RateLimitDecision:
        """Like :meth:`check`, but raise when the request is rejected.

        Raises:
            RateLimitError: If the identity has no requests left in its window
        """
        decision = self.check(identity, now)
        if not decision.allowed:
            logger.warning(f"🚦 Rate limit hit for {identity}, retry in {decision.retry_after_seconds}s")
            raise RateLimitError(decision.retry_after_seconds, self.max_requests)
        return decision

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop windows that ended before ``now``. Returns how many were removed."""
        now = self._clock() if now is None else now

        with self._lock:
            expired = [identity for identity, window in self._windows.items() if window.window_end < now]
            for identity in expired:
                del self._windows[identity]

        if expired:
            logger.debug(f"🧹 Swept {len(expired)} expired rate limit windows")
        return len(expired)

    def get_window(self, identity: str) -> Optional[RateWindow]:
        """Get a copy of the stored window for ``identity``, if any."""
        with self._lock:
            window = self._windows.get(identity)
            return RateWindow(window.count, window.window_end) if window else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)

    async def _sweep_forever(self, interval_seconds: float) -> None:
        while True:
            await asyncio.sleep(interval_seconds)
            self.sweep()

    def start_sweeper(self, interval_seconds: Optional[float] = None) -> asyncio.Task:
        """Start the periodic sweep on the running event loop.

        Args:
            interval_seconds: Seconds between sweeps, defaults to the window length
        """
        if self._sweeper is None or self._sweeper.done():
            interval = interval_seconds if interval_seconds is not None else self.window_ms / 1000
            self._sweeper = asyncio.get_running_loop().create_task(self._sweep_forever(interval))
            logger.info(f"🧹 Rate limit sweeper started (every {interval:.0f}s)")
        return self._sweeper

    async def stop_sweeper(self) -> None:
        """Cancel the periodic sweep, if running."""
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None
        logger.info("🧹 Rate limit sweeper stopped")
