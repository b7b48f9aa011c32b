"""
Provides an adaptive rate limiter to avoid 429 "Too Many Requests" errors from TheTVDB.
"""

import asyncio
import logging
import time

log = logging.getLogger(__name__)


class AdaptiveRateLimiter:
    """
    Spaces out calls to a target rate and backs off when the server pushes back.

    A 429 halves the rate (down to `min_calls_per_second`) and, when the server
    sent a Retry-After delay, holds every caller until it has passed. The rate
    creeps back towards the maximum once no 429 was seen for `recovery_delay_s`.
    """

    def __init__(
        self,
        initial_calls_per_second: float = 4.0,
        max_calls_per_second: float = 8.0,
        min_calls_per_second: float = 0.5,
        recovery_delay_s: float = 300,
    ):
        self._rate = initial_calls_per_second
        self._max_rate = max(max_calls_per_second, initial_calls_per_second)
        self._min_rate = min(min_calls_per_second, initial_calls_per_second)
        self._recovery_delay_s = recovery_delay_s
        self._last_call_time = 0.0
        self._last_429_time = 0.0
        self._blocked_until = 0.0
        self._lock = asyncio.Lock()

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def min_interval(self) -> float:
        return 1.0 / self._rate

    async def on_429(self, retry_after: float | None = None) -> None:
        """
        Called when a 429 error is received.

        Args:
            retry_after: Seconds the server asked us to wait, if it said so.
        """
        async with self._lock:
            self._rate = max(self._min_rate, self._rate * 0.5)
            self._last_429_time = time.monotonic()
            if retry_after:
                loop = asyncio.get_running_loop()
                self._blocked_until = max(self._blocked_until, loop.time() + retry_after)
            log.warning(
                f"[yellow]Rate limit hit. New rate: {self._rate:.1f} calls/s"
                + (f", pausing {retry_after:.0f}s" if retry_after else "")
                + "[/yellow]"
            )

    async def acquire(self) -> None:
        """Waits until the next call may go out under the current rate."""
        async with self._lock:
            if (
                self._rate < self._max_rate
                and time.monotonic() - self._last_429_time > self._recovery_delay_s
            ):
                self._rate = min(self._max_rate, self._rate * 1.005)

            loop = asyncio.get_running_loop()
            ready_at = max(self._blocked_until, self._last_call_time + self.min_interval)
            delay = ready_at - loop.time()
            if delay > 0:
                await asyncio.sleep(delay)

            self._last_call_time = loop.time()
