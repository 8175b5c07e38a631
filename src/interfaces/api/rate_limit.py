"""Per-client request rate limiting for the API.

Each client key (the remote address) gets its own token bucket. A bucket
holds up to ``max_requests`` tokens and refills at
``max_requests / window_seconds`` tokens per second.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass


def _validate_rate_limit_params(max_requests: int, window_seconds: float) -> None:
    """Validate rate limiter numeric parameters."""
    if max_requests <= 0:
        raise ValueError("max_requests must be greater than 0")
    if window_seconds <= 0:
        raise ValueError("window_seconds must be greater than 0")


@dataclass
class _Bucket:
    tokens: float
    last_update: float


class ClientRateLimiter:
    """Non-blocking token bucket limiter keyed by client.

    Usage:
        limiter = ClientRateLimiter(max_requests=10, window_seconds=900)
        retry_after = await limiter.try_acquire(client_ip)
        if retry_after:
            ...  # reject with 429
    """

    # Idle buckets are full again; drop them every N calls
    _PRUNE_EVERY = 1000

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize rate limiter.

        Args:
            max_requests: Requests allowed per window (also the burst size)
            window_seconds: Window length in seconds
            enabled: Whether limiting is active
            clock: Monotonic time source, injectable for tests
        """
        _validate_rate_limit_params(max_requests, window_seconds)
        self._capacity = float(max_requests)
        self._window = window_seconds
        self._refill_rate = max_requests / window_seconds
        self._enabled = enabled
        self._clock = clock
        self._buckets: dict[str, _Bucket] = {}
        self._lock = asyncio.Lock()
        self._calls = 0

    @property
    def is_enabled(self) -> bool:
        return self._enabled

    async def try_acquire(self, client_key: str) -> float:
        """Consume one token for a client if available.

        Args:
            client_key: Identifier of the caller

        Returns:
            0.0 if the request is allowed, otherwise seconds until it would be
        """
        if not self._enabled:
            return 0.0

        async with self._lock:
            now = self._clock()
            bucket = self._buckets.get(client_key)
            if bucket is None:
                bucket = _Bucket(tokens=self._capacity, last_update=now)
                self._buckets[client_key] = bucket
            else:
                elapsed = now - bucket.last_update
                bucket.tokens = min(
                    self._capacity, bucket.tokens + elapsed * self._refill_rate
                )
                bucket.last_update = now

            self._calls += 1
            if self._calls % self._PRUNE_EVERY == 0:
                self._prune(now)

            if bucket.tokens >= 1.0:
                bucket.tokens -= 1.0
                return 0.0

            return (1.0 - bucket.tokens) / self._refill_rate

    def _prune(self, now: float) -> None:
        stale = [
            key
            for key, bucket in self._buckets.items()
            if now - bucket.last_update >= self._window
        ]
        for key in stale:
            del self._buckets[key]
