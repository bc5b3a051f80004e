"""
Fixed-window request counters keyed by client IP.

The limiter only needs "increment and report the count for this window";
the counters themselves live in a swappable store. The in-process store
suits a single instance, the Redis store shares counts across instances.
"""
from functools import lru_cache
import logging
import threading
import time

import redis
from fastapi import Request

from .config import settings
from .exceptions import TooManyRequestsError

logger = logging.getLogger(__name__)


class RateLimitStore:
    def hit(self, key: str, window_seconds: int) -> int:
        """Count one request for key and return the count in the current window."""
        raise NotImplementedError

    def reset(self, key: str = None) -> None:
        """Forget one key, or every key when none is given."""
        raise NotImplementedError


class MemoryRateLimitStore(RateLimitStore):
    """Process-local counters; an expired window is replaced on its next hit."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._windows = {}

    def hit(self, key: str, window_seconds: int) -> int:
        now = self._clock()
        with self._lock:
            window = self._windows.get(key)
            if window is None or now > window[1]:
                self._windows[key] = [1, now + window_seconds]
                return 1
            window[0] += 1
            return window[0]

    def reset(self, key: str = None) -> None:
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)


class RedisRateLimitStore(RateLimitStore):
    def __init__(self, client):
        self.client = client

    def hit(self, key: str, window_seconds: int) -> int:
        pipe = self.client.pipeline()
        pipe.incr(key)
        pipe.ttl(key)
        count, ttl = pipe.execute()
        # First hit of a window, or a key that lost its expiry
        if count == 1 or ttl == -1:
            self.client.expire(key, window_seconds)
        return int(count)

    def reset(self, key: str = None) -> None:
        if key is not None:
            self.client.delete(key)
            return
        keys = list(self.client.scan_iter(match="rate_limit:*"))
        if keys:
            self.client.delete(*keys)


@lru_cache()
def get_rate_limit_store() -> RateLimitStore:
    """Build the store selected by RATE_LIMIT_BACKEND."""
    if settings.RATE_LIMIT_BACKEND == "redis":
        logger.info("Using Redis rate limit store")
        return RedisRateLimitStore(redis.from_url(settings.REDIS_URL, decode_responses=True))
    return MemoryRateLimitStore()


class RateLimiter:
    """FastAPI dependency that rejects a client once its window budget is spent."""

    def __init__(self, scope: str, max_requests: int, window_seconds: int, store: RateLimitStore = None):
        self.scope = scope
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._store = store

    @property
    def store(self) -> RateLimitStore:
        return self._store or get_rate_limit_store()

    async def __call__(self, request: Request) -> None:
        client_ip = request.client.host if request.client else "unknown"
        key = f"rate_limit:{self.scope}:{client_ip}"

        count = self.store.hit(key, self.window_seconds)
        if count > self.max_requests:
            logger.warning(f"Rate limit exceeded for {client_ip} on {self.scope} ({count}/{self.max_requests})")
            raise TooManyRequestsError()


global_rate_limit = RateLimiter(
    "global",
    settings.RATE_LIMIT_MAX_REQUESTS,
    settings.RATE_LIMIT_WINDOW_SECONDS,
)

appointment_rate_limit = RateLimiter(
    "appointments",
    settings.APPOINTMENT_RATE_LIMIT_MAX_REQUESTS,
    settings.APPOINTMENT_RATE_LIMIT_WINDOW_SECONDS,
)
