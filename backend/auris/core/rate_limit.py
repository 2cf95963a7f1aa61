# auris/core/rate_limit.py
import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Callable, Dict, Iterable, Optional

from redis import Redis
from redis.exceptions import RedisError

from auris.core.settings import Settings

log = logging.getLogger("uvicorn.error")

# Checked in order; the first present header wins.
CLIENT_IP_HEADERS = (
    "x-client-ip",
    "cf-connecting-ip",
    "fastly-client-ip",
    "true-client-ip",
    "x-real-ip",
    "x-forwarded-for",
)


def _now_ms() -> int:
    return int(time.time() * 1000)


def get_client_ip(headers, peer: Optional[str] = None) -> Optional[str]:
    for name in CLIENT_IP_HEADERS:
        value = headers.get(name)
        if value:
            return value.split(",")[0].strip() or None
    return peer or None


@dataclass
class RateLimitEntry:
    client_key: str
    count: int
    expires_at: int


class InMemoryRateLimitStore:
    """Fixed-window counter per client key, local to this process."""

    backend = "memory"

    def __init__(
        self,
        max_requests: int = 5,
        window_ms: int = 60_000,
        clock: Callable[[], int] = _now_ms,
    ):
        self.max_requests = max_requests
        self.window_ms = window_ms
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}
        self._lock = Lock()

    def _sweep(self, now: int) -> None:
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for key in expired:
            del self._entries[key]

    def hit(self, client_key: str) -> bool:
        """Record a request; False when the key is over its budget."""
        with self._lock:
            now = self._clock()
            self._sweep(now)
            entry = self._entries.get(client_key)
            if entry is not None and entry.expires_at > now:
                if entry.count >= self.max_requests:
                    return False
                entry.count += 1
                return True
            self._entries[client_key] = RateLimitEntry(
                client_key=client_key, count=1, expires_at=now + self.window_ms
            )
            return True

    def entries(self) -> Iterable[RateLimitEntry]:
        with self._lock:
            return [RateLimitEntry(e.client_key, e.count, e.expires_at) for e in self._entries.values()]


class RedisRateLimitStore:
    """Same window semantics shared across instances; fails open on Redis errors."""

    backend = "redis"

    def __init__(self, client: Redis, max_requests: int = 5, window_ms: int = 60_000, prefix: str = "auris:rl:"):
        self.client = client
        self.max_requests = max_requests
        self.window_ms = window_ms
        self.prefix = prefix

    def hit(self, client_key: str) -> bool:
        key = f"{self.prefix}{client_key}"
        try:
            # MULTI/EXEC: a counter never exists without its window expiry
            pipe = self.client.pipeline(transaction=True)
            pipe.set(key, 0, px=self.window_ms, nx=True)
            pipe.incr(key)
            _, count = pipe.execute()
            count = int(count)
        except RedisError as exc:
            log.warning(f"[rate_limit] Redis hit failed for {client_key}: {exc}")
            return True
        return count <= self.max_requests


def build_rate_limit_store(cfg: Settings):
    if cfg.redis_url:
        try:
            client = Redis.from_url(cfg.redis_url, decode_responses=True)
            return RedisRateLimitStore(
                client,
                max_requests=cfg.rate_limit_max_requests,
                window_ms=cfg.rate_limit_window_ms,
            )
        except Exception as exc:
            log.warning(f"[rate_limit] Redis init failed, using in-memory store: {exc}")
    return InMemoryRateLimitStore(
        max_requests=cfg.rate_limit_max_requests,
        window_ms=cfg.rate_limit_window_ms,
    )
