from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

DEFAULT_CLIENT_IP = "127.0.0.1"

# prune finished windows once this many clients are tracked
_PRUNE_THRESHOLD = 1024


@dataclass
class _Window:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_in: float


class RateLimiter:
    """Fixed-window request counter per client key."""

    def __init__(
        self,
        max_requests: int = 30,
        window_seconds: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests < 1:
            raise ValueError("max_requests must be >= 1")
        self._max_requests = max_requests
        self._window = float(window_seconds)
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def check(self, client_key: str) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            if len(self._windows) >= _PRUNE_THRESHOLD:
                self._prune(now)

            current = self._windows.get(client_key)
            if current is None or now >= current.reset_at:
                self._windows[client_key] = _Window(
                    count=1, reset_at=now + self._window
                )
                return RateLimitDecision(
                    allowed=True,
                    remaining=self._max_requests - 1,
                    reset_in=self._window,
                )

            reset_in = current.reset_at - now
            if current.count >= self._max_requests:
                return RateLimitDecision(allowed=False, remaining=0, reset_in=reset_in)

            current.count += 1
            return RateLimitDecision(
                allowed=True,
                remaining=self._max_requests - current.count,
                reset_in=reset_in,
            )

    def _prune(self, now: float) -> None:
        for key in [k for k, w in self._windows.items() if now >= w.reset_at]:
            del self._windows[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._windows)


def client_ip_from_headers(
    headers: Mapping[str, str], fallback: Optional[str] = None
) -> str:
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()
    return fallback or DEFAULT_CLIENT_IP
