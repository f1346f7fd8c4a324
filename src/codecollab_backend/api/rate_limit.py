"""In-memory, per-client request throttling exposed as FastAPI dependencies."""

from __future__ import annotations

import logging
import math
import threading
import time
from collections import defaultdict, deque
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from fastapi import HTTPException, Request, status

from codecollab_backend.settings import get_settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RateLimitPolicy:
    """How many requests one client may make within a sliding window."""

    name: str
    window_seconds: int
    max_requests: int
    message: str


def _policy(name: str, window_seconds: int, max_requests: int, message: str) -> RateLimitPolicy:
    return RateLimitPolicy(name, window_seconds, max_requests, message)


RATE_LIMIT_POLICIES: dict[str, RateLimitPolicy] = {
    policy.name: policy
    for policy in (
        _policy("api", 15 * 60, 100, "Too many requests, please try again later"),
        _policy("login", 15 * 60, 5, "Too many login attempts, please try again later"),
        _policy("register", 60 * 60, 3, "Too many accounts created, please try again later"),
        _policy("group", 60 * 60, 5, "Too many groups created, please try again later"),
        _policy("join", 15 * 60, 10, "Too many join attempts, please try again later"),
        _policy("invite", 60 * 60, 10, "Too many invite codes generated, please try again later"),
        _policy("question", 60 * 60, 10, "Too many questions posted, please try again later"),
        _policy("response", 15 * 60, 30, "Too many responses submitted, please try again later"),
        _policy("feedback", 60 * 60, 20, "Too much feedback submitted, please try again later"),
        _policy("vote", 5 * 60, 50, "Too many votes, please slow down"),
        _policy("report", 60 * 60, 5, "Too many reports submitted, please try again later"),
        _policy("search", 60, 30, "Too many searches, please slow down"),
        _policy("solution", 15 * 60, 5, "Too many solutions submitted, please try again later"),
        _policy("profile", 60 * 60, 10, "Too many profile updates, please try again later"),
    )
}


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    reset_after: int
    recorded_at: float | None = None


class InMemoryRateLimiter:
    """Sliding-window limiter keyed by arbitrary strings."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._hits: defaultdict[str, deque[float]] = defaultdict(deque)
        self._lock = threading.Lock()
        self._clock = clock

    def hit(self, key: str, max_requests: int, window_seconds: int) -> RateLimitDecision:
        now = self._clock()
        with self._lock:
            hits = self._hits[key]
            cutoff = now - window_seconds
            while hits and hits[0] <= cutoff:
                hits.popleft()
            if len(hits) >= max_requests:
                reset_after = max(1, math.ceil(window_seconds - (now - hits[0])))
                return RateLimitDecision(False, 0, reset_after)
            hits.append(now)
            reset_after = max(1, math.ceil(window_seconds - (now - hits[0])))
            return RateLimitDecision(True, max_requests - len(hits), reset_after, now)

    def release(self, key: str, recorded_at: float) -> None:
        """Forget the hit recorded for *key* at *recorded_at*."""
        with self._lock:
            hits = self._hits.get(key)
            if hits is None:
                return
            try:
                hits.remove(recorded_at)
            except ValueError:
                pass
            if not hits:
                del self._hits[key]

    def tracked_keys(self) -> int:
        with self._lock:
            return len(self._hits)

    def reset(self) -> None:
        with self._lock:
            self._hits.clear()


def client_key(request: Request) -> str:
    """Identify the caller by peer address; proxy headers are resolved by uvicorn."""
    return request.client.host if request.client else "unknown"


def _limiter(request: Request) -> InMemoryRateLimiter:
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        limiter = InMemoryRateLimiter()
        request.app.state.rate_limiter = limiter
    return limiter


def _enforce(request: Request, policy: RateLimitPolicy) -> tuple[str, float] | None:
    if not get_settings().rate_limit_enabled:
        return None
    key = f"{policy.name}:{client_key(request)}"
    decision = _limiter(request).hit(key, policy.max_requests, policy.window_seconds)
    if not decision.allowed:
        logger.warning("Rate limit %s exceeded for %s", policy.name, client_key(request))
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=policy.message,
            headers={
                "Retry-After": str(decision.reset_after),
                "RateLimit-Limit": str(policy.max_requests),
                "RateLimit-Remaining": "0",
                "RateLimit-Reset": str(decision.reset_after),
            },
        )
    return key, decision.recorded_at


def rate_limit(name: str) -> Callable[[Request], None]:
    """Build a dependency enforcing the named policy for each request."""
    policy = RATE_LIMIT_POLICIES[name]

    def dependency(request: Request) -> None:
        _enforce(request, policy)

    return dependency


def rate_limit_failures(name: str) -> Callable[[Request], Iterator[None]]:
    """Build a dependency that only counts requests which end in an error."""
    policy = RATE_LIMIT_POLICIES[name]

    def dependency(request: Request) -> Iterator[None]:
        recorded = _enforce(request, policy)
        yield
        if recorded is not None:
            _limiter(request).release(*recorded)

    return dependency


__all__ = [
    "RATE_LIMIT_POLICIES",
    "InMemoryRateLimiter",
    "RateLimitDecision",
    "RateLimitPolicy",
    "client_key",
    "rate_limit",
    "rate_limit_failures",
]
