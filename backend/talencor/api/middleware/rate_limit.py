"""
Rate limiting using in-memory sliding window. Replace with Redis for multi-instance.
Auth: configurable attempts per window per IP (admin login, client verify).
Submit: configurable public form posts per window per IP.
"""
import time
from collections import defaultdict

from fastapi import HTTPException, Request, status

from talencor.config import get_settings
from talencor.utils.logger import get_logger

logger = get_logger(__name__)

# Maximum number of distinct keys before we evict old entries.
# Prevents unbounded memory growth from many unique IPs.
_MAX_KEYS = 10_000

# In-memory: key -> list of timestamps (for sliding window)
_auth_timestamps: dict[str, list[float]] = defaultdict(list)
_submit_timestamps: dict[str, list[float]] = defaultdict(list)


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the socket peer."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _prune_old(timestamps: list[float], window_seconds: float) -> None:
    """Remove timestamps older than the window."""
    cutoff = time.monotonic() - window_seconds
    while timestamps and timestamps[0] < cutoff:
        timestamps.pop(0)


def _evict_stale_keys(store: dict[str, list[float]], window_seconds: float) -> None:
    """Remove keys with no recent timestamps to cap memory usage."""
    if len(store) <= _MAX_KEYS:
        return
    cutoff = time.monotonic() - window_seconds
    stale = [k for k, ts in store.items() if not ts or ts[-1] < cutoff]
    for k in stale:
        del store[k]


def _check(
    store: dict[str, list[float]],
    key: str,
    limit: int,
    window: float,
    message: str,
) -> None:
    now = time.monotonic()
    _prune_old(store[key], window)
    if len(store[key]) >= limit:
        logger.warning("Rate limit exceeded", extra={"client": key[:40]})
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=message,
        )
    store[key].append(now)
    _evict_stale_keys(store, window)


def check_auth_rate_limit(request: Request) -> None:
    """Enforce auth rate limit per client IP. Call before login/verify."""
    settings = get_settings()
    _check(
        _auth_timestamps,
        get_client_ip(request),
        settings.rate_limit_auth_requests,
        settings.rate_limit_auth_window_minutes * 60,
        "Too many attempts. Try again later.",
    )


def check_submit_rate_limit(request: Request) -> None:
    """Enforce public submission rate limit per client IP."""
    settings = get_settings()
    _check(
        _submit_timestamps,
        f"submit:{get_client_ip(request)}",
        settings.rate_limit_submit_requests,
        float(settings.rate_limit_submit_window_seconds),
        "Too many submissions. Try again later.",
    )


def reset_rate_limits() -> None:
    """Forget all recorded attempts."""
    _auth_timestamps.clear()
    _submit_timestamps.clear()
