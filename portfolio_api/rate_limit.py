"""Fixed-window, per-client rate limiting for public endpoints."""

import math
import time
import logging
import ipaddress
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional
from fastapi import HTTPException, Request, Response, status

# Configure logging
logger = logging.getLogger(__name__)

CONTACT_RATE_LIMIT_MESSAGE = "Too many contact form submissions. Please try again later."


@dataclass
class RateLimitResult:
    """Result of counting one request against its window."""

    allowed: bool
    limit: int
    remaining: int
    reset_after: int


@dataclass
class _Window:
    reset_at: float
    count: int = 0


class FixedWindowRateLimiter:
    """
    Count requests per key in fixed, non-sliding windows.

    State is process-local and lost on restart. Every ``hit`` counts, whether
    or not the request is later accepted by the handler.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")

        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: Dict[str, _Window] = {}
        self._lock = threading.Lock()

    def hit(self, key: str) -> RateLimitResult:
        """
        Count a request for ``key``.

        Args:
            key: Client identifier, usually an IP address

        Returns:
            RateLimitResult: Whether the request fits in the current window
        """
        with self._lock:
            now = self._clock()
            window = self._windows.get(key)
            if window is None or now >= window.reset_at:
                self._prune(now)
                window = _Window(reset_at=now + self.window_seconds)
                self._windows[key] = window

            window.count += 1
            return RateLimitResult(
                allowed=window.count <= self.max_requests,
                limit=self.max_requests,
                remaining=max(0, self.max_requests - window.count),
                reset_after=max(0, math.ceil(window.reset_at - now)),
            )

    def reset(self):
        """Forget all counters."""
        with self._lock:
            self._windows.clear()

    def _prune(self, now: float):
        expired = [key for key, window in self._windows.items() if now >= window.reset_at]
        for key in expired:
            del self._windows[key]


def client_ip(request: Request, trust_proxy: bool = False) -> Optional[str]:
    """Return the caller's IP, honouring X-Forwarded-For only when trusted."""
    if trust_proxy:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            return forwarded.split(",")[0].strip()
    if request.client is None:
        return None
    return request.client.host


def is_local_address(ip: Optional[str]) -> bool:
    """True for loopback and private-range addresses."""
    if not ip:
        return False
    try:
        address = ipaddress.ip_address(ip)
    except ValueError:
        return False
    return address.is_loopback or address.is_private


def contact_rate_limit(request: Request, response: Response) -> None:
    """
    Dependency applying the contact form limiter.

    Raises:
        HTTPException: 429 once the caller exceeds the window's quota
    """
    settings = request.app.state.settings
    limiter: FixedWindowRateLimiter = request.app.state.contact_limiter
    ip = client_ip(request, settings.trust_proxy)

    if settings.dev_mode and is_local_address(ip):
        logger.debug(f"Rate limit bypassed for local address in development: {ip}")
        return

    result = limiter.hit(ip or "unknown")
    headers = {
        "RateLimit-Limit": str(result.limit),
        "RateLimit-Remaining": str(result.remaining),
        "RateLimit-Reset": str(result.reset_after),
    }

    if not result.allowed:
        logger.warning(f"Contact rate limit exceeded for: {ip}")
        headers["Retry-After"] = str(result.reset_after)
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=CONTACT_RATE_LIMIT_MESSAGE,
            headers=headers,
        )

    response.headers.update(headers)
