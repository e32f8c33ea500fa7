"""
Rate limiting for the LLM-backed /api/ai endpoints
Uses in-memory storage with sliding window algorithm
"""
import hashlib
import time
from collections import defaultdict
from typing import Dict, Tuple

from fastapi import Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from store_admin.core.auth import SESSION_COOKIES, is_internal_call
from store_admin.core.config import settings


class RateLimiter:
    """
    In-memory rate limiter using sliding window algorithm.

    For production with multiple instances, consider using Redis.
    """

    def __init__(self, cleanup_interval: int = 60):
        # {identifier: [timestamp, ...]}
        self._requests: Dict[str, list] = defaultdict(list)
        self._last_cleanup = time.time()
        self._cleanup_interval = cleanup_interval

    def _cleanup_old_entries(self, window_seconds: int = 60):
        """Remove entries older than twice the window"""
        now = time.time()

        if now - self._last_cleanup < self._cleanup_interval:
            return

        cutoff = now - window_seconds * 2

        for identifier in list(self._requests.keys()):
            self._requests[identifier] = [ts for ts in self._requests[identifier] if ts > cutoff]
            if not self._requests[identifier]:
                del self._requests[identifier]

        self._last_cleanup = now

    def is_allowed(
        self,
        identifier: str,
        max_requests: int,
        window_seconds: int = 60
    ) -> Tuple[bool, int, int]:
        """
        Check if a request is allowed under the rate limit.

        Returns:
            Tuple of (is_allowed, remaining_requests, retry_after_seconds)
        """
        self._cleanup_old_entries(window_seconds)

        now = time.time()
        window_start = now - window_seconds

        requests_in_window = [ts for ts in self._requests[identifier] if ts > window_start]

        if len(requests_in_window) >= max_requests:
            oldest_timestamp = min(requests_in_window)
            retry_after = int(oldest_timestamp + window_seconds - now) + 1
            return False, 0, retry_after

        self._requests[identifier].append(now)

        remaining = max_requests - len(requests_in_window) - 1
        return True, remaining, 0

    def reset(self):
        self._requests.clear()


# Global rate limiter instance
rate_limiter = RateLimiter()

RATE_LIMITED_PREFIX = "/api/ai/"


class AIRateLimitMiddleware(BaseHTTPMiddleware):
    """
    Applies AI_RATE_LIMIT_PER_MINUTE to /api/ai/* per caller.

    Internal calls from the actions dispatcher are exempt: the dispatcher
    request itself was already counted.

    Headers returned:
    - X-RateLimit-Limit: Maximum requests per window
    - X-RateLimit-Remaining: Remaining requests in current window
    - Retry-After: Seconds until a slot frees up (when limited)
    """

    async def dispatch(self, request: Request, call_next):
        if not request.url.path.startswith(RATE_LIMITED_PREFIX) or request.method != "POST":
            return await call_next(request)

        if is_internal_call(request):
            return await call_next(request)

        limit = settings.AI_RATE_LIMIT_PER_MINUTE
        identifier = self._get_identifier(request)

        is_allowed, remaining, retry_after = rate_limiter.is_allowed(
            identifier=identifier,
            max_requests=limit,
            window_seconds=60
        )

        if not is_allowed:
            # JSONResponse instead of HTTPException so CORS middleware still applies
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"error": "Rate limit exceeded. Please slow down."},
                headers={
                    "X-RateLimit-Limit": str(limit),
                    "X-RateLimit-Remaining": "0",
                    "Retry-After": str(retry_after),
                }
            )

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(limit)
        response.headers["X-RateLimit-Remaining"] = str(remaining)

        return response

    def _get_identifier(self, request: Request) -> str:
        """
        Priority:
        1. Session token (Authorization header or NextAuth cookie)
        2. IP address
        """
        token = None
        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            token = auth_header[len("Bearer "):]
        else:
            for cookie_name in SESSION_COOKIES:
                token = request.cookies.get(cookie_name)
                if token:
                    break

        if token:
            digest = hashlib.sha256(token.encode()).hexdigest()[:16]
            return f"session:{digest}"

        return f"ip:{self._get_client_ip(request)}"

    def _get_client_ip(self, request: Request) -> str:
        """Get the client IP, considering proxies"""
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        if request.client:
            return request.client.host

        return "unknown"
