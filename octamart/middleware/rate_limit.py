"""Rate Limiting Middleware for FastAPI.

Provides rate limiting of the auth endpoints using Upstash Redis, with an
in-memory fallback when Redis is absent or failing.
"""

import time
from collections.abc import Callable
from typing import Any

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from octamart.db import TTL, RedisKeys
from octamart.logging import get_logger, sanitize_string_for_logging

logger = get_logger(__name__)

RATE_LIMITED_PREFIX = "/api/auth"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware using Upstash Redis.

    Limits requests per IP address per endpoint.
    """

    def __init__(
        self,
        app: Any,
        requests_per_minute: int = 30,
        redis_client: Any = None,
    ) -> None:
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.redis_client = redis_client
        self._cache: dict[str, list[float]] = {}  # Fallback in-memory cache

    async def dispatch(self, request: Request, call_next: Callable[..., Any]) -> Response:
        if not request.url.path.startswith(RATE_LIMITED_PREFIX):
            return await call_next(request)  # type: ignore[no-any-return]

        client_ip = request.client.host if request.client else "unknown"
        if forwarded_for := request.headers.get("X-Forwarded-For"):
            # First IP is the original client
            client_ip = forwarded_for.split(",")[0].strip()

        key = RedisKeys.rate_limit_key(client_ip, request.url.path)

        if await self._is_rate_limited(key):
            logger.warning(
                f"Rate limit exceeded for {sanitize_string_for_logging(client_ip)} on {request.url.path}"
            )
            # Exceptions raised here would bypass the app's exception handlers
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"success": False, "message": "Too many requests. Please try again later."},
                headers={"Retry-After": str(TTL.RATE_LIMIT_WINDOW)},
            )

        await self._record_request(key)

        return await call_next(request)  # type: ignore[no-any-return]

    async def _is_rate_limited(self, key: str) -> bool:
        if self.redis_client:
            try:
                current = await self.redis_client.get(key)
                if current:
                    return int(current) >= self.requests_per_minute
                return False
            except Exception as e:
                logger.warning(f"Redis rate limit check failed: {e}, falling back to in-memory")

        now = time.time()
        if key not in self._cache:
            return False

        self._cache[key] = [t for t in self._cache[key] if now - t < TTL.RATE_LIMIT_WINDOW]
        return len(self._cache[key]) >= self.requests_per_minute

    async def _record_request(self, key: str) -> None:
        now = time.time()

        if self.redis_client:
            try:
                current = await self.redis_client.get(key)
                if current is None:
                    await self.redis_client.setex(key, TTL.RATE_LIMIT_WINDOW, "1")
                else:
                    # Upstash REST has no atomic INCR with expiry, so read-increment-write
                    await self.redis_client.setex(key, TTL.RATE_LIMIT_WINDOW, str(int(current) + 1))
                return
            except Exception as e:
                logger.warning(f"Redis rate limit record failed: {e}, falling back to in-memory")

        self._cache.setdefault(key, []).append(now)
        self._cache[key] = [t for t in self._cache[key] if now - t < TTL.RATE_LIMIT_WINDOW]
