"""
Database Module - Supabase and Redis Clients

Provides singleton instances of:
- Async Supabase client (service role) for PostgreSQL and Storage
- Short-lived Supabase client for password sign-in
- Upstash Redis client for rate limiting
"""

import os
from typing import Optional

from supabase._async.client import AsyncClient, create_client as acreate_client
from supabase.lib.client_options import AsyncClientOptions
from upstash_redis.asyncio import Redis as AsyncRedis

from octamart.logging import get_logger

logger = get_logger(__name__)

SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")
# Public key used for end-user sign-in; falls back to the service key
SUPABASE_ANON_KEY = os.environ.get("SUPABASE_ANON_KEY", "") or SUPABASE_SERVICE_ROLE_KEY

UPSTASH_REDIS_REST_URL = os.environ.get("UPSTASH_REDIS_REST_URL", "")
UPSTASH_REDIS_REST_TOKEN = os.environ.get("UPSTASH_REDIS_REST_TOKEN", "")


_async_supabase_client: Optional[AsyncClient] = None
_redis_client: Optional[AsyncRedis] = None


def _require_supabase_env() -> None:
    if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")


async def get_supabase() -> AsyncClient:
    """
    Get async Supabase client (singleton).
    Uses the service role key, so row-level security is bypassed and
    ownership checks happen in the services.
    """
    global _async_supabase_client

    if _async_supabase_client is None:
        _require_supabase_env()
        _async_supabase_client = await acreate_client(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)

    return _async_supabase_client


async def create_session_client() -> AsyncClient:
    """
    Create a throwaway Supabase client for a single sign-in.

    Signing in stores the session on the client and swaps its auth header,
    so it must never happen on the shared service-role client.
    """
    _require_supabase_env()
    options = AsyncClientOptions(auto_refresh_token=False, persist_session=False)
    return await acreate_client(SUPABASE_URL, SUPABASE_ANON_KEY, options=options)


async def close_session_client(client: AsyncClient) -> None:
    """Close the HTTP transport of a client made by create_session_client()."""
    try:
        await client.auth.close()
    except Exception as e:
        logger.warning(f"Error closing sign-in client: {e}")


def is_redis_configured() -> bool:
    return bool(UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN)


def get_redis() -> AsyncRedis:
    """
    Get async Upstash Redis client (singleton).

    Uses standard Upstash env var names:
    - UPSTASH_REDIS_REST_URL
    - UPSTASH_REDIS_REST_TOKEN
    """
    global _redis_client

    if _redis_client is None:
        if not is_redis_configured():
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        _redis_client = AsyncRedis(url=UPSTASH_REDIS_REST_URL, token=UPSTASH_REDIS_REST_TOKEN)

    return _redis_client


class RedisKeys:
    """Redis key prefixes for different data types."""

    RATE_LIMIT = "rate_limit:"  # rate_limit:{ip}:{path}

    @staticmethod
    def rate_limit_key(client_ip: str, path: str) -> str:
        return f"{RedisKeys.RATE_LIMIT}{client_ip}:{path}"


class TTL:
    """Time-to-live constants for Redis keys (seconds)."""

    RATE_LIMIT_WINDOW = 60
