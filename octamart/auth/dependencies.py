"""FastAPI dependencies for the signed-in user.

The access token is checked against Supabase Auth and the profile row is
cached per request, so several dependencies asking for the user cost one
lookup.
"""
from contextvars import ContextVar
from typing import Optional

from fastapi import Depends, Header, HTTPException
from supabase import AuthError

from octamart.errors import (
    ERROR_ACCOUNT_DEACTIVATED,
    ERROR_ADMIN_REQUIRED,
    ERROR_INVALID_TOKEN,
    ERROR_UNAUTHORIZED,
)
from octamart.logging import get_logger
from octamart.services.database import get_database
from octamart.services.models import UserProfile

logger = get_logger(__name__)

# Context variable for caching profiles within a single request
_profile_cache: ContextVar[Optional[dict[str, UserProfile]]] = ContextVar("_profile_cache", default=None)


def _get_profile_cache() -> dict[str, UserProfile]:
    cache = _profile_cache.get()
    if cache is None:
        cache = {}
        _profile_cache.set(cache)
    return cache


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail=ERROR_UNAUTHORIZED)
    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise HTTPException(status_code=401, detail=ERROR_INVALID_TOKEN)
    return parts[1]


async def get_access_token(authorization: str = Header(None, alias="Authorization")) -> str:
    return extract_bearer_token(authorization)


async def verify_user(token: str = Depends(get_access_token)) -> UserProfile:
    """
    Resolve the bearer token to an active profile.

    Usage:
        @router.get("/cart")
        async def get_cart(user: UserProfile = Depends(verify_user)):
            ...
    """
    cache = _get_profile_cache()
    if token in cache:
        return cache[token]

    db = get_database()
    try:
        response = await db.client.auth.get_user(token)
    except AuthError as e:
        logger.info(f"Rejected access token: {e}")
        raise HTTPException(status_code=401, detail=ERROR_INVALID_TOKEN)

    auth_user = response.user if response else None
    if not auth_user:
        raise HTTPException(status_code=401, detail=ERROR_INVALID_TOKEN)

    profile = await db.get_user_by_id(auth_user.id)
    if not profile:
        raise HTTPException(status_code=401, detail=ERROR_INVALID_TOKEN)
    if not profile.is_active:
        raise HTTPException(status_code=403, detail=ERROR_ACCOUNT_DEACTIVATED)

    cache[token] = profile
    return profile


async def verify_admin(user: UserProfile = Depends(verify_user)) -> UserProfile:
    """Verify that the signed-in user is an admin."""
    if not user.is_admin:
        raise HTTPException(status_code=403, detail=ERROR_ADMIN_REQUIRED)
    return user
