"""Registration, login and logout through Supabase Auth."""
from typing import Any

from supabase import AuthError

from octamart.db import close_session_client, create_session_client
from octamart.errors import (
    ERROR_ACCOUNT_DEACTIVATED,
    ERROR_EMAIL_TAKEN,
    ERROR_INVALID_CREDENTIALS,
    AuthenticationError,
    ConflictError,
    ValidationError,
)
from octamart.logging import get_logger, mask_email_for_logging, sanitize_id_for_logging
from octamart.services.domains.users import user_to_dict
from octamart.services.models import UserRole

logger = get_logger(__name__)

MIN_PASSWORD_LENGTH = 6


def validate_registration(email: str, password: str, name: str) -> tuple[str, str, str]:
    email = (email or "").strip().lower()
    name = (name or "").strip()
    if not email or "@" not in email:
        raise ValidationError("A valid email is required")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not name:
        raise ValidationError("Name is required")
    return email, password, name


class AuthService:
    """
    Account flows.

    Sign-up and sign-in run on a throwaway client so the session they
    create never lands on the shared service-role client.
    """

    def __init__(self, db):
        self.db = db

    async def register(self, email: str, password: str, name: str) -> dict[str, Any]:
        email, password, name = validate_registration(email, password, name)
        if await self.db.users.get_by_email(email):
            raise ConflictError(ERROR_EMAIL_TAKEN)

        client = await create_session_client()
        try:
            response = await client.auth.sign_up({
                "email": email,
                "password": password,
                "options": {"data": {"name": name}},
            })
        except AuthError as e:
            logger.warning(f"Sign-up rejected for {mask_email_for_logging(email)}: {e}")
            raise ValidationError(str(e)) from e
        finally:
            await close_session_client(client)

        if not response.user:
            raise ValidationError("Registration failed")

        profile = await self.db.users.create({
            "id": response.user.id,
            "email": email,
            "name": name,
            "role": UserRole.CUSTOMER.value,
            "is_active": True,
        })
        logger.info(f"Registered user {sanitize_id_for_logging(profile.id)}")
        return user_to_dict(profile)

    async def login(self, email: str, password: str) -> dict[str, Any]:
        email = (email or "").strip().lower()
        if not email or not password:
            raise AuthenticationError(ERROR_INVALID_CREDENTIALS)

        client = await create_session_client()
        try:
            response = await client.auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            logger.info(f"Failed login for {mask_email_for_logging(email)}: {e}")
            raise AuthenticationError(ERROR_INVALID_CREDENTIALS) from e
        finally:
            await close_session_client(client)

        if not response.user or not response.session:
            raise AuthenticationError(ERROR_INVALID_CREDENTIALS)

        profile = await self.db.users.get_by_id(response.user.id)
        if not profile:
            logger.warning(f"Auth user {sanitize_id_for_logging(response.user.id)} has no profile row")
            raise AuthenticationError(ERROR_INVALID_CREDENTIALS)
        if not profile.is_active:
            raise AuthenticationError(ERROR_ACCOUNT_DEACTIVATED)

        session = response.session
        return {
            "accessToken": session.access_token,
            "refreshToken": session.refresh_token,
            "expiresIn": session.expires_in,
            "user": user_to_dict(profile),
        }

    async def logout(self, access_token: str) -> None:
        try:
            await self.db.client.auth.admin.sign_out(access_token)
        except AuthError as e:
            # Already expired or revoked tokens are logged out anyway
            logger.info(f"Sign-out of stale token: {e}")
