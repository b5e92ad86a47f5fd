"""Authentication package."""
from .dependencies import extract_bearer_token, get_access_token, verify_admin, verify_user
from .service import AuthService

__all__ = [
    "AuthService",
    "extract_bearer_token",
    "get_access_token",
    "verify_admin",
    "verify_user",
]
