"""Customer administration."""
from typing import Any, Optional

from octamart.errors import (
    ERROR_CANNOT_DELETE_SELF,
    ERROR_USER_NOT_FOUND,
    NotFoundError,
    ValidationError,
)
from octamart.logging import get_logger, sanitize_id_for_logging
from octamart.services.models import UserProfile, UserRole

logger = get_logger(__name__)


def user_to_dict(user: UserProfile) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "isActive": user.is_active,
        "phone": user.phone,
        "address": user.address,
        "createdAt": user.created_at.isoformat() if user.created_at else None,
    }


class CustomerService:
    def __init__(self, db) -> None:
        self.db = db

    async def list_users(
        self,
        search: Optional[str] = None,
        role: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[dict[str, Any]], int]:
        if search:
            search = search.replace(",", " ").replace("(", " ").replace(")", " ").strip()
        users, total = await self.db.users.paginate(
            search=search or None,
            role=role.lower() if role else None,
            page=page,
            limit=limit,
        )
        return [user_to_dict(u) for u in users], total

    async def update_user(
        self,
        user_id: str,
        name: Optional[str] = None,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> UserProfile:
        update: dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Name cannot be empty")
            update["name"] = name.strip()
        if role is not None:
            role = role.lower()
            if role not in {r.value for r in UserRole}:
                raise ValidationError(f"Invalid role '{role}'")
            update["role"] = role
        if is_active is not None:
            update["is_active"] = is_active

        if not update:
            user = await self.db.users.get_by_id(user_id)
        else:
            user = await self.db.users.update(user_id, update)
        if not user:
            raise NotFoundError(ERROR_USER_NOT_FOUND)
        logger.info(f"User {sanitize_id_for_logging(user_id)} updated: {sorted(update)}")
        return user

    async def update_profile(
        self,
        user: UserProfile,
        name: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> UserProfile:
        """Self-service edit of contact fields. Blank phone or address clears it."""
        update: dict[str, Any] = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Name cannot be empty")
            update["name"] = name.strip()
        if phone is not None:
            update["phone"] = phone.strip() or None
        if address is not None:
            update["address"] = address.strip() or None

        if not update:
            return user
        updated = await self.db.users.update(user.id, update)
        if not updated:
            raise NotFoundError(ERROR_USER_NOT_FOUND)
        logger.info(f"User {sanitize_id_for_logging(user.id)} updated own profile: {sorted(update)}")
        return updated

    async def delete_user(self, user_id: str, acting_admin: UserProfile) -> None:
        if user_id == acting_admin.id:
            raise ValidationError(ERROR_CANNOT_DELETE_SELF)
        if not await self.db.users.delete(user_id):
            raise NotFoundError(ERROR_USER_NOT_FOUND)
        logger.info(f"User {sanitize_id_for_logging(user_id)} deleted by {sanitize_id_for_logging(acting_admin.id)}")
