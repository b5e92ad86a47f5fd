"""User Repository - Profile rows linked to Supabase Auth users."""
from typing import Any, Optional

from .base import BaseRepository
from octamart.services.models import UserProfile


class UserRepository(BaseRepository):
    """User profile database operations."""

    table_name = "users"

    async def get_by_id(self, user_id: str) -> Optional[UserProfile]:
        result = await self.table().select("*").eq("id", user_id).limit(1).execute()
        return UserProfile(**result.data[0]) if result.data else None

    async def get_by_email(self, email: str) -> Optional[UserProfile]:
        result = await self.table().select("*").eq("email", email.lower()).limit(1).execute()
        return UserProfile(**result.data[0]) if result.data else None

    async def get_many(self, user_ids: list[str]) -> dict[str, UserProfile]:
        if not user_ids:
            return {}
        result = await self.table().select("*").in_("id", list(set(user_ids))).execute()
        return {str(row["id"]): UserProfile(**row) for row in result.data or []}

    async def create(self, data: dict[str, Any]) -> UserProfile:
        result = await self.table().insert(data).execute()
        return UserProfile(**result.data[0])

    async def update(self, user_id: str, data: dict[str, Any]) -> Optional[UserProfile]:
        result = await self.table().update(data).eq("id", user_id).execute()
        return UserProfile(**result.data[0]) if result.data else None

    async def delete(self, user_id: str) -> bool:
        result = await self.table().delete().eq("id", user_id).execute()
        return bool(result.data)

    async def paginate(
        self,
        search: Optional[str] = None,
        role: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[UserProfile], int]:
        """List profiles newest first. Returns (users, total matching)."""
        query = self.table().select("*", count="exact")
        if search:
            query = query.or_(f"name.ilike.%{search}%,email.ilike.%{search}%")
        if role:
            query = query.eq("role", role)
        start, end = self.page_range(page, limit)
        result = await query.order("created_at", desc=True).range(start, end).execute()
        users = [UserProfile(**row) for row in result.data or []]
        return users, result.count or 0
