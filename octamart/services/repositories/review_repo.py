"""Review Repository - Product reviews."""
from datetime import datetime, timezone
from typing import Any, Optional

from .base import BaseRepository
from octamart.services.models import Review

SORTABLE_FIELDS = ("created_at", "updated_at", "rating")


class ReviewRepository(BaseRepository):
    """Review database operations."""

    table_name = "reviews"

    def _filtered(
        self,
        columns: str = "*",
        count: Optional[str] = None,
        product_id: Optional[str] = None,
        user_id: Optional[str] = None,
        rating: Optional[int] = None,
        verified: Optional[bool] = None,
    ):
        query = self.table().select(columns, count=count)
        if product_id:
            query = query.eq("product_id", product_id)
        if user_id:
            query = query.eq("user_id", user_id)
        if rating is not None:
            query = query.eq("rating", rating)
        if verified is not None:
            query = query.eq("verified", verified)
        return query

    async def get_by_id(self, review_id: str) -> Optional[Review]:
        result = await self.table().select("*").eq("id", review_id).limit(1).execute()
        return Review(**result.data[0]) if result.data else None

    async def find(self, user_id: str, product_id: str) -> Optional[Review]:
        result = await (
            self.table()
            .select("*")
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .limit(1)
            .execute()
        )
        return Review(**result.data[0]) if result.data else None

    async def create(self, data: dict[str, Any]) -> Review:
        result = await self.table().insert(data).execute()
        return Review(**result.data[0])

    async def update(self, review_id: str, data: dict[str, Any]) -> Optional[Review]:
        data = {**data, "updated_at": datetime.now(timezone.utc).isoformat()}
        result = await self.table().update(data).eq("id", review_id).execute()
        return Review(**result.data[0]) if result.data else None

    async def delete(self, review_id: str) -> bool:
        result = await self.table().delete().eq("id", review_id).execute()
        return bool(result.data)

    async def paginate(
        self,
        product_id: Optional[str] = None,
        user_id: Optional[str] = None,
        rating: Optional[int] = None,
        verified: Optional[bool] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Review], int]:
        if sort_by not in SORTABLE_FIELDS:
            sort_by = "created_at"
        query = self._filtered(
            count="exact",
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            verified=verified,
        )
        start, end = self.page_range(page, limit)
        result = await (
            query.order(sort_by, desc=sort_order.lower() != "asc")
            .range(start, end)
            .execute()
        )
        return [Review(**r) for r in result.data or []], result.count or 0

    async def get_all(
        self,
        product_id: Optional[str] = None,
        user_id: Optional[str] = None,
        rating: Optional[int] = None,
        verified: Optional[bool] = None,
    ) -> list[Review]:
        """Every review matching the filters, newest first (for statistics)."""
        query = self._filtered(
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            verified=verified,
        )
        result = await query.order("created_at", desc=True).execute()
        return [Review(**r) for r in result.data or []]

    async def get_ratings(self, product_id: str) -> list[int]:
        result = await self.table().select("rating").eq("product_id", product_id).execute()
        return [int(r["rating"]) for r in result.data or [] if r.get("rating") is not None]
