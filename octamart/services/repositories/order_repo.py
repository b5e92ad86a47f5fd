"""Order Repository - Orders and their line items."""
from datetime import datetime, timezone
from typing import Any, Optional

from .base import BaseRepository
from octamart.services.models import Order, OrderItem


class OrderRepository(BaseRepository):
    """Order database operations."""

    table_name = "orders"

    async def create(self, data: dict[str, Any]) -> Order:
        result = await self.table().insert(data).execute()
        return Order(**result.data[0])

    async def get_by_id(self, order_id: str) -> Optional[Order]:
        result = await self.table().select("*").eq("id", order_id).limit(1).execute()
        return Order(**result.data[0]) if result.data else None

    async def update(self, order_id: str, data: dict[str, Any]) -> Optional[Order]:
        data = {**data, "updated_at": datetime.now(timezone.utc).isoformat()}
        result = await self.table().update(data).eq("id", order_id).execute()
        return Order(**result.data[0]) if result.data else None

    async def delete(self, order_id: str) -> bool:
        # order_items rows go first so no orphan lines remain
        await self.client.table("order_items").delete().eq("order_id", order_id).execute()
        result = await self.table().delete().eq("id", order_id).execute()
        return bool(result.data)

    async def get_by_user(self, user_id: str, page: int = 1, limit: int = 10) -> tuple[list[Order], int]:
        start, end = self.page_range(page, limit)
        result = await (
            self.table()
            .select("*", count="exact")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .range(start, end)
            .execute()
        )
        return [Order(**o) for o in result.data or []], result.count or 0

    async def paginate(
        self,
        status: Optional[str] = None,
        customer_email: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Order], int]:
        """Admin order listing newest first. Returns (orders, total matching)."""
        query = self.table().select("*", count="exact")
        if status:
            query = query.eq("status", status)
        if customer_email:
            query = query.ilike("customer_email", f"%{customer_email}%")
        start, end = self.page_range(page, limit)
        result = await query.order("created_at", desc=True).range(start, end).execute()
        return [Order(**o) for o in result.data or []], result.count or 0

    async def get_in_range(self, start: datetime, end: datetime) -> list[Order]:
        result = await (
            self.table()
            .select("*")
            .gte("created_at", start.isoformat())
            .lte("created_at", end.isoformat())
            .order("created_at", desc=True)
            .execute()
        )
        return [Order(**o) for o in result.data or []]

    async def get_totals(self) -> list[dict[str, Any]]:
        """Status and amount of every order (dashboard counters)."""
        result = await self.table().select("id, status, total_amount").execute()
        return result.data or []

    # ==================== ORDER ITEMS ====================

    async def create_items(self, items: list[dict[str, Any]]) -> list[OrderItem]:
        if not items:
            return []
        result = await self.client.table("order_items").insert(items).execute()
        return [OrderItem(**row) for row in result.data or []]

    async def get_items(self, order_id: str) -> list[OrderItem]:
        result = await self.client.table("order_items").select("*").eq("order_id", order_id).execute()
        return [OrderItem(**row) for row in result.data or []]

    async def get_items_for_orders(self, order_ids: list[str]) -> list[OrderItem]:
        if not order_ids:
            return []
        result = await (
            self.client.table("order_items")
            .select("*")
            .in_("order_id", order_ids)
            .execute()
        )
        return [OrderItem(**row) for row in result.data or []]
