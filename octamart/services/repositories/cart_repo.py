"""Cart Repository - Server-side cart rows."""
from typing import Optional

from .base import BaseRepository
from octamart.services.models import CartItemRow


class CartRepository(BaseRepository):
    """cart_items database operations."""

    table_name = "cart_items"

    async def get_items(self, user_id: str) -> list[CartItemRow]:
        """Cart rows of a user with the joined product, oldest first."""
        result = await (
            self.table()
            .select("*, products(*)")
            .eq("user_id", user_id)
            .order("created_at")
            .execute()
        )
        return [CartItemRow(**row) for row in result.data or []]

    async def get_item(self, item_id: str) -> Optional[CartItemRow]:
        result = await self.table().select("*").eq("id", item_id).limit(1).execute()
        return CartItemRow(**result.data[0]) if result.data else None

    async def find(self, user_id: str, product_id: str) -> Optional[CartItemRow]:
        result = await (
            self.table()
            .select("*")
            .eq("user_id", user_id)
            .eq("product_id", product_id)
            .limit(1)
            .execute()
        )
        return CartItemRow(**result.data[0]) if result.data else None

    async def add(self, user_id: str, product_id: str, quantity: int) -> CartItemRow:
        result = await self.table().insert({
            "user_id": user_id,
            "product_id": product_id,
            "quantity": quantity,
        }).execute()
        return CartItemRow(**result.data[0])

    async def set_quantity(self, item_id: str, quantity: int) -> Optional[CartItemRow]:
        result = await self.table().update({"quantity": quantity}).eq("id", item_id).execute()
        return CartItemRow(**result.data[0]) if result.data else None

    async def delete(self, item_id: str) -> None:
        await self.table().delete().eq("id", item_id).execute()

    async def delete_many(self, user_id: str, item_ids: list[str]) -> None:
        if not item_ids:
            return
        await self.table().delete().eq("user_id", user_id).in_("id", item_ids).execute()
