"""Product Repository - Product catalog operations."""
from datetime import datetime, timezone
from typing import Any, Optional

from .base import BaseRepository
from octamart.services.models import Product


class ProductRepository(BaseRepository):
    """Product database operations."""

    table_name = "products"

    async def paginate(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[Product], int]:
        """Filtered, paginated catalog newest first. Returns (products, total)."""
        query = self.table().select("*", count="exact")
        if category:
            # ilike without wildcards is a case-insensitive equality
            query = query.ilike("category", category)
        if search:
            query = query.or_(f"name.ilike.%{search}%,description.ilike.%{search}%")
        if min_price is not None:
            query = query.gte("price", min_price)
        if max_price is not None:
            query = query.lte("price", max_price)

        start, end = self.page_range(page, limit)
        result = await query.order("created_at", desc=True).range(start, end).execute()
        products = [Product(**p) for p in result.data or []]
        return products, result.count or 0

    async def get_all(self) -> list[Product]:
        result = await self.table().select("*").order("created_at", desc=True).execute()
        return [Product(**p) for p in result.data or []]

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        result = await self.table().select("*").eq("id", product_id).limit(1).execute()
        return Product(**result.data[0]) if result.data else None

    async def get_many(self, product_ids: list[str]) -> dict[str, Product]:
        if not product_ids:
            return {}
        result = await self.table().select("*").in_("id", list(set(product_ids))).execute()
        return {str(p["id"]): Product(**p) for p in result.data or []}

    async def get_low_stock(self, threshold: int) -> list[Product]:
        result = await self.table().select("*").lte("stock", threshold).order("stock").execute()
        return [Product(**p) for p in result.data or []]

    async def get_categories(self) -> list[str]:
        """Raw category values of all products (may contain duplicates)."""
        result = await self.table().select("category").execute()
        return [row["category"] for row in result.data or [] if row.get("category")]

    async def create(self, data: dict[str, Any]) -> Product:
        result = await self.table().insert(data).execute()
        return Product(**result.data[0])

    async def update(self, product_id: str, data: dict[str, Any]) -> Optional[Product]:
        data = {**data, "updated_at": datetime.now(timezone.utc).isoformat()}
        result = await self.table().update(data).eq("id", product_id).execute()
        return Product(**result.data[0]) if result.data else None

    async def delete(self, product_id: str) -> bool:
        result = await self.table().delete().eq("id", product_id).execute()
        return bool(result.data)

    async def set_stock(self, product_id: str, stock: int) -> None:
        await self.update(product_id, {"stock": max(stock, 0)})

    async def update_rating(self, product_id: str, rating: float, reviews_count: int) -> None:
        await self.update(product_id, {"rating": rating, "reviews_count": reviews_count})

    async def rename_category(self, old_name: str, new_name: str) -> int:
        """Move every product of a category to a new name. Returns rows touched."""
        result = await (
            self.table()
            .update({"category": new_name, "updated_at": datetime.now(timezone.utc).isoformat()})
            .ilike("category", old_name)
            .execute()
        )
        return len(result.data or [])
