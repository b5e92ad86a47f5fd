"""Catalog Domain Service.

Public product listing plus the admin product and category operations.
"""
from typing import Any, Optional

from octamart import config
from octamart.errors import (
    ERROR_PRODUCT_CATEGORY_REQUIRED,
    ERROR_PRODUCT_NAME_REQUIRED,
    ERROR_PRODUCT_NOT_FOUND,
    ERROR_PRODUCT_PRICE_INVALID,
    ERROR_PRODUCT_STOCK_INVALID,
    NotFoundError,
    ValidationError,
)
from octamart.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from octamart.services.models import Product
from octamart.services.money import to_decimal, to_float, to_json_number

logger = get_logger(__name__)

# Columns an admin may write
PRODUCT_FIELDS = ("name", "price", "description", "image", "category", "stock")


def product_to_dict(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "price": to_json_number(product.price),
        "description": product.description,
        "image": product.image or config.PLACEHOLDER_IMAGE,
        "category": product.category,
        "stock": product.stock,
        "rating": product.rating,
        "reviewsCount": product.reviews_count,
        "createdAt": product.created_at.isoformat() if product.created_at else None,
        "updatedAt": product.updated_at.isoformat() if product.updated_at else None,
    }


def validate_product_fields(data: dict[str, Any], partial: bool = False) -> dict[str, Any]:
    """
    Check admin product input and return the columns to write.

    With partial=True only the supplied (non-None) fields are checked.
    """
    clean = {k: v for k, v in data.items() if k in PRODUCT_FIELDS and v is not None}

    if "name" in clean or not partial:
        name = (clean.get("name") or "").strip()
        if not name:
            raise ValidationError(ERROR_PRODUCT_NAME_REQUIRED)
        clean["name"] = name

    if "price" in clean or not partial:
        price = to_decimal(clean.get("price"))
        if price <= 0:
            raise ValidationError(ERROR_PRODUCT_PRICE_INVALID)
        clean["price"] = to_float(price)

    if "stock" in clean or not partial:
        stock = clean.get("stock", 0)
        if stock is None or int(stock) != stock or stock < 0:
            raise ValidationError(ERROR_PRODUCT_STOCK_INVALID)
        clean["stock"] = int(stock)

    if "category" in clean or not partial:
        category = (clean.get("category") or "").strip()
        if not category:
            raise ValidationError(ERROR_PRODUCT_CATEGORY_REQUIRED)
        clean["category"] = category

    for key in ("description", "image"):
        if key in clean:
            clean[key] = clean[key].strip() or None

    return clean


class CatalogService:
    """Product catalog domain service."""

    def __init__(self, db) -> None:
        self.db = db

    async def list_products(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        page: int = 1,
        limit: int = config.DEFAULT_PAGE_SIZE,
    ) -> tuple[list[dict[str, Any]], int]:
        if search:
            # PostgREST or_ syntax breaks on these
            search = search.replace(",", " ").replace("(", " ").replace(")", " ").strip()
        products, total = await self.db.products.paginate(
            category=category or None,
            search=search or None,
            min_price=min_price,
            max_price=max_price,
            page=page,
            limit=limit,
        )
        return [product_to_dict(p) for p in products], total

    async def get_product(self, product_id: str) -> Product:
        product = await self.db.products.get_by_id(product_id)
        if not product:
            raise NotFoundError(ERROR_PRODUCT_NOT_FOUND)
        return product

    async def list_categories(self) -> list[str]:
        """Distinct categories, case-insensitively deduplicated, sorted."""
        seen: dict[str, str] = {}
        for category in await self.db.products.get_categories():
            seen.setdefault(category.strip().lower(), category.strip())
        return sorted(seen.values(), key=str.lower)

    async def category_counts(self) -> list[dict[str, Any]]:
        counts: dict[str, dict[str, Any]] = {}
        for category in await self.db.products.get_categories():
            key = category.strip().lower()
            entry = counts.setdefault(key, {"name": category.strip(), "productCount": 0})
            entry["productCount"] += 1
        return sorted(counts.values(), key=lambda c: c["name"].lower())

    async def rename_category(self, old_name: str, new_name: str) -> int:
        old_name, new_name = (old_name or "").strip(), (new_name or "").strip()
        if not old_name or not new_name:
            raise ValidationError(ERROR_PRODUCT_CATEGORY_REQUIRED)
        updated = await self.db.products.rename_category(old_name, new_name)
        if not updated:
            raise NotFoundError(f"Category '{old_name}' not found")
        logger.info(
            f"Renamed category {sanitize_string_for_logging(old_name)} -> "
            f"{sanitize_string_for_logging(new_name)} ({updated} products)"
        )
        return updated

    # ==================== ADMIN ====================

    async def create_product(self, data: dict[str, Any]) -> Product:
        product = await self.db.products.create(validate_product_fields(data))
        logger.info(f"Product {sanitize_id_for_logging(product.id)} created")
        return product

    async def update_product(self, product_id: str, data: dict[str, Any]) -> Product:
        update = validate_product_fields(data, partial=True)
        if not update:
            return await self.get_product(product_id)
        product = await self.db.products.update(product_id, update)
        if not product:
            raise NotFoundError(ERROR_PRODUCT_NOT_FOUND)
        logger.info(f"Product {sanitize_id_for_logging(product_id)} updated: {sorted(update)}")
        return product

    async def delete_product(self, product_id: str) -> None:
        if not await self.db.products.delete(product_id):
            raise NotFoundError(ERROR_PRODUCT_NOT_FOUND)
        logger.info(f"Product {sanitize_id_for_logging(product_id)} deleted")

    async def low_stock(self, threshold: int = config.LOW_STOCK_THRESHOLD) -> list[dict[str, Any]]:
        return [product_to_dict(p) for p in await self.db.products.get_low_stock(threshold)]
