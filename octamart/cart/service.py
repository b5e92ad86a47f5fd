"""Cart service over the cart_items table."""
from typing import Optional

from octamart.errors import (
    ERROR_CART_ITEM_NOT_FOUND,
    ERROR_INSUFFICIENT_STOCK,
    ERROR_INVALID_QUANTITY,
    ERROR_PRODUCT_NOT_FOUND,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from octamart.logging import get_logger, sanitize_id_for_logging
from octamart.services.models import CartItemRow
from .pricing import CartSummary, PricedItem, summarize

logger = get_logger(__name__)


def to_priced_item(row: CartItemRow) -> Optional[PricedItem]:
    """Priced view of a cart row; rows whose product is gone are dropped."""
    product = row.products
    if product is None:
        return None
    return PricedItem(
        product_id=product.id,
        name=product.name,
        price=product.price,
        quantity=row.quantity,
        image=product.image,
        stock=product.stock,
        cart_item_id=row.id,
    )


class CartService:
    """
    Server-side cart of a signed-in user.

    Every quantity change is checked against current stock; checkout
    re-checks because stock can move between add and pay.
    """

    def __init__(self, db):
        self.db = db

    async def get_items(self, user_id: str, item_ids: Optional[list[str]] = None) -> list[PricedItem]:
        rows = await self.db.cart.get_items(user_id)
        if item_ids:
            wanted = set(item_ids)
            rows = [row for row in rows if row.id in wanted]
        items = []
        for row in rows:
            item = to_priced_item(row)
            if item is None:
                logger.warning(f"Cart item {sanitize_id_for_logging(row.id)} points to a missing product")
                continue
            items.append(item)
        return items

    async def get_summary(self, user_id: str, item_ids: Optional[list[str]] = None) -> CartSummary:
        return summarize(await self.get_items(user_id, item_ids))

    async def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> CartItemRow:
        """Add a product, merging with an existing row for the same product."""
        if quantity < 1:
            raise ValidationError(ERROR_INVALID_QUANTITY)

        product = await self.db.products.get_by_id(product_id)
        if not product:
            raise NotFoundError(ERROR_PRODUCT_NOT_FOUND)

        existing = await self.db.cart.find(user_id, product_id)
        new_quantity = quantity + (existing.quantity if existing else 0)
        if new_quantity > product.stock:
            raise ConflictError(f"{ERROR_INSUFFICIENT_STOCK}: only {product.stock} left")

        if existing:
            row = await self.db.cart.set_quantity(existing.id, new_quantity)
            logger.info(f"Cart item {sanitize_id_for_logging(existing.id)} quantity -> {new_quantity}")
            return row
        row = await self.db.cart.add(user_id, product_id, quantity)
        logger.info(
            f"User {sanitize_id_for_logging(user_id)} added product "
            f"{sanitize_id_for_logging(product_id)} x{quantity} to cart"
        )
        return row

    async def _get_own_item(self, user_id: str, item_id: str) -> CartItemRow:
        row = await self.db.cart.get_item(item_id)
        # Someone else's row is reported as missing, not forbidden
        if not row or row.user_id != user_id:
            raise NotFoundError(ERROR_CART_ITEM_NOT_FOUND)
        return row

    async def update_quantity(self, user_id: str, item_id: str, quantity: int) -> Optional[CartItemRow]:
        """Set an absolute quantity. Zero or less removes the row and returns None."""
        row = await self._get_own_item(user_id, item_id)
        if quantity <= 0:
            await self.db.cart.delete(row.id)
            return None

        product = await self.db.products.get_by_id(row.product_id)
        if not product:
            raise NotFoundError(ERROR_PRODUCT_NOT_FOUND)
        if quantity > product.stock:
            raise ConflictError(f"{ERROR_INSUFFICIENT_STOCK}: only {product.stock} left")
        return await self.db.cart.set_quantity(row.id, quantity)

    async def remove_item(self, user_id: str, item_id: str) -> None:
        row = await self._get_own_item(user_id, item_id)
        await self.db.cart.delete(row.id)

    async def clear_items(self, user_id: str, item_ids: list[str]) -> None:
        """Drop rows that were checked out."""
        await self.db.cart.delete_many(user_id, item_ids)
