"""Order lookups for customers and the admin panel."""
from typing import Any, Optional

from octamart.errors import ERROR_ORDER_NOT_FOUND, NotFoundError
from octamart.logging import get_logger, sanitize_id_for_logging
from octamart.services.models import UserProfile
from .serializer import build_order_payload, serialize_orders

logger = get_logger(__name__)


class OrderService:
    def __init__(self, db):
        self.db = db

    async def list_for_user(self, user_id: str, page: int = 1, limit: int = 10) -> tuple[list[dict[str, Any]], int]:
        orders, total = await self.db.orders.get_by_user(user_id, page=page, limit=limit)
        return await serialize_orders(self.db, orders), total

    async def get_for_user(self, order_id: str, user: UserProfile) -> dict[str, Any]:
        """Order detail. Other users' orders look missing unless the caller is admin."""
        order = await self.db.orders.get_by_id(order_id)
        if not order or (order.user_id != user.id and not user.is_admin):
            raise NotFoundError(ERROR_ORDER_NOT_FOUND)
        items = await self.db.orders.get_items(order.id)
        products = await self.db.products.get_many([i.product_id for i in items if not i.product_name])
        customer = user if order.user_id == user.id else await self.db.users.get_by_id(order.user_id)
        return build_order_payload(order, items, products, customer)

    async def admin_list(
        self,
        status: Optional[str] = None,
        customer_email: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[dict[str, Any]], int]:
        orders, total = await self.db.orders.paginate(
            status=status.lower() if status else None,
            customer_email=customer_email,
            page=page,
            limit=limit,
        )
        return await serialize_orders(self.db, orders), total

    async def admin_get(self, order_id: str) -> dict[str, Any]:
        order = await self.db.orders.get_by_id(order_id)
        if not order:
            raise NotFoundError(ERROR_ORDER_NOT_FOUND)
        return (await serialize_orders(self.db, [order]))[0]

    async def admin_delete(self, order_id: str) -> None:
        if not await self.db.orders.delete(order_id):
            raise NotFoundError(ERROR_ORDER_NOT_FOUND)
        logger.info(f"Order {sanitize_id_for_logging(order_id)} deleted by admin")
