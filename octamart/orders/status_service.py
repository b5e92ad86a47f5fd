"""
Order Status Management Service

Centralized service for order status transitions. Admin edits and
customer cancellations both go through the same whitelists.
"""
from datetime import datetime, timezone
from typing import Any, Optional

from octamart.errors import (
    ERROR_ORDER_ACCESS_DENIED,
    ERROR_ORDER_INVALID_PAYMENT_STATUS,
    ERROR_ORDER_INVALID_STATUS,
    ERROR_ORDER_NOT_CANCELLABLE,
    ERROR_ORDER_NOT_FOUND,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from octamart.logging import get_logger, sanitize_id_for_logging
from octamart.services.models import Order, OrderStatus, PaymentStatus

logger = get_logger(__name__)

# Status transition rules
STATUS_TRANSITIONS: dict[str, tuple[str, ...]] = {
    OrderStatus.PENDING.value: (OrderStatus.PROCESSING.value, OrderStatus.CANCELLED.value),
    OrderStatus.PROCESSING.value: (OrderStatus.SHIPPED.value, OrderStatus.CANCELLED.value),
    OrderStatus.SHIPPED.value: (OrderStatus.DELIVERED.value, OrderStatus.COMPLETED.value),
    OrderStatus.DELIVERED.value: (OrderStatus.COMPLETED.value,),
    OrderStatus.COMPLETED.value: (),  # Final state
    OrderStatus.CANCELLED.value: (),  # Final state
}

PAYMENT_TRANSITIONS: dict[str, tuple[str, ...]] = {
    PaymentStatus.PENDING.value: (PaymentStatus.PAID.value, PaymentStatus.FAILED.value),
    PaymentStatus.PAID.value: (PaymentStatus.REFUNDED.value,),
    PaymentStatus.FAILED.value: (PaymentStatus.PENDING.value,),
    PaymentStatus.REFUNDED.value: (),  # Final state
}


def _check(transitions: dict[str, tuple[str, ...]], current: str, target: str) -> tuple[bool, Optional[str]]:
    current = (current or "").lower()
    target = (target or "").lower()
    if target not in transitions:
        return False, f"Unknown status '{target}'"
    if current == target:
        return True, None
    allowed = transitions.get(current, ())
    if target not in allowed:
        return False, f"Cannot transition from '{current}' to '{target}'. Allowed: {list(allowed)}"
    return True, None


def can_transition(current: str, target: str) -> tuple[bool, Optional[str]]:
    """
    Check an order status change.

    Returns:
        (can_transition, reason_if_not)
    """
    return _check(STATUS_TRANSITIONS, current, target)


def can_transition_payment(current: str, target: str) -> tuple[bool, Optional[str]]:
    return _check(PAYMENT_TRANSITIONS, current, target)


class OrderStatusService:
    """Centralized service for order status management."""

    def __init__(self, db):
        self.db = db

    async def _get_order(self, order_id: str) -> Order:
        order = await self.db.orders.get_by_id(order_id)
        if not order:
            raise NotFoundError(ERROR_ORDER_NOT_FOUND)
        return order

    async def restore_stock(self, order_id: str) -> None:
        """Give the quantities of a cancelled order back to the products."""
        items = await self.db.orders.get_items(order_id)
        products = await self.db.products.get_many([item.product_id for item in items])
        for item in items:
            product = products.get(item.product_id)
            if not product:
                # Deleted products have nothing to restock
                continue
            product.stock += item.quantity
            await self.db.products.set_stock(product.id, product.stock)
        logger.info(f"Restored stock for order {sanitize_id_for_logging(order_id)} ({len(items)} items)")

    async def admin_update(
        self,
        order_id: str,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        shipping_date: Optional[str] = None,
        delivery_date: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """
        Apply an admin edit.

        Entering 'shipped' stamps shipping_date and entering 'delivered' or
        'completed' stamps delivery_date unless the admin supplied one.
        Entering 'cancelled' puts the items back in stock.

        Raises:
            NotFoundError: Order does not exist
            ValidationError: Transition not in the whitelist
        """
        order = await self._get_order(order_id)
        update: dict[str, Any] = {}
        now = datetime.now(timezone.utc).isoformat()
        entering_status = None

        if status:
            status = status.lower()
            ok, reason = can_transition(order.status, status)
            if not ok:
                logger.warning(f"Rejected status change on order {sanitize_id_for_logging(order_id)}: {reason}")
                raise ValidationError(f"{ERROR_ORDER_INVALID_STATUS}: {reason}")
            update["status"] = status
            if status != order.status.lower():
                entering_status = status

        if payment_status:
            payment_status = payment_status.lower()
            ok, reason = can_transition_payment(order.payment_status, payment_status)
            if not ok:
                raise ValidationError(f"{ERROR_ORDER_INVALID_PAYMENT_STATUS}: {reason}")
            update["payment_status"] = payment_status

        if shipping_date:
            update["shipping_date"] = shipping_date
        elif entering_status == OrderStatus.SHIPPED.value and not order.shipping_date:
            update["shipping_date"] = now

        if delivery_date:
            update["delivery_date"] = delivery_date
        elif entering_status in (OrderStatus.DELIVERED.value, OrderStatus.COMPLETED.value) and not order.delivery_date:
            update["delivery_date"] = now

        if notes is not None:
            update["notes"] = notes

        if not update:
            return order

        updated = await self.db.orders.update(order_id, update)
        if not updated:
            raise NotFoundError(ERROR_ORDER_NOT_FOUND)

        if entering_status == OrderStatus.CANCELLED.value:
            await self.restore_stock(order_id)

        logger.info(
            f"Order {sanitize_id_for_logging(order_id)} updated: "
            f"status={updated.status}, payment_status={updated.payment_status}"
        )
        return updated

    async def cancel_by_customer(self, order_id: str, user_id: str) -> Order:
        """
        Cancel a pending order on behalf of its owner.

        Raises:
            NotFoundError: Order does not exist
            PermissionDeniedError: Order belongs to someone else
            ValidationError: Order is no longer pending
        """
        order = await self._get_order(order_id)
        if order.user_id != user_id:
            raise PermissionDeniedError(ERROR_ORDER_ACCESS_DENIED)
        if order.status.lower() != OrderStatus.PENDING.value:
            raise ValidationError(ERROR_ORDER_NOT_CANCELLABLE)

        updated = await self.db.orders.update(order_id, {"status": OrderStatus.CANCELLED.value})
        if not updated:
            raise NotFoundError(ERROR_ORDER_NOT_FOUND)
        await self.restore_stock(order_id)
        logger.info(f"Order {sanitize_id_for_logging(order_id)} cancelled by customer")
        return updated
