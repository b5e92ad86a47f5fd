"""
Checkout / Order Creation

Sequential flow over the hosted database:

1. validate contact, address and payment method
2. reconcile items (server cart first, submitted items as fallback)
3. re-price from the products table
4. compute the summary
5. insert the order
6. insert order_items (delete the order again if this fails)
7. decrement stock
8. drop the checked-out cart rows
"""
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from octamart.cart.pricing import CartSummary, PricedItem, summarize
from octamart.cart.service import CartService
from octamart.errors import (
    ERROR_CART_EMPTY,
    ERROR_INSUFFICIENT_STOCK,
    ERROR_INVALID_QUANTITY,
    ERROR_ORDER_INVALID_PAYMENT_METHOD,
    ERROR_ORDER_ITEMS_FAILED,
    ERROR_ORDER_MISSING_ADDRESS,
    ERROR_ORDER_MISSING_CUSTOMER,
    ERROR_PRODUCT_NOT_FOUND,
    CheckoutError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from octamart.logging import get_logger, sanitize_id_for_logging
from octamart.services.models import OrderStatus, PaymentMethod, PaymentStatus
from octamart.services.money import format_rupiah, round_money, to_decimal, to_float
from .serializer import build_order_payload, format_shipping_address

logger = get_logger(__name__)

# Values the checkout form sends for each payment method
PAYMENT_METHOD_ALIASES = {
    "credit-card": PaymentMethod.CREDIT_CARD.value,
    "bank": PaymentMethod.BANK_TRANSFER.value,
    "cod": PaymentMethod.CASH_ON_DELIVERY.value,
}

# A client total within this distance of ours is a rounding difference
SUMMARY_TOLERANCE = to_decimal("0.01")


@dataclass
class Contact:
    name: str = ""
    email: str = ""
    phone: str = ""


@dataclass
class Address:
    street: str = ""
    city: str = ""
    postal_code: str = ""
    province: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "street": self.street,
            "city": self.city,
            "postalCode": self.postal_code,
            "province": self.province,
        }


@dataclass
class CheckoutRequest:
    contact: Contact
    address: Address
    payment_method: str
    # (product_id, quantity) pairs the client believes are in the cart
    items: list[tuple[str, int]] = field(default_factory=list)
    cart_item_ids: Optional[list[str]] = None
    client_total: Optional[float] = None
    notes: Optional[str] = None


def normalize_payment_method(value: Optional[str]) -> str:
    method = (value or "").strip().lower()
    method = PAYMENT_METHOD_ALIASES.get(method, method)
    if method not in {m.value for m in PaymentMethod}:
        raise ValidationError(ERROR_ORDER_INVALID_PAYMENT_METHOD)
    return method


def validate_contact(contact: Contact) -> Contact:
    name, email, phone = (contact.name or "").strip(), (contact.email or "").strip(), (contact.phone or "").strip()
    if not name or not email or not phone:
        raise ValidationError(ERROR_ORDER_MISSING_CUSTOMER)
    if "@" not in email:
        raise ValidationError("Invalid email address")
    return Contact(name=name, email=email.lower(), phone=phone)


def validate_address(address: Address) -> Address:
    cleaned = Address(
        street=(address.street or "").strip(),
        city=(address.city or "").strip(),
        postal_code=(address.postal_code or "").strip(),
        province=(address.province or "").strip(),
    )
    if not all((cleaned.street, cleaned.city, cleaned.postal_code, cleaned.province)):
        raise ValidationError(ERROR_ORDER_MISSING_ADDRESS)
    return cleaned


def merge_quantities(items: list[tuple[str, int]]) -> list[tuple[str, int]]:
    """Collapse repeated products, keeping first-seen order."""
    merged: dict[str, int] = {}
    for product_id, quantity in items:
        merged[str(product_id)] = merged.get(str(product_id), 0) + int(quantity or 0)
    return list(merged.items())


class CheckoutService:
    """Turns a cart into an order."""

    def __init__(self, db):
        self.db = db
        self.cart = CartService(db)

    async def _reconcile(self, user_id: str, request: CheckoutRequest) -> tuple[list[tuple[str, int]], list[str]]:
        """
        Decide what is being bought.

        Returns:
            ((product_id, quantity) pairs, cart item ids to clear afterwards)
        """
        cart_items = await self.cart.get_items(user_id, request.cart_item_ids)
        if cart_items:
            wanted = [(item.product_id, item.quantity) for item in cart_items]
            return merge_quantities(wanted), [item.cart_item_id for item in cart_items]

        if request.items:
            logger.info(f"User {sanitize_id_for_logging(user_id)} checking out submitted items (server cart empty)")
            return merge_quantities(request.items), []

        raise ValidationError(ERROR_CART_EMPTY)

    async def _price(self, wanted: list[tuple[str, int]]) -> list[PricedItem]:
        """Server prices are authoritative; stock is checked here, not trusted from the cart."""
        products = await self.db.products.get_many([product_id for product_id, _ in wanted])
        priced = []
        for product_id, quantity in wanted:
            product = products.get(product_id)
            if not product:
                raise NotFoundError(f"{ERROR_PRODUCT_NOT_FOUND}: {product_id}")
            if quantity < 1:
                raise ValidationError(ERROR_INVALID_QUANTITY)
            if quantity > product.stock:
                raise ConflictError(
                    f"{ERROR_INSUFFICIENT_STOCK} for {product.name}: requested {quantity}, available {product.stock}"
                )
            priced.append(PricedItem(
                product_id=product.id,
                name=product.name,
                price=product.price,
                quantity=quantity,
                image=product.image,
                stock=product.stock,
            ))
        return priced

    def _check_client_summary(self, user_id: str, summary: CartSummary, client_total: Optional[float]) -> None:
        if client_total is None:
            return
        difference = abs(to_decimal(client_total) - summary.total)
        if difference > SUMMARY_TOLERANCE:
            logger.warning(
                f"Client total mismatch for user {sanitize_id_for_logging(user_id)}: "
                f"client={client_total}, server={to_float(round_money(summary.total))}; using server total"
            )

    async def _decrement_stock(self, items: list[PricedItem]) -> None:
        for item in items:
            try:
                await self.db.products.set_stock(item.product_id, (item.stock or 0) - item.quantity)
            except Exception as e:
                # The order is already placed; a stale stock figure is fixed by hand
                logger.error(
                    f"Failed to decrement stock for product {sanitize_id_for_logging(item.product_id)}: {e}",
                    exc_info=True,
                )

    async def place_order(self, user_id: str, request: CheckoutRequest) -> dict[str, Any]:
        """
        Create an order from the user's cart.

        Raises:
            ValidationError: Bad contact, address, payment method or empty cart
            NotFoundError: A product no longer exists
            ConflictError: Not enough stock
            CheckoutError: Order items could not be written (order removed)
        """
        contact = validate_contact(request.contact)
        address = validate_address(request.address)
        payment_method = normalize_payment_method(request.payment_method)

        wanted, cart_item_ids = await self._reconcile(user_id, request)
        priced = await self._price(wanted)
        summary = summarize(priced)
        self._check_client_summary(user_id, summary, request.client_total)

        order = await self.db.orders.create({
            "user_id": user_id,
            "order_number": f"ORD-{int(time.time() * 1000)}",
            "total_amount": to_float(round_money(summary.total)),
            "status": OrderStatus.PENDING.value,
            "payment_status": PaymentStatus.PENDING.value,
            "payment_method": payment_method,
            "customer_name": contact.name,
            "customer_email": contact.email,
            "customer_phone": contact.phone,
            "shipping_address": format_shipping_address(
                address.street, address.city, address.province, address.postal_code
            ),
            "shipping_details": address.to_dict(),
            "notes": request.notes,
        })

        try:
            order_items = await self.db.orders.create_items([
                {
                    "order_id": order.id,
                    "product_id": item.product_id,
                    "product_name": item.name,
                    "quantity": item.quantity,
                    "price": to_float(item.price),
                }
                for item in priced
            ])
        except Exception as e:
            logger.error(f"Failed to create items for order {sanitize_id_for_logging(order.id)}: {e}", exc_info=True)
            await self.db.orders.delete(order.id)
            raise CheckoutError(ERROR_ORDER_ITEMS_FAILED) from e

        await self._decrement_stock(priced)

        if cart_item_ids:
            try:
                await self.cart.clear_items(user_id, cart_item_ids)
            except Exception as e:
                logger.warning(f"Failed to clear cart for user {sanitize_id_for_logging(user_id)}: {e}")

        logger.info(
            f"Order {order.order_number} created for user {sanitize_id_for_logging(user_id)}: "
            f"{summary.total_items} items, total {format_rupiah(summary.total)}"
        )

        payload = build_order_payload(order, order_items)
        payload["summary"] = summary.to_dict(include_items=False)
        return payload
