"""
Cart pricing.

Pure functions shared by the cart summary endpoint and checkout. Checkout
always recomputes with server prices, so anything the client shows is
only a preview.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Optional

from octamart import config
from octamart.services.money import multiply, to_decimal, to_json_number


@dataclass
class PricedItem:
    """A product and quantity, as pricing sees it."""
    product_id: str
    name: str
    price: Decimal
    quantity: int
    image: Optional[str] = None
    stock: Optional[int] = None
    cart_item_id: Optional[str] = None

    @property
    def line_total(self) -> Decimal:
        return multiply(self.price, self.quantity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.cart_item_id,
            "productId": self.product_id,
            "name": self.name,
            "price": to_json_number(self.price),
            "quantity": self.quantity,
            "image": self.image,
            "stock": self.stock,
            "lineTotal": to_json_number(self.line_total),
        }


@dataclass
class CartSummary:
    items: list[PricedItem] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    shipping: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    total_items: int = 0

    def to_dict(self, include_items: bool = True) -> dict[str, Any]:
        data: dict[str, Any] = {
            "subtotal": to_json_number(self.subtotal),
            "shipping": to_json_number(self.shipping),
            "tax": to_json_number(self.tax),
            "total": to_json_number(self.total),
            "totalItems": self.total_items,
        }
        if include_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


def _price_and_quantity(item: Any) -> tuple[Decimal, int]:
    """Accept PricedItem or the {"product": {"price"}, "quantity"} dict shape."""
    if isinstance(item, PricedItem):
        return item.price, item.quantity or 0
    product = item.get("product") or {}
    return to_decimal(product.get("price")), int(item.get("quantity") or 0)


def calculate_subtotal(items: Iterable[Any]) -> Decimal:
    """Sum of price * quantity. Missing product or quantity counts as 0."""
    subtotal = Decimal("0")
    for item in items:
        price, quantity = _price_and_quantity(item)
        subtotal += multiply(price, quantity)
    return subtotal


def calculate_shipping(subtotal: Decimal, total_items: int) -> Decimal:
    """
    Flat base rate plus a fee per extra item.

    Empty carts and orders above the free-shipping threshold ship free.
    """
    subtotal = to_decimal(subtotal)
    if subtotal == 0:
        return Decimal("0")
    if subtotal > config.FREE_SHIPPING_THRESHOLD:
        return Decimal("0")
    extra_items = max(0, total_items - 1)
    return config.SHIPPING_BASE_COST + config.SHIPPING_PER_EXTRA_ITEM * extra_items


def calculate_total(
    subtotal: Decimal,
    shipping: Decimal,
    tax_rate: Decimal = config.TAX_RATE,
) -> tuple[Decimal, Decimal]:
    """Returns (total, tax). Tax applies to the subtotal only."""
    subtotal = to_decimal(subtotal)
    tax = multiply(subtotal, tax_rate)
    return subtotal + to_decimal(shipping) + tax, tax


def summarize(items: list[PricedItem]) -> CartSummary:
    subtotal = calculate_subtotal(items)
    total_items = sum(item.quantity for item in items)
    shipping = calculate_shipping(subtotal, total_items)
    total, tax = calculate_total(subtotal, shipping)
    return CartSummary(
        items=items,
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        total=total,
        total_items=total_items,
    )
