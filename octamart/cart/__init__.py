"""Shopping cart: pricing rules and the server-side cart."""
from .pricing import (
    CartSummary,
    PricedItem,
    calculate_shipping,
    calculate_subtotal,
    calculate_total,
    summarize,
)
from .service import CartService

__all__ = [
    "CartSummary",
    "PricedItem",
    "CartService",
    "calculate_subtotal",
    "calculate_shipping",
    "calculate_total",
    "summarize",
]
