"""Orders: checkout, status transitions and response shapes."""
from .checkout import Address, CheckoutRequest, CheckoutService, Contact, normalize_payment_method
from .serializer import build_order_payload, serialize_orders
from .service import OrderService
from .status_service import OrderStatusService, can_transition, can_transition_payment

__all__ = [
    "Address",
    "CheckoutRequest",
    "CheckoutService",
    "Contact",
    "OrderService",
    "OrderStatusService",
    "build_order_payload",
    "can_transition",
    "can_transition_payment",
    "normalize_payment_method",
    "serialize_orders",
]
