"""Order response serializers."""
from datetime import datetime
from typing import Any, Optional

from octamart.services.models import Order, OrderItem, Product, UserProfile
from octamart.services.money import to_json_number


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def format_shipping_address(street: str, city: str, province: str, postal_code: str) -> str:
    """Single-line address stored on the order: "street, city, province postal"."""
    return f"{street}, {city}, {province} {postal_code}".strip()


def build_shipping_address(order: Order) -> dict[str, str]:
    """Structured address; orders without details keep the flat line in street."""
    details = order.shipping_details or {}
    if details:
        return {
            "street": details.get("street", ""),
            "city": details.get("city", ""),
            "postalCode": details.get("postalCode") or details.get("postal_code", ""),
            "province": details.get("province", ""),
        }
    return {
        "street": order.shipping_address or "",
        "city": "",
        "postalCode": "",
        "province": "",
    }


def build_item_payload(item: OrderItem, product: Optional[Product] = None) -> dict[str, Any]:
    name = item.product_name or (product.name if product else None) or "Unknown Product"
    return {
        "productId": item.product_id,
        "productName": name,
        "quantity": item.quantity,
        "price": to_json_number(item.price),
    }


def build_order_payload(
    order: Order,
    items: Optional[list[OrderItem]] = None,
    products: Optional[dict[str, Product]] = None,
    customer: Optional[UserProfile] = None,
) -> dict[str, Any]:
    """
    Build order payload for API response.

    Args:
        order: Order row
        items: Its order_items rows
        products: Product lookup for items without a name snapshot
        customer: Profile of the ordering user, used when the order row
            carries no contact details

    Returns:
        Formatted order payload dict
    """
    products = products or {}
    return {
        "id": order.id,
        "orderNumber": order.order_number,
        "customerName": order.customer_name or (customer.name if customer else None) or "Unknown",
        "customerEmail": order.customer_email or (customer.email if customer else ""),
        "customerPhone": order.customer_phone or (customer.phone if customer else None) or "",
        "items": [build_item_payload(item, products.get(item.product_id)) for item in items or []],
        "totalAmount": to_json_number(order.total_amount),
        "status": order.status,
        "shippingAddress": build_shipping_address(order),
        "paymentMethod": order.payment_method,
        "paymentStatus": order.payment_status,
        "orderDate": _iso(order.created_at),
        "shippingDate": _iso(order.shipping_date),
        "deliveryDate": _iso(order.delivery_date),
        "notes": order.notes,
    }


async def serialize_orders(db, orders: list[Order]) -> list[dict[str, Any]]:
    """Serialize a page of orders with three batched lookups instead of N+1."""
    if not orders:
        return []
    items = await db.orders.get_items_for_orders([o.id for o in orders])
    items_by_order: dict[str, list[OrderItem]] = {}
    for item in items:
        items_by_order.setdefault(item.order_id, []).append(item)

    products = await db.products.get_many([item.product_id for item in items if not item.product_name])
    customers = await db.users.get_many([o.user_id for o in orders])

    return [
        build_order_payload(
            order,
            items_by_order.get(order.id, []),
            products,
            customers.get(order.user_id),
        )
        for order in orders
    ]
