"""Storefront Orders Router - checkout and order history."""
from fastapi import APIRouter, Depends, Query

from octamart import config
from octamart.auth import verify_user
from octamart.orders import Address, CheckoutRequest, Contact, build_order_payload
from octamart.services.models import UserProfile
from octamart.routers.deps import (
    get_checkout_service,
    get_order_service,
    get_status_service,
    pagination,
    service_errors,
)
from .models import CreateOrderRequest

router = APIRouter(prefix="/orders", tags=["storefront-orders"])


def _to_checkout(request: CreateOrderRequest) -> CheckoutRequest:
    address = request.shippingAddress
    return CheckoutRequest(
        contact=Contact(
            name=request.customerName,
            email=request.customerEmail,
            phone=request.customerPhone,
        ),
        address=Address(
            street=address.street,
            city=address.city,
            postal_code=address.postalCode,
            province=address.province,
        ),
        payment_method=request.paymentMethod,
        items=[(item.productId, item.quantity) for item in request.items],
        cart_item_ids=request.cartItemIds,
        client_total=request.summary.total if request.summary else None,
        notes=request.notes,
    )


@router.post("", status_code=201)
async def create_order(request: CreateOrderRequest, user: UserProfile = Depends(verify_user)):
    """Checkout: turn the cart (or the submitted items) into a pending order."""
    with service_errors("Checkout"):
        order = await get_checkout_service().place_order(user.id, _to_checkout(request))
    return {"success": True, "data": order, "message": "Order created successfully"}


@router.get("")
async def list_my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    user: UserProfile = Depends(verify_user),
):
    with service_errors("List orders"):
        orders, total = await get_order_service().list_for_user(user.id, page=page, limit=limit)
    return {"success": True, "data": orders, "pagination": pagination(page, limit, total)}


@router.get("/{order_id}")
async def get_my_order(order_id: str, user: UserProfile = Depends(verify_user)):
    with service_errors("Get order"):
        order = await get_order_service().get_for_user(order_id, user)
    return {"success": True, "data": order}


@router.post("/{order_id}/cancel")
async def cancel_my_order(order_id: str, user: UserProfile = Depends(verify_user)):
    """Cancel a pending order; its items go back in stock."""
    with service_errors("Cancel order"):
        order = await get_status_service().cancel_by_customer(order_id, user.id)
    return {"success": True, "data": build_order_payload(order), "message": "Order cancelled successfully"}
