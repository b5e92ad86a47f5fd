"""Admin Orders Router"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from octamart.auth import verify_admin
from octamart.routers.deps import get_order_service, get_status_service, pagination, service_errors
from .models import UpdateOrderRequest

router = APIRouter(tags=["admin-orders"])


@router.get("/orders")
async def admin_list_orders(
    status: Optional[str] = None,
    customerEmail: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    admin=Depends(verify_admin),
):
    with service_errors("Admin list orders"):
        orders, total = await get_order_service().admin_list(
            status=status, customer_email=customerEmail, page=page, limit=limit
        )
    return {"success": True, "data": orders, "pagination": pagination(page, limit, total)}


@router.get("/orders/{order_id}")
async def admin_get_order(order_id: str, admin=Depends(verify_admin)):
    with service_errors("Admin get order"):
        order = await get_order_service().admin_get(order_id)
    return {"success": True, "data": order}


@router.put("/orders/{order_id}")
async def admin_update_order(order_id: str, request: UpdateOrderRequest, admin=Depends(verify_admin)):
    """Change status, payment status, dates or notes (transitions are whitelisted)."""
    with service_errors("Update order"):
        await get_status_service().admin_update(
            order_id,
            status=request.status,
            payment_status=request.paymentStatus,
            shipping_date=request.shippingDate,
            delivery_date=request.deliveryDate,
            notes=request.notes,
        )
        order = await get_order_service().admin_get(order_id)
    return {"success": True, "data": order, "message": "Order updated successfully"}


@router.delete("/orders/{order_id}")
async def admin_delete_order(order_id: str, admin=Depends(verify_admin)):
    with service_errors("Delete order"):
        await get_order_service().admin_delete(order_id)
    return {"success": True, "message": "Order deleted successfully"}
