"""
Storefront Cart Router

Server-side cart of the signed-in user. Amounts are Rupiah JSON numbers.
"""
from typing import Optional

from fastapi import APIRouter, Depends

from octamart.auth import verify_user
from octamart.services.models import UserProfile
from octamart.routers.deps import get_cart_service, service_errors
from .models import AddToCartRequest, UpdateCartItemRequest

router = APIRouter(prefix="/cart", tags=["storefront-cart"])


def _split_ids(items: Optional[str]) -> Optional[list[str]]:
    if not items:
        return None
    return [i.strip() for i in items.split(",") if i.strip()] or None


@router.get("")
async def get_cart(user: UserProfile = Depends(verify_user)):
    """Cart items with the summary the checkout page previews."""
    with service_errors("Get cart"):
        summary = await get_cart_service().get_summary(user.id)
    return {"success": True, "data": summary.to_dict()}


@router.get("/summary")
async def get_cart_summary(items: Optional[str] = None, user: UserProfile = Depends(verify_user)):
    """Summary of the whole cart, or of the comma-separated cart item ids in `items`."""
    with service_errors("Cart summary"):
        summary = await get_cart_service().get_summary(user.id, _split_ids(items))
    return {"success": True, "data": summary.to_dict(include_items=False)}


@router.post("", status_code=201)
async def add_to_cart(request: AddToCartRequest, user: UserProfile = Depends(verify_user)):
    with service_errors("Add to cart"):
        row = await get_cart_service().add_item(user.id, request.productId, request.quantity)
    return {
        "success": True,
        "data": {"id": row.id, "productId": row.product_id, "quantity": row.quantity},
        "message": "Added to cart",
    }


@router.put("")
async def update_cart_item(request: UpdateCartItemRequest, user: UserProfile = Depends(verify_user)):
    """Set an item's quantity; zero removes it."""
    with service_errors("Update cart item"):
        row = await get_cart_service().update_quantity(user.id, request.itemId, request.quantity)
    if row is None:
        return {"success": True, "data": None, "message": "Item removed from cart"}
    return {
        "success": True,
        "data": {"id": row.id, "productId": row.product_id, "quantity": row.quantity},
        "message": "Cart updated",
    }


@router.delete("/{item_id}")
async def remove_cart_item(item_id: str, user: UserProfile = Depends(verify_user)):
    with service_errors("Remove cart item"):
        await get_cart_service().remove_item(user.id, item_id)
    return {"success": True, "message": "Item removed from cart"}
