"""Admin Customers Router"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from octamart import config
from octamart.auth import verify_admin
from octamart.services.domains.users import user_to_dict
from octamart.routers.deps import get_customer_service, pagination, service_errors
from .models import UpdateCustomerRequest

router = APIRouter(tags=["admin-customers"])


@router.get("/customers")
async def admin_list_customers(
    search: Optional[str] = None,
    role: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(config.ADMIN_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    admin=Depends(verify_admin),
):
    with service_errors("List customers"):
        users, total = await get_customer_service().list_users(search=search, role=role, page=page, limit=limit)
    return {"success": True, "data": users, "pagination": pagination(page, limit, total)}


@router.put("/customers/{user_id}")
async def admin_update_customer(user_id: str, request: UpdateCustomerRequest, admin=Depends(verify_admin)):
    with service_errors("Update customer"):
        user = await get_customer_service().update_user(
            user_id, name=request.name, role=request.role, is_active=request.isActive
        )
    return {"success": True, "data": user_to_dict(user), "message": "User updated successfully"}


@router.delete("/customers/{user_id}")
async def admin_delete_customer(user_id: str, admin=Depends(verify_admin)):
    with service_errors("Delete customer"):
        await get_customer_service().delete_user(user_id, admin)
    return {"success": True, "message": "User deleted successfully"}
