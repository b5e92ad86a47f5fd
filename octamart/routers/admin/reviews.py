"""Admin Reviews Router - moderation and analytics."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from octamart import config
from octamart.auth import verify_admin
from octamart.reviews import review_to_dict
from octamart.routers.deps import get_review_service, pagination, service_errors
from .models import AdminReviewActionRequest

router = APIRouter(tags=["admin-reviews"])


@router.get("/reviews")
async def admin_list_reviews(
    productId: Optional[str] = None,
    userId: Optional[str] = None,
    rating: Optional[int] = Query(None, ge=1, le=5),
    verified: Optional[bool] = None,
    sortBy: str = "created_at",
    sortOrder: str = "desc",
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    admin=Depends(verify_admin),
):
    with service_errors("Admin list reviews"):
        reviews, total = await get_review_service().admin_list(
            product_id=productId,
            user_id=userId,
            rating=rating,
            verified=verified,
            sort_by=sortBy,
            sort_order=sortOrder,
            page=page,
            limit=limit,
        )
    return {"success": True, "data": reviews, "pagination": pagination(page, limit, total)}


@router.get("/reviews/analytics")
async def admin_review_analytics(admin=Depends(verify_admin)):
    with service_errors("Review analytics"):
        analytics = await get_review_service().analytics()
    return {"success": True, "data": analytics}


@router.put("/reviews/{review_id}")
async def admin_update_review(review_id: str, request: AdminReviewActionRequest, admin=Depends(verify_admin)):
    """`verify` toggles the verified flag; `update` edits rating/comment."""
    service = get_review_service()
    action = request.action.lower()
    if action == "verify":
        if request.verified is None:
            raise HTTPException(status_code=400, detail="verified is required")
        with service_errors("Verify review"):
            review = await service.set_verified(review_id, request.verified)
        message = f"Review {'verified' if request.verified else 'unverified'} successfully"
    elif action == "update":
        with service_errors("Admin update review"):
            review = await service.admin_update(review_id, request.rating, request.comment)
        message = "Review updated successfully"
    else:
        raise HTTPException(status_code=400, detail="Invalid action")
    return {"success": True, "data": review_to_dict(review), "message": message}


@router.delete("/reviews/{review_id}")
async def admin_delete_review(review_id: str, admin=Depends(verify_admin)):
    with service_errors("Admin delete review"):
        await get_review_service().admin_delete(review_id)
    return {"success": True, "message": "Review deleted successfully"}
