"""Storefront Reviews Router"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from octamart import config
from octamart.auth import verify_user
from octamart.reviews import review_to_dict
from octamart.services.models import UserProfile
from octamart.routers.deps import get_review_service, pagination, service_errors
from .models import CreateReviewRequest, UpdateReviewRequest

router = APIRouter(prefix="/reviews", tags=["storefront-reviews"])


@router.get("")
async def list_reviews(
    productId: Optional[str] = None,
    userId: Optional[str] = None,
    rating: Optional[int] = Query(None, ge=1, le=5),
    verified: Optional[bool] = None,
    sortBy: str = "created_at",
    sortOrder: str = "desc",
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
):
    with service_errors("List reviews"):
        reviews, stats, total = await get_review_service().list_reviews(
            product_id=productId,
            user_id=userId,
            rating=rating,
            verified=verified,
            sort_by=sortBy,
            sort_order=sortOrder,
            page=page,
            limit=limit,
        )
    return {
        "success": True,
        "data": reviews,
        "stats": stats,
        "pagination": pagination(page, limit, total),
    }


@router.get("/stats")
async def product_review_stats(productId: Optional[str] = None, limit: int = Query(5, ge=0, le=50)):
    if not productId:
        raise HTTPException(status_code=400, detail="Product ID is required")
    with service_errors("Review stats"):
        stats = await get_review_service().product_stats(productId, limit=limit)
    return {"success": True, "data": stats}


@router.post("", status_code=201)
async def create_review(request: CreateReviewRequest, user: UserProfile = Depends(verify_user)):
    with service_errors("Create review"):
        review = await get_review_service().create_review(
            user,
            request.productId,
            request.rating,
            request.comment,
            user_avatar=request.userAvatar,
        )
    return {"success": True, "data": review_to_dict(review), "message": "Review added successfully"}


@router.put("")
async def update_review(request: UpdateReviewRequest, user: UserProfile = Depends(verify_user)):
    with service_errors("Update review"):
        review = await get_review_service().update_review(user, request.id, request.rating, request.comment)
    return {"success": True, "data": review_to_dict(review), "message": "Review updated successfully"}


@router.delete("/{review_id}")
async def delete_review(review_id: str, user: UserProfile = Depends(verify_user)):
    """Owners delete their own reviews; admins may delete any."""
    with service_errors("Delete review"):
        await get_review_service().delete_review(user, review_id)
    return {"success": True, "message": "Review deleted successfully"}
