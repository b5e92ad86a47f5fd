"""Review Domain Service."""
from typing import Any, Optional
from urllib.parse import quote

from octamart.errors import (
    ERROR_PRODUCT_NOT_FOUND,
    ERROR_REVIEW_DUPLICATE,
    ERROR_REVIEW_FORBIDDEN,
    ERROR_REVIEW_MISSING_FIELDS,
    ERROR_REVIEW_NOT_FOUND,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from octamart.logging import get_logger, sanitize_id_for_logging
from octamart.services.models import Review, UserProfile
from .stats import average_rating, product_review_stats, review_analytics, review_stats, review_to_dict
from .validation import validate_comment, validate_rating, validate_review_update

logger = get_logger(__name__)

# Storefront writes keep two decimals on products.rating, admin writes one
CUSTOMER_RATING_PLACES = 2
ADMIN_RATING_PLACES = 1


def default_avatar(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote(name, safe='')}&background=random"


class ReviewService:
    """Reviews and the product rating columns derived from them."""

    def __init__(self, db):
        self.db = db

    async def recompute_product_rating(self, product_id: str, places: int = CUSTOMER_RATING_PLACES) -> None:
        """Refresh products.rating / reviews_count from the reviews table."""
        try:
            ratings = await self.db.reviews.get_ratings(product_id)
            rating = average_rating(ratings, places=places) if ratings else 0
            await self.db.products.update_rating(product_id, rating, len(ratings))
        except Exception as e:
            # The review write already succeeded; the next write recomputes
            logger.error(
                f"Failed to update rating for product {sanitize_id_for_logging(product_id)}: {e}",
                exc_info=True,
            )

    # ==================== STOREFRONT ====================

    async def list_reviews(
        self,
        product_id: Optional[str] = None,
        user_id: Optional[str] = None,
        rating: Optional[int] = None,
        verified: Optional[bool] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[dict[str, Any]], dict[str, Any], int]:
        """Returns (page of reviews, stats over every match, total matches)."""
        filters = {"product_id": product_id, "user_id": user_id, "rating": rating, "verified": verified}
        reviews, total = await self.db.reviews.paginate(
            **filters, sort_by=sort_by, sort_order=sort_order, page=page, limit=limit
        )
        matching = await self.db.reviews.get_all(**filters)
        return [review_to_dict(r) for r in reviews], review_stats(matching), total

    async def product_stats(self, product_id: str, limit: int = 5) -> dict[str, Any]:
        product = await self.db.products.get_by_id(product_id)
        if not product:
            raise NotFoundError(ERROR_PRODUCT_NOT_FOUND)
        reviews = await self.db.reviews.get_all(product_id=product_id)
        return product_review_stats(product.id, product.name, reviews, limit=limit)

    async def create_review(
        self,
        user: UserProfile,
        product_id: Optional[str],
        rating: Any,
        comment: Optional[str],
        user_avatar: Optional[str] = None,
    ) -> Review:
        if not product_id or rating is None or not comment:
            raise ValidationError(ERROR_REVIEW_MISSING_FIELDS)
        rating = validate_rating(rating)
        comment = validate_comment(comment)

        if await self.db.reviews.find(user.id, product_id):
            raise ConflictError(ERROR_REVIEW_DUPLICATE)

        product = await self.db.products.get_by_id(product_id)
        if not product:
            raise NotFoundError(ERROR_PRODUCT_NOT_FOUND)

        name = user.display_name
        review = await self.db.reviews.create({
            "product_id": product.id,
            "user_id": user.id,
            "user_name": name,
            "user_avatar": user_avatar or default_avatar(name),
            "rating": rating,
            "comment": comment,
            "verified": False,
        })
        await self.recompute_product_rating(product.id)
        logger.info(
            f"Review {sanitize_id_for_logging(review.id)} added to product "
            f"{sanitize_id_for_logging(product.id)} by {sanitize_id_for_logging(user.id)}"
        )
        return review

    async def update_review(
        self,
        user: UserProfile,
        review_id: str,
        rating: Any = None,
        comment: Optional[str] = None,
    ) -> Review:
        existing = await self.db.reviews.get_by_id(review_id)
        if not existing or existing.user_id != user.id:
            raise NotFoundError(f"{ERROR_REVIEW_NOT_FOUND} or access denied")

        update = validate_review_update(rating, comment)
        if not update:
            return existing
        review = await self.db.reviews.update(review_id, update)
        if not review:
            raise NotFoundError(ERROR_REVIEW_NOT_FOUND)

        if "rating" in update and update["rating"] != existing.rating:
            await self.recompute_product_rating(existing.product_id)
        return review

    async def delete_review(self, user: UserProfile, review_id: str) -> None:
        existing = await self.db.reviews.get_by_id(review_id)
        if not existing:
            raise NotFoundError(ERROR_REVIEW_NOT_FOUND)
        if existing.user_id != user.id and not user.is_admin:
            raise PermissionDeniedError(ERROR_REVIEW_FORBIDDEN)

        await self.db.reviews.delete(review_id)
        places = ADMIN_RATING_PLACES if existing.user_id != user.id else CUSTOMER_RATING_PLACES
        await self.recompute_product_rating(existing.product_id, places=places)

    # ==================== ADMIN ====================

    async def admin_list(
        self,
        product_id: Optional[str] = None,
        user_id: Optional[str] = None,
        rating: Optional[int] = None,
        verified: Optional[bool] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
    ) -> tuple[list[dict[str, Any]], int]:
        """Reviews with product name and reviewer email attached."""
        reviews, total = await self.db.reviews.paginate(
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            verified=verified,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
        products = await self.db.products.get_many([r.product_id for r in reviews])
        users = await self.db.users.get_many([r.user_id for r in reviews])

        data = []
        for review in reviews:
            row = review_to_dict(review)
            product = products.get(review.product_id)
            user = users.get(review.user_id)
            row["productName"] = product.name if product else "Unknown Product"
            row["userEmail"] = user.email if user else ""
            data.append(row)
        return data, total

    async def analytics(self) -> dict[str, Any]:
        reviews = await self.db.reviews.get_all()
        products = await self.db.products.get_many([r.product_id for r in reviews])
        names = {product_id: p.name for product_id, p in products.items()}
        return review_analytics(reviews, names)

    async def set_verified(self, review_id: str, verified: bool) -> Review:
        review = await self.db.reviews.update(review_id, {"verified": verified})
        if not review:
            raise NotFoundError(ERROR_REVIEW_NOT_FOUND)
        logger.info(f"Review {sanitize_id_for_logging(review_id)} {'verified' if verified else 'unverified'}")
        return review

    async def admin_update(self, review_id: str, rating: Any = None, comment: Optional[str] = None) -> Review:
        update = validate_review_update(rating, comment)
        existing = await self.db.reviews.get_by_id(review_id)
        if not existing:
            raise NotFoundError(ERROR_REVIEW_NOT_FOUND)
        if not update:
            return existing
        review = await self.db.reviews.update(review_id, update)
        if not review:
            raise NotFoundError(ERROR_REVIEW_NOT_FOUND)
        if "rating" in update:
            await self.recompute_product_rating(review.product_id, places=ADMIN_RATING_PLACES)
        return review

    async def admin_delete(self, review_id: str) -> None:
        existing = await self.db.reviews.get_by_id(review_id)
        if not existing:
            raise NotFoundError(ERROR_REVIEW_NOT_FOUND)
        await self.db.reviews.delete(review_id)
        await self.recompute_product_rating(existing.product_id, places=ADMIN_RATING_PLACES)
