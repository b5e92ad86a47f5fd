"""
Review statistics.

All functions are pure over lists of Review rows so the same numbers come
out of the storefront, the product page and the admin analytics view.
"""
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Optional

from octamart import config
from octamart.services.models import Review


def average_rating(ratings: Iterable[int], places: int = 2) -> float:
    """Mean rating rounded half up; no ratings gives 0."""
    ratings = list(ratings)
    if not ratings:
        return 0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def rating_distribution(reviews: Iterable[Review]) -> dict[int, int]:
    distribution = {5: 0, 4: 0, 3: 0, 2: 0, 1: 0}
    for review in reviews:
        if review.rating in distribution:
            distribution[review.rating] += 1
    return distribution


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def count_recent(reviews: Iterable[Review], now: Optional[datetime] = None) -> int:
    now = now or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=config.RECENT_REVIEW_DAYS)
    return sum(1 for r in reviews if r.created_at and _aware(r.created_at) > cutoff)


def review_to_dict(review: Review) -> dict[str, Any]:
    return {
        "id": review.id,
        "productId": review.product_id,
        "userId": review.user_id,
        "userName": review.user_name,
        "userAvatar": review.user_avatar,
        "rating": review.rating,
        "comment": review.comment,
        "date": review.created_at.date().isoformat() if review.created_at else None,
        "verified": review.verified,
        "createdAt": review.created_at.isoformat() if review.created_at else None,
        "updatedAt": review.updated_at.isoformat() if review.updated_at else None,
    }


def review_stats(reviews: list[Review], now: Optional[datetime] = None) -> dict[str, Any]:
    """Listing stats: average to 2 decimals."""
    return {
        "totalReviews": len(reviews),
        "averageRating": average_rating((r.rating for r in reviews), places=2),
        "ratingDistribution": rating_distribution(reviews),
        "verifiedReviews": sum(1 for r in reviews if r.verified),
        "recentReviews": count_recent(reviews, now),
    }


def _top_review_key(review: Review) -> tuple:
    created = _aware(review.created_at).timestamp() if review.created_at else 0
    return (not review.verified, -review.rating, -created)


def top_reviews(reviews: list[Review], limit: int = 5) -> list[dict[str, Any]]:
    """Verified first, then highest rating, then newest."""
    ranked = sorted(reviews, key=_top_review_key)[:max(limit, 0)]
    return [
        {
            "id": r.id,
            "userName": r.user_name,
            "userAvatar": r.user_avatar,
            "rating": r.rating,
            "comment": r.comment,
            "date": r.created_at.date().isoformat() if r.created_at else None,
            "verified": r.verified,
        }
        for r in ranked
    ]


def product_review_stats(
    product_id: str,
    product_name: str,
    reviews: list[Review],
    limit: int = 5,
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Product page stats: average to 1 decimal plus the top reviews."""
    return {
        "productId": product_id,
        "productName": product_name,
        "totalReviews": len(reviews),
        "averageRating": average_rating((r.rating for r in reviews), places=1),
        "ratingDistribution": rating_distribution(reviews),
        "verifiedReviews": sum(1 for r in reviews if r.verified),
        "recentReviews": count_recent(reviews, now),
        "topReviews": top_reviews(reviews, limit),
    }


def _month_start(year: int, month: int) -> datetime:
    # month may run below 1 when walking backwards
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    return datetime(year, month, 1, tzinfo=timezone.utc)


def monthly_stats(reviews: list[Review], now: Optional[datetime] = None, months: int = 12) -> list[dict[str, Any]]:
    """Review count and 1-decimal average per calendar month, oldest first."""
    now = now or datetime.now(timezone.utc)
    stats = []
    for offset in range(months - 1, -1, -1):
        start = _month_start(now.year, now.month - offset)
        end = _month_start(now.year, now.month - offset + 1)
        in_month = [r for r in reviews if r.created_at and start <= _aware(r.created_at) < end]
        stats.append({
            "month": start.strftime("%b %Y"),
            "reviews": len(in_month),
            "averageRating": average_rating((r.rating for r in in_month), places=1),
        })
    return stats


def review_analytics(
    reviews: list[Review],
    product_names: dict[str, str],
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Admin analytics across every review."""
    if not reviews:
        return {
            "totalReviews": 0,
            "averageRating": 0,
            "verifiedReviews": 0,
            "pendingVerification": 0,
            "recentReviews": 0,
            "topRatedProducts": [],
            "ratingDistribution": rating_distribution([]),
            "monthlyStats": [],
        }

    verified = sum(1 for r in reviews if r.verified)

    by_product: dict[str, list[int]] = {}
    for review in reviews:
        by_product.setdefault(review.product_id, []).append(review.rating)
    top_rated = sorted(
        (
            {
                "productId": product_id,
                "productName": product_names.get(product_id, "Unknown Product"),
                "averageRating": average_rating(ratings, places=1),
                "reviewCount": len(ratings),
            }
            for product_id, ratings in by_product.items()
        ),
        key=lambda p: p["averageRating"],
        reverse=True,
    )[:config.TOP_PRODUCTS_LIMIT]

    return {
        "totalReviews": len(reviews),
        "averageRating": average_rating((r.rating for r in reviews), places=1),
        "verifiedReviews": verified,
        "pendingVerification": len(reviews) - verified,
        "recentReviews": count_recent(reviews, now),
        "topRatedProducts": top_rated,
        "ratingDistribution": rating_distribution(reviews),
        "monthlyStats": monthly_stats(reviews, now),
    }
