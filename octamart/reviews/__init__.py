"""Product reviews: validation, statistics and the review service."""
from .service import ReviewService, default_avatar
from .stats import average_rating, product_review_stats, review_analytics, review_stats, review_to_dict
from .validation import validate_comment, validate_rating, validate_review_update

__all__ = [
    "ReviewService",
    "average_rating",
    "default_avatar",
    "product_review_stats",
    "review_analytics",
    "review_stats",
    "review_to_dict",
    "validate_comment",
    "validate_rating",
    "validate_review_update",
]
