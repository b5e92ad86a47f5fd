"""Review input rules."""
from typing import Any, Optional

from octamart.errors import ERROR_REVIEW_COMMENT_SHORT, ERROR_REVIEW_RATING_RANGE, ValidationError

MIN_RATING = 1
MAX_RATING = 5
MIN_COMMENT_LENGTH = 10


def validate_rating(value: Any) -> int:
    """Whole number between 1 and 5. Numeric strings are accepted."""
    if isinstance(value, bool) or value is None:
        raise ValidationError(ERROR_REVIEW_RATING_RANGE)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(ERROR_REVIEW_RATING_RANGE)
    if not number.is_integer() or not MIN_RATING <= number <= MAX_RATING:
        raise ValidationError(ERROR_REVIEW_RATING_RANGE)
    return int(number)


def validate_comment(value: Optional[str]) -> str:
    comment = (value or "").strip()
    if len(comment) < MIN_COMMENT_LENGTH:
        raise ValidationError(ERROR_REVIEW_COMMENT_SHORT)
    return comment


def validate_review_update(rating: Any = None, comment: Optional[str] = None) -> dict[str, Any]:
    """Validate only the fields that were supplied; returns the column updates."""
    update: dict[str, Any] = {}
    if rating is not None:
        update["rating"] = validate_rating(rating)
    if comment is not None:
        update["comment"] = validate_comment(comment)
    return update
