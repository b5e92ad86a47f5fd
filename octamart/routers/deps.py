"""
Shared router dependencies.

Services are built per request around the database singleton; domain
errors become HTTP errors in one place.
"""
import math
from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import HTTPException

from octamart.errors import ERROR_INTERNAL, StoreError
from octamart.logging import get_logger
from octamart.services.database import get_database

logger = get_logger(__name__)


@contextmanager
def service_errors(action: str) -> Iterator[None]:
    """
    Translate service exceptions for the response.

    Usage:
        with service_errors("Add to cart"):
            item = await service.add_item(...)
    """
    try:
        yield
    except HTTPException:
        raise
    except StoreError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    except Exception as e:
        logger.error(f"{action} failed: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=ERROR_INTERNAL) from e


def pagination(page: int, limit: int, total: int) -> dict[str, Any]:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


def get_cart_service():
    from octamart.cart import CartService
    return CartService(get_database())


def get_checkout_service():
    from octamart.orders import CheckoutService
    return CheckoutService(get_database())


def get_order_service():
    from octamart.orders import OrderService
    return OrderService(get_database())


def get_status_service():
    from octamart.orders import OrderStatusService
    return OrderStatusService(get_database())


def get_review_service():
    from octamart.reviews import ReviewService
    return ReviewService(get_database())


def get_catalog_service():
    from octamart.services.domains import CatalogService
    return CatalogService(get_database())


def get_customer_service():
    from octamart.services.domains import CustomerService
    return CustomerService(get_database())


def get_report_service():
    from octamart.reports import FinancialReportService
    return FinancialReportService(get_database())


def get_auth_service():
    from octamart.auth import AuthService
    return AuthService(get_database())


def get_image_storage():
    from octamart.services.storage import ImageStorage
    return ImageStorage(get_database().client)
