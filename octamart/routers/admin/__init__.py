"""
Admin API Router

Admin-only endpoints for products, categories, orders, customers,
reviews and reports. Combines all sub-routers under /api/admin.
"""
from fastapi import APIRouter

from .customers import router as customers_router
from .orders import router as orders_router
from .products import router as products_router
from .reports import router as reports_router
from .reviews import router as reviews_router

router = APIRouter(prefix="/api/admin", tags=["admin"])

router.include_router(products_router)
router.include_router(orders_router)
router.include_router(customers_router)
router.include_router(reviews_router)
router.include_router(reports_router)

__all__ = ["router"]
