"""Storefront API Router.

Customer-facing endpoints. Combines all sub-routers under /api.
"""
from fastapi import APIRouter

from .auth import router as auth_router
from .cart import router as cart_router
from .catalog import router as catalog_router
from .orders import router as orders_router
from .reviews import router as reviews_router

router = APIRouter(prefix="/api", tags=["storefront"])

router.include_router(auth_router)
router.include_router(catalog_router)
router.include_router(cart_router)
router.include_router(orders_router)
router.include_router(reviews_router)

__all__ = ["router"]
