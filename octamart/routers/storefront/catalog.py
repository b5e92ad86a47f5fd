"""Storefront Catalog Router - public product listing."""
from typing import Optional

from fastapi import APIRouter, Query

from octamart import config
from octamart.services.domains.catalog import product_to_dict
from octamart.routers.deps import get_catalog_service, pagination, service_errors

router = APIRouter(tags=["storefront-catalog"])


@router.get("/products")
async def list_products(
    category: Optional[str] = None,
    search: Optional[str] = None,
    minPrice: Optional[float] = Query(None, ge=0),
    maxPrice: Optional[float] = Query(None, ge=0),
    page: int = Query(1, ge=1),
    limit: int = Query(config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
):
    """Products, newest first, with optional category/search/price filters."""
    with service_errors("List products"):
        products, total = await get_catalog_service().list_products(
            category=category,
            search=search,
            min_price=minPrice,
            max_price=maxPrice,
            page=page,
            limit=limit,
        )
    return {"success": True, "data": products, "pagination": pagination(page, limit, total)}


@router.get("/products/{product_id}")
async def get_product(product_id: str):
    with service_errors("Get product"):
        product = await get_catalog_service().get_product(product_id)
    return {"success": True, "data": product_to_dict(product)}


@router.get("/categories")
async def list_categories():
    with service_errors("List categories"):
        categories = await get_catalog_service().list_categories()
    return {"success": True, "data": categories}
