"""
Admin Products Router

Product CRUD, categories, low-stock listing and image upload.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from octamart import config
from octamart.auth import verify_admin
from octamart.errors import ERROR_UPLOAD_NO_FILE, ERROR_UPLOAD_TOO_LARGE
from octamart.services.domains.catalog import product_to_dict
from octamart.routers.deps import get_catalog_service, get_image_storage, pagination, service_errors
from .models import CreateProductRequest, RenameCategoryRequest, UpdateProductRequest, UploadUrlRequest

router = APIRouter(tags=["admin-products"])


# ==================== PRODUCTS ====================

@router.get("/products")
async def admin_list_products(
    category: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(config.ADMIN_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE),
    admin=Depends(verify_admin),
):
    with service_errors("Admin list products"):
        products, total = await get_catalog_service().list_products(
            category=category, search=search, page=page, limit=limit
        )
    return {"success": True, "data": products, "pagination": pagination(page, limit, total)}


@router.get("/products/low-stock")
async def admin_low_stock(
    threshold: int = Query(config.LOW_STOCK_THRESHOLD, ge=0),
    admin=Depends(verify_admin),
):
    """Products with stock at or below the threshold, lowest first."""
    with service_errors("Low stock"):
        products = await get_catalog_service().low_stock(threshold)
    return {"success": True, "data": products}


@router.post("/products", status_code=201)
async def admin_create_product(request: CreateProductRequest, admin=Depends(verify_admin)):
    with service_errors("Create product"):
        product = await get_catalog_service().create_product(request.model_dump())
    return {"success": True, "data": product_to_dict(product), "message": "Product created successfully"}


@router.put("/products/{product_id}")
async def admin_update_product(product_id: str, request: UpdateProductRequest, admin=Depends(verify_admin)):
    with service_errors("Update product"):
        product = await get_catalog_service().update_product(product_id, request.model_dump(exclude_none=True))
    return {"success": True, "data": product_to_dict(product), "message": "Product updated successfully"}


@router.delete("/products/{product_id}")
async def admin_delete_product(product_id: str, admin=Depends(verify_admin)):
    with service_errors("Delete product"):
        await get_catalog_service().delete_product(product_id)
    return {"success": True, "message": "Product deleted successfully"}


# ==================== CATEGORIES ====================

@router.get("/categories")
async def admin_list_categories(admin=Depends(verify_admin)):
    with service_errors("List categories"):
        categories = await get_catalog_service().category_counts()
    return {"success": True, "data": categories}


@router.put("/categories")
async def admin_rename_category(request: RenameCategoryRequest, admin=Depends(verify_admin)):
    """Rename a category on every product that uses it."""
    with service_errors("Rename category"):
        updated = await get_catalog_service().rename_category(request.oldName, request.newName)
    return {"success": True, "data": {"updated": updated}, "message": "Category renamed successfully"}


# ==================== IMAGES ====================

@router.post("/upload")
async def admin_upload_image(
    file: Optional[UploadFile] = File(None),
    folder: str = Form(config.STORAGE_DEFAULT_FOLDER),
    admin=Depends(verify_admin),
):
    if file is None:
        raise HTTPException(status_code=400, detail=ERROR_UPLOAD_NO_FILE)
    if file.size is not None and file.size > config.MAX_UPLOAD_SIZE:
        raise HTTPException(status_code=400, detail=ERROR_UPLOAD_TOO_LARGE)
    # One byte past the limit is enough for the size check
    content = await file.read(config.MAX_UPLOAD_SIZE + 1)
    with service_errors("Upload image"):
        uploaded = await get_image_storage().upload(content, file.content_type, file.filename, folder)
    return {"success": True, **uploaded}


@router.post("/upload-url")
async def admin_upload_image_from_url(request: UploadUrlRequest, admin=Depends(verify_admin)):
    """Copy a remote image into the product image bucket."""
    with service_errors("Upload image from URL"):
        uploaded = await get_image_storage().upload_from_url(request.imageUrl, request.folder)
    return {"success": True, **uploaded}


@router.delete("/upload")
async def admin_delete_image(path: Optional[str] = None, admin=Depends(verify_admin)):
    with service_errors("Delete image"):
        await get_image_storage().delete(path or "")
    return {"success": True, "message": "File deleted successfully"}
