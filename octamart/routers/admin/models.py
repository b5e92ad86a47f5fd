"""
Admin API Pydantic Models

Shared models for all admin endpoints.
"""
from typing import Optional

from pydantic import BaseModel


# ==================== PRODUCT MODELS ====================

class CreateProductRequest(BaseModel):
    name: str
    price: float
    category: str
    stock: int = 0
    description: Optional[str] = None
    image: Optional[str] = None


class UpdateProductRequest(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    category: Optional[str] = None
    stock: Optional[int] = None
    description: Optional[str] = None
    image: Optional[str] = None


class RenameCategoryRequest(BaseModel):
    oldName: str
    newName: str


class UploadUrlRequest(BaseModel):
    imageUrl: Optional[str] = None
    folder: Optional[str] = None


# ==================== ORDER MODELS ====================

class UpdateOrderRequest(BaseModel):
    status: Optional[str] = None
    paymentStatus: Optional[str] = None
    shippingDate: Optional[str] = None
    deliveryDate: Optional[str] = None
    notes: Optional[str] = None


# ==================== USER MODELS ====================

class UpdateCustomerRequest(BaseModel):
    name: Optional[str] = None
    role: Optional[str] = None
    isActive: Optional[bool] = None


# ==================== REVIEW MODELS ====================

class AdminReviewActionRequest(BaseModel):
    action: str  # "verify" or "update"
    verified: Optional[bool] = None
    rating: Optional[float] = None
    comment: Optional[str] = None
