"""
Storefront API Pydantic Models

Field names follow the camelCase JSON the storefront sends.
"""
from typing import Optional, List

from pydantic import BaseModel, Field


# ==================== AUTH MODELS ====================

class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UpdateProfileRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    productId: str
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    itemId: str
    quantity: int


# ==================== ORDER MODELS ====================

class ShippingAddressModel(BaseModel):
    street: str = ""
    city: str = ""
    postalCode: str = ""
    province: str = ""


class CheckoutItemModel(BaseModel):
    productId: str
    quantity: int = 1


class ClientSummaryModel(BaseModel):
    subtotal: Optional[float] = None
    shipping: Optional[float] = None
    tax: Optional[float] = None
    total: Optional[float] = None


class CreateOrderRequest(BaseModel):
    customerName: str = ""
    customerEmail: str = ""
    customerPhone: str = ""
    shippingAddress: ShippingAddressModel = Field(default_factory=ShippingAddressModel)
    paymentMethod: str = ""
    items: List[CheckoutItemModel] = Field(default_factory=list)
    # Restrict checkout to these cart rows; all rows when omitted
    cartItemIds: Optional[List[str]] = None
    summary: Optional[ClientSummaryModel] = None
    notes: Optional[str] = None


# ==================== REVIEW MODELS ====================

class CreateReviewRequest(BaseModel):
    productId: Optional[str] = None
    rating: Optional[float] = None
    comment: Optional[str] = None
    userAvatar: Optional[str] = None


class UpdateReviewRequest(BaseModel):
    id: str
    rating: Optional[float] = None
    comment: Optional[str] = None
