"""Database Models - Pydantic models for all entities."""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from octamart.services.money import to_decimal as _to_decimal


class UserRole(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"
    CASH_ON_DELIVERY = "cash_on_delivery"


class UserProfile(BaseModel):
    """Profile row in the users table (id matches the Supabase Auth user id)."""
    id: str
    email: str
    name: Optional[str] = None
    role: str = UserRole.CUSTOMER.value
    is_active: bool = True
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "ignore"  # Ignore unknown fields from DB

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def display_name(self) -> str:
        return self.name or self.email.split("@")[0]


class Product(BaseModel):
    """Product model."""
    id: str
    name: str
    price: Decimal
    description: Optional[str] = None
    image: Optional[str] = None
    category: Optional[str] = None
    stock: int = 0
    rating: float = 0
    reviews_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "ignore"

    @field_validator("id", mode="before")
    @classmethod
    def convert_id_to_str(cls, v):
        return str(v)

    @field_validator("price", mode="before")
    @classmethod
    def convert_price_to_decimal(cls, v):
        return _to_decimal(v)

    @field_validator("rating", mode="before")
    @classmethod
    def convert_rating(cls, v):
        return float(v) if v is not None else 0


class CartItemRow(BaseModel):
    """Row of cart_items, optionally with the joined product."""
    id: str
    user_id: str
    product_id: str
    quantity: int = 1
    products: Optional[Product] = None
    created_at: Optional[datetime] = None

    class Config:
        extra = "ignore"

    @field_validator("id", "product_id", mode="before")
    @classmethod
    def convert_id_to_str(cls, v):
        return str(v)


class OrderItem(BaseModel):
    """Order item model (price snapshot at checkout time)."""
    id: Optional[str] = None
    order_id: str
    product_id: str
    quantity: int = 1
    price: Decimal = Decimal("0")
    product_name: Optional[str] = None

    class Config:
        extra = "ignore"

    @field_validator("id", "order_id", "product_id", mode="before")
    @classmethod
    def convert_id_to_str(cls, v):
        return str(v) if v is not None else None

    @field_validator("price", mode="before")
    @classmethod
    def convert_item_price_to_decimal(cls, v):
        return _to_decimal(v)


class Order(BaseModel):
    """Order model."""
    id: str
    user_id: str
    order_number: str
    total_amount: Decimal
    status: str = OrderStatus.PENDING.value
    payment_status: str = PaymentStatus.PENDING.value
    payment_method: str = PaymentMethod.CASH_ON_DELIVERY.value
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    shipping_address: Optional[str] = None
    shipping_details: Optional[dict[str, Any]] = None
    shipping_date: Optional[datetime] = None
    delivery_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "ignore"

    @field_validator("id", mode="before")
    @classmethod
    def convert_id_to_str(cls, v):
        return str(v)

    @field_validator("total_amount", mode="before")
    @classmethod
    def convert_amount_to_decimal(cls, v):
        return _to_decimal(v)


class Review(BaseModel):
    """Product review model."""
    id: str
    product_id: str
    user_id: str
    user_name: str
    user_avatar: Optional[str] = None
    rating: int
    comment: str
    verified: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        extra = "ignore"

    @field_validator("id", "product_id", mode="before")
    @classmethod
    def convert_id_to_str(cls, v):
        return str(v)
