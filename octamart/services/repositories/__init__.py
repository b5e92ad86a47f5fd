"""Repository Pattern - Database access by table."""
from .base import BaseRepository
from .cart_repo import CartRepository
from .order_repo import OrderRepository
from .product_repo import ProductRepository
from .review_repo import ReviewRepository
from .user_repo import UserRepository

__all__ = [
    "BaseRepository",
    "CartRepository",
    "OrderRepository",
    "ProductRepository",
    "ReviewRepository",
    "UserRepository",
]
