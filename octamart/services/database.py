"""
Supabase Database Service

Provides the Database facade over the table repositories.

Usage:
    from octamart.services.database import get_database

    db = get_database()
    product = await db.get_product_by_id(product_id)

    # At FastAPI startup (lifespan):
    await init_database()
"""

import asyncio
from typing import Optional

from supabase._async.client import AsyncClient

from octamart.db import get_supabase
from octamart.logging import get_logger
from octamart.services.models import Order, Product, UserProfile
from octamart.services.repositories import (
    CartRepository,
    OrderRepository,
    ProductRepository,
    ReviewRepository,
    UserRepository,
)

logger = get_logger(__name__)


class Database:
    """
    Supabase database client with per-table repositories.

    Services use the repositories directly (``db.products``, ``db.orders``);
    the handful of lookups every layer needs are also exposed flat.
    """

    def __init__(self, client: AsyncClient):
        """Use Database.create() or init_database() instead."""
        self.client = client

        self.users = UserRepository(client)
        self.products = ProductRepository(client)
        self.cart = CartRepository(client)
        self.orders = OrderRepository(client)
        self.reviews = ReviewRepository(client)

    @classmethod
    async def create(cls) -> "Database":
        """Async factory: builds the shared service-role client."""
        client = await get_supabase()
        return cls(client)

    async def get_user_by_id(self, user_id: str) -> Optional[UserProfile]:
        return await self.users.get_by_id(user_id)

    async def get_product_by_id(self, product_id: str) -> Optional[Product]:
        return await self.products.get_by_id(product_id)

    async def get_order_by_id(self, order_id: str) -> Optional[Order]:
        return await self.orders.get_by_id(order_id)


# ==================== SINGLETON ====================

_db: Optional[Database] = None
_lock: Optional[asyncio.Lock] = None


def _get_lock() -> asyncio.Lock:
    global _lock
    if _lock is None:
        _lock = asyncio.Lock()
    return _lock


async def init_database() -> Database:
    """Initialize async database singleton.

    Called at FastAPI startup (lifespan) or lazily on first use.
    """
    global _db
    if _db is not None:
        return _db

    async with _get_lock():
        if _db is None:
            logger.info("Initializing async Supabase client...")
            _db = await Database.create()
            logger.info("Async Supabase client initialized successfully")
    return _db


async def close_database() -> None:
    """Drop the singleton. Called at FastAPI shutdown (lifespan)."""
    global _db
    if _db is not None:
        try:
            await _db.client.postgrest.aclose()
        except Exception as e:
            logger.warning(f"Error closing Supabase client: {e}")
        _db = None
        logger.info("Supabase client closed")


async def get_database_async() -> Database:
    """Get database instance with lazy async initialization (scripts, cron)."""
    if _db is None:
        return await init_database()
    return _db


def get_database() -> Database:
    """Get database instance (sync accessor).

    Raises:
        RuntimeError: If init_database() has not run yet
    """
    if _db is None:
        raise RuntimeError(
            "Database not initialized. Use 'await get_database_async()' for lazy init, "
            "or call 'await init_database()' at startup."
        )
    return _db


def set_database(db: Optional[Database]) -> None:
    """Replace the singleton (used by tests and scripts)."""
    global _db
    _db = db


def is_database_initialized() -> bool:
    return _db is not None
