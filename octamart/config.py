"""
Store Configuration

Business policy values shared by pricing, catalog, reports and uploads.
All values can be overridden through environment variables.
"""

import os
from datetime import datetime, timezone
from decimal import Decimal

# ==================== PRICING ====================

TAX_RATE = Decimal(os.environ.get("STORE_TAX_RATE", "0.11"))
SHIPPING_BASE_COST = Decimal(os.environ.get("STORE_SHIPPING_BASE", "10000"))
SHIPPING_PER_EXTRA_ITEM = Decimal(os.environ.get("STORE_SHIPPING_PER_ITEM", "5000"))
FREE_SHIPPING_THRESHOLD = Decimal(os.environ.get("STORE_FREE_SHIPPING_THRESHOLD", "1000000"))
CURRENCY = os.environ.get("STORE_CURRENCY", "IDR")

# ==================== CATALOG ====================

LOW_STOCK_THRESHOLD = int(os.environ.get("STORE_LOW_STOCK_THRESHOLD", "10"))
DEFAULT_PAGE_SIZE = 10
ADMIN_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
PLACEHOLDER_IMAGE = "https://via.placeholder.com/100"

# ==================== REPORTS ====================

# "all" period starts here
STORE_START_DATE = datetime(2020, 1, 1, tzinfo=timezone.utc)
REVENUE_STATUSES = ("completed", "delivered")
TOP_PRODUCTS_LIMIT = 10
RECENT_REVIEW_DAYS = 7

# ==================== UPLOADS ====================

STORAGE_BUCKET = os.environ.get("SUPABASE_STORAGE_BUCKET", "product-images")
STORAGE_DEFAULT_FOLDER = "products"
MAX_UPLOAD_SIZE = 10 * 1024 * 1024  # 10MB
ALLOWED_IMAGE_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
    "image/gif",
)

# ==================== HTTP ====================

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]
AUTH_RATE_LIMIT_PER_MINUTE = int(os.environ.get("AUTH_RATE_LIMIT_PER_MINUTE", "30"))
