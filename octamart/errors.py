"""
Common Error Constants and Domain Exceptions

Message constants are shared by services and routers so the same failure
always surfaces with the same text. Services raise the exceptions below;
routers translate them into HTTP responses via ``status_code``.
"""

# Auth errors
ERROR_UNAUTHORIZED = "Unauthorized"
ERROR_INVALID_TOKEN = "Invalid or expired token"
ERROR_INVALID_CREDENTIALS = "Invalid email or password"
ERROR_ACCOUNT_DEACTIVATED = "Account is deactivated"
ERROR_ADMIN_REQUIRED = "Admin access required"
ERROR_EMAIL_TAKEN = "Email is already registered"

# User errors
ERROR_USER_NOT_FOUND = "User not found"
ERROR_CANNOT_DELETE_SELF = "Cannot delete your own account"

# Product errors
ERROR_PRODUCT_NOT_FOUND = "Product not found"
ERROR_PRODUCT_NAME_REQUIRED = "Product name is required"
ERROR_PRODUCT_PRICE_INVALID = "Price must be greater than 0"
ERROR_PRODUCT_STOCK_INVALID = "Stock cannot be negative"
ERROR_PRODUCT_CATEGORY_REQUIRED = "Category is required"
ERROR_INSUFFICIENT_STOCK = "Insufficient stock"

# Cart errors
ERROR_CART_ITEM_NOT_FOUND = "Cart item not found"
ERROR_CART_EMPTY = "Cart is empty"
ERROR_INVALID_QUANTITY = "Quantity must be at least 1"

# Order errors
ERROR_ORDER_NOT_FOUND = "Order not found"
ERROR_ORDER_ACCESS_DENIED = "You can only cancel your own orders"
ERROR_ORDER_NOT_CANCELLABLE = "Only pending orders can be cancelled"
ERROR_ORDER_INVALID_STATUS = "Invalid order status"
ERROR_ORDER_INVALID_PAYMENT_STATUS = "Invalid payment status"
ERROR_ORDER_MISSING_CUSTOMER = "Customer name, email and phone are required"
ERROR_ORDER_MISSING_ADDRESS = "Complete shipping address is required"
ERROR_ORDER_INVALID_PAYMENT_METHOD = "Invalid payment method"
ERROR_ORDER_ITEMS_FAILED = "Failed to create order items"

# Review errors
ERROR_REVIEW_NOT_FOUND = "Review not found"
ERROR_REVIEW_DUPLICATE = "You have already reviewed this product"
ERROR_REVIEW_RATING_RANGE = "Rating must be between 1 and 5"
ERROR_REVIEW_COMMENT_SHORT = "Comment must be at least 10 characters long"
ERROR_REVIEW_FORBIDDEN = "You can only delete your own reviews"
ERROR_REVIEW_MISSING_FIELDS = "Product ID, rating, and comment are required"

# Upload errors
ERROR_UPLOAD_NO_FILE = "No file provided"
ERROR_UPLOAD_INVALID_TYPE = "Invalid file type. Only JPEG, PNG, WebP, and GIF are allowed"
ERROR_UPLOAD_TOO_LARGE = "File too large. Maximum size is 10MB"
ERROR_UPLOAD_NO_URL = "No image URL provided"
ERROR_UPLOAD_INVALID_URL = "Invalid URL format"
ERROR_UPLOAD_DOWNLOAD_FAILED = "Failed to download image"

# Generic errors
ERROR_INVALID_REQUEST = "Invalid request"
ERROR_INTERNAL = "Internal server error"
ERROR_NOT_FOUND = "Not found"


class StoreError(Exception):
    """Base error raised by OctaMart services."""

    status_code = 400

    def __init__(self, message: str = ERROR_INVALID_REQUEST) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(StoreError, ValueError):
    """Input failed a business rule."""


class NotFoundError(StoreError, LookupError):
    """Requested row does not exist (or is not visible to the caller)."""

    status_code = 404

    def __init__(self, message: str = ERROR_NOT_FOUND) -> None:
        super().__init__(message)


class ConflictError(StoreError):
    """Write conflicts with existing state (duplicate review, stock)."""

    status_code = 409


class PermissionDeniedError(StoreError, PermissionError):
    """Caller is authenticated but not allowed to touch the resource."""

    status_code = 403


class CheckoutError(StoreError):
    """Order was rolled back after a partial write."""

    status_code = 500


class AuthenticationError(StoreError):
    """Credentials missing, invalid, or account unusable."""

    status_code = 401

    def __init__(self, message: str = ERROR_UNAUTHORIZED) -> None:
        super().__init__(message)
