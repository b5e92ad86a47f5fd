"""Domain services over the repositories."""
from .catalog import CatalogService, product_to_dict, validate_product_fields
from .users import CustomerService, user_to_dict

__all__ = [
    "CatalogService",
    "CustomerService",
    "product_to_dict",
    "user_to_dict",
    "validate_product_fields",
]
