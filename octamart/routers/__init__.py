"""FastAPI routers: storefront (/api) and admin panel (/api/admin)."""
