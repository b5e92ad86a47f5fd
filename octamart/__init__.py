"""
OctaMart Core Package

Application layer of the OctaMart storefront and admin API:
- db: Supabase and Redis clients
- services: repositories, models, money helpers, image storage
- cart / orders / reviews / reports: business logic
- auth: request authentication backed by Supabase Auth
- routers: FastAPI routers for storefront and admin panel

Imports are lazy so that pure modules (pricing, validation) load
without touching the hosted backend clients.
"""

__all__ = [
    "get_supabase",
    "get_redis",
    "get_database",
]


def __getattr__(name):
    """Lazy attribute access for clean serverless loading."""
    if name == "get_supabase":
        from octamart.db import get_supabase
        return get_supabase
    elif name == "get_redis":
        from octamart.db import get_redis
        return get_redis
    elif name == "get_database":
        from octamart.services.database import get_database
        return get_database
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
