"""
OctaMart Storefront & Admin API - Main FastAPI Application

Single entry point for all API routes (Vercel serverless function).
"""
import sys
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Project root on sys.path for Vercel, which runs this file directly
_base_path = Path(__file__).parent.parent
if str(_base_path) not in sys.path:
    sys.path.insert(0, str(_base_path))

from octamart import config
from octamart.db import get_redis, is_redis_configured
from octamart.logging import get_logger
from octamart.middleware import RateLimitMiddleware, SecurityHeadersMiddleware
from octamart.routers.admin import router as admin_router
from octamart.routers.storefront import router as storefront_router
from octamart.services.database import close_database, init_database

logger = get_logger(__name__)


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    await init_database()
    yield
    await close_database()


app = FastAPI(
    title="OctaMart API",
    description="Storefront and admin panel API over Supabase",
    version="1.0.0",
    lifespan=lifespan,
)

# Last added is outermost; security headers wrap the rate limiter and CORS
app.add_middleware(
    RateLimitMiddleware,
    requests_per_minute=config.AUTH_RATE_LIMIT_PER_MINUTE,
    redis_client=get_redis() if is_redis_configured() else None,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    # Credentials cannot be combined with a wildcard origin
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Errors use the same envelope as successful responses."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


app.include_router(storefront_router)
app.include_router(admin_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "octamart"}
