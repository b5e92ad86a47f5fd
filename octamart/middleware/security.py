"""
Security Headers Middleware for FastAPI

Adds the OWASP-recommended response headers to every API response.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# JSON API only; product images are served from Supabase Storage
CONTENT_SECURITY_POLICY = (
    "default-src 'none'; "
    "img-src 'self' data: https:; "
    "frame-ancestors 'none'; "
    "base-uri 'none'; "
    "form-action 'self';"
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)

        response.headers["Content-Security-Policy"] = CONTENT_SECURITY_POLICY
        # 1 year
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=(), payment=()"

        if "X-Powered-By" in response.headers:
            del response.headers["X-Powered-By"]

        return response
