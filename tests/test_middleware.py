"""Tests for rate limiting and security headers"""
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from octamart.middleware import RateLimitMiddleware, SecurityHeadersMiddleware


def make_app(requests_per_minute=2, redis_client=None):
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RateLimitMiddleware, requests_per_minute=requests_per_minute, redis_client=redis_client)

    @app.post("/api/auth/login")
    async def login():
        return {"success": True}

    @app.get("/api/products")
    async def products():
        return {"success": True}

    return app


class TestRateLimit:
    def test_auth_routes_limited(self):
        client = TestClient(make_app())

        assert client.post("/api/auth/login").status_code == 200
        assert client.post("/api/auth/login").status_code == 200
        response = client.post("/api/auth/login")

        assert response.status_code == 429
        assert response.json()["success"] is False
        assert response.headers["Retry-After"] == "60"

    def test_other_routes_not_limited(self):
        client = TestClient(make_app(requests_per_minute=1))

        for _ in range(3):
            assert client.get("/api/products").status_code == 200

    def test_limit_is_per_client_ip(self):
        client = TestClient(make_app(requests_per_minute=1))

        assert client.post("/api/auth/login", headers={"X-Forwarded-For": "10.0.0.1"}).status_code == 200
        assert client.post("/api/auth/login", headers={"X-Forwarded-For": "10.0.0.2"}).status_code == 200
        assert client.post("/api/auth/login", headers={"X-Forwarded-For": "10.0.0.1, 10.9.9.9"}).status_code == 429

    def test_uses_redis_counter(self):
        redis = MagicMock()
        redis.get = AsyncMock(return_value=None)
        redis.setex = AsyncMock()
        client = TestClient(make_app(redis_client=redis))

        assert client.post("/api/auth/login").status_code == 200
        redis.setex.assert_awaited_once()
        key, ttl, value = redis.setex.await_args.args
        assert key.startswith("rate_limit:") and key.endswith(":/api/auth/login")
        assert (ttl, value) == (60, "1")

    def test_redis_count_blocks(self):
        redis = MagicMock()
        redis.get = AsyncMock(return_value="2")
        redis.setex = AsyncMock()
        client = TestClient(make_app(redis_client=redis))

        assert client.post("/api/auth/login").status_code == 429
        redis.setex.assert_not_awaited()

    def test_redis_failure_falls_back_to_memory(self):
        redis = MagicMock()
        redis.get = AsyncMock(side_effect=ConnectionError("redis down"))
        client = TestClient(make_app(requests_per_minute=1, redis_client=redis))

        assert client.post("/api/auth/login").status_code == 200
        assert client.post("/api/auth/login").status_code == 429


class TestSecurityHeaders:
    @pytest.mark.parametrize("header,value", [
        ("X-Frame-Options", "DENY"),
        ("X-Content-Type-Options", "nosniff"),
        ("Referrer-Policy", "strict-origin-when-cross-origin"),
    ])
    def test_headers_present(self, header, value):
        response = TestClient(make_app()).get("/api/products")

        assert response.headers[header] == value
        assert "default-src 'none'" in response.headers["Content-Security-Policy"]
