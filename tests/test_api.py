"""Tests for API endpoints"""
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from api.index import app
from octamart import config
from octamart.middleware import SecurityHeadersMiddleware
from octamart.services.storage import ImageStorage

TOKENS = {"customer-token": "user-1", "admin-token": "admin-1"}
CUSTOMER = {"Authorization": "Bearer customer-token"}
ADMIN = {"Authorization": "Bearer admin-token"}


@pytest.fixture
def client(db, supabase, customer_row, admin_row):
    """Test client over the fake database; bearer tokens map to seeded users"""

    def get_user(token):
        user_id = TOKENS.get(token)
        return SimpleNamespace(user=SimpleNamespace(id=user_id)) if user_id else None

    supabase.auth.get_user = AsyncMock(side_effect=get_user)
    return TestClient(app)


def checkout_body(**overrides):
    body = {
        "customerName": "Budi Santoso",
        "customerEmail": "budi@example.com",
        "customerPhone": "081234567890",
        "shippingAddress": {
            "street": "Jl. Merdeka 1",
            "city": "Bandung",
            "postalCode": "40111",
            "province": "Jawa Barat",
        },
        "paymentMethod": "cod",
    }
    body.update(overrides)
    return body


def test_health_check(client):
    """Test health check endpoint"""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "service": "octamart"}


def test_security_headers(client):
    response = client.get("/api/health")
    assert response.headers["X-Frame-Options"] == "DENY"


def test_security_headers_on_preflight(client):
    response = client.options(
        "/api/products",
        headers={"Origin": "https://shop.example.com", "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 200
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_security_headers_wrap_rate_limiter():
    assert app.user_middleware[0].cls is SecurityHeadersMiddleware


class TestCatalogEndpoints:
    def test_get_products(self, client, products):
        response = client.get("/api/products", params={"category": "Sepatu", "limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert len(body["data"]) == 1
        assert body["pagination"] == {"page": 1, "limit": 1, "total": 2, "totalPages": 2}

    def test_get_product_by_id(self, client, products):
        response = client.get("/api/products/prod-2")

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Sandal Gunung"

    def test_product_not_found(self, client, products):
        response = client.get("/api/products/nope")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Product not found"}

    def test_categories(self, client, products):
        assert client.get("/api/categories").json()["data"] == ["Sandal", "Sepatu"]

    def test_invalid_limit(self, client):
        assert client.get("/api/products", params={"limit": 1000}).status_code == 422


class TestAuthEndpoints:
    def test_me(self, client):
        response = client.get("/api/auth/me", headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["data"]["email"] == "budi@example.com"

    def test_me_without_token(self, client):
        response = client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_me_with_unknown_token(self, client):
        assert client.get("/api/auth/me", headers={"Authorization": "Bearer forged"}).status_code == 401

    def test_update_me(self, client, supabase):
        response = client.put(
            "/api/auth/me",
            json={"name": "Budi Santoso", "phone": "0811111111", "address": "Jl. Dago 2, Bandung", "role": "admin"},
            headers=CUSTOMER,
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["phone"] == "0811111111"
        assert data["address"] == "Jl. Dago 2, Bandung"
        assert data["role"] == "customer"
        assert client.get("/api/auth/me", headers=CUSTOMER).json()["data"]["address"] == "Jl. Dago 2, Bandung"

    def test_update_me_blank_name(self, client):
        response = client.put("/api/auth/me", json={"name": " "}, headers=CUSTOMER)

        assert response.status_code == 400

    def test_update_me_requires_login(self, client):
        assert client.put("/api/auth/me", json={"name": "Budi"}).status_code == 401

    def test_register_validation_error(self, client):
        response = client.post("/api/auth/register", json={"email": "sari@example.com", "password": "123", "name": "Sari"})

        assert response.status_code == 400
        assert "Password" in response.json()["message"]

    def test_logout(self, client, supabase):
        response = client.post("/api/auth/logout", headers=CUSTOMER)

        assert response.status_code == 200
        supabase.auth.admin.sign_out.assert_awaited_once_with("customer-token")


class TestCartAndCheckout:
    def test_cart_requires_auth(self, client):
        assert client.get("/api/cart").status_code == 401

    def test_add_then_checkout(self, client, supabase, products):
        added = client.post("/api/cart", json={"productId": "prod-1", "quantity": 2}, headers=CUSTOMER)
        assert added.status_code == 201

        cart = client.get("/api/cart", headers=CUSTOMER).json()["data"]
        assert cart["subtotal"] == 500000
        assert cart["shipping"] == 15000

        response = client.post("/api/orders", json=checkout_body(), headers=CUSTOMER)

        assert response.status_code == 201
        order = response.json()["data"]
        assert order["paymentMethod"] == "cash_on_delivery"
        assert order["totalAmount"] == 570000
        assert supabase.rows("cart_items") == []

        history = client.get("/api/orders", headers=CUSTOMER).json()
        assert history["pagination"]["total"] == 1

        cancelled = client.post(f"/api/orders/{order['id']}/cancel", headers=CUSTOMER)
        assert cancelled.status_code == 200
        assert cancelled.json()["data"]["status"] == "cancelled"

    def test_add_beyond_stock(self, client, products):
        response = client.post("/api/cart", json={"productId": "prod-3", "quantity": 3}, headers=CUSTOMER)

        assert response.status_code == 409

    def test_update_to_zero_removes(self, client, supabase, products):
        item = client.post("/api/cart", json={"productId": "prod-2"}, headers=CUSTOMER).json()["data"]

        response = client.put("/api/cart", json={"itemId": item["id"], "quantity": 0}, headers=CUSTOMER)

        assert response.status_code == 200
        assert response.json()["data"] is None
        assert supabase.rows("cart_items") == []

    def test_checkout_empty_cart(self, client, products):
        response = client.post("/api/orders", json=checkout_body(), headers=CUSTOMER)

        assert response.status_code == 400
        assert response.json()["message"] == "Cart is empty"

    def test_checkout_failure_is_500(self, client, supabase, products):
        supabase.failures[("order_items", "insert")] = RuntimeError("insert failed")

        response = client.post(
            "/api/orders",
            json=checkout_body(items=[{"productId": "prod-1", "quantity": 1}]),
            headers=CUSTOMER,
        )

        assert response.status_code == 500
        assert supabase.rows("orders") == []


class TestReviewEndpoints:
    def test_create_and_list(self, client, products):
        created = client.post(
            "/api/reviews",
            json={"productId": "prod-1", "rating": 5, "comment": "Enak dipakai lari pagi"},
            headers=CUSTOMER,
        )
        assert created.status_code == 201

        body = client.get("/api/reviews", params={"productId": "prod-1"}).json()
        assert body["stats"]["averageRating"] == 5
        assert body["data"][0]["userName"] == "Budi Santoso"

    def test_stats_requires_product(self, client):
        assert client.get("/api/reviews/stats").status_code == 400

    def test_invalid_rating(self, client, products):
        response = client.post(
            "/api/reviews",
            json={"productId": "prod-1", "rating": 7, "comment": "Enak dipakai lari pagi"},
            headers=CUSTOMER,
        )
        assert response.status_code == 400


class TestAdminEndpoints:
    @pytest.mark.parametrize("method,path", [
        ("get", "/api/admin/products"),
        ("get", "/api/admin/orders"),
        ("get", "/api/admin/customers"),
        ("get", "/api/admin/reviews"),
        ("get", "/api/admin/dashboard"),
        ("get", "/api/admin/financial"),
    ])
    def test_customer_forbidden(self, client, method, path):
        response = getattr(client, method)(path, headers=CUSTOMER)

        assert response.status_code == 403
        assert response.json()["message"] == "Admin access required"

    def test_requires_token(self, client):
        assert client.get("/api/admin/dashboard").status_code == 401

    def test_product_crud(self, client, supabase):
        created = client.post(
            "/api/admin/products",
            json={"name": "Topi", "price": 50000, "category": "Aksesoris", "stock": 4},
            headers=ADMIN,
        )
        assert created.status_code == 201
        product_id = created.json()["data"]["id"]

        updated = client.put(f"/api/admin/products/{product_id}", json={"stock": 9}, headers=ADMIN)
        assert updated.json()["data"]["stock"] == 9

        assert client.delete(f"/api/admin/products/{product_id}", headers=ADMIN).status_code == 200
        assert supabase.rows("products") == []

    def test_invalid_product(self, client):
        response = client.post(
            "/api/admin/products",
            json={"name": "Topi", "price": 0, "category": "Aksesoris"},
            headers=ADMIN,
        )
        assert response.status_code == 400

    def test_order_status_update(self, client, products):
        client.post("/api/cart", json={"productId": "prod-1"}, headers=CUSTOMER)
        order = client.post("/api/orders", json=checkout_body(), headers=CUSTOMER).json()["data"]

        invalid = client.put(f"/api/admin/orders/{order['id']}", json={"status": "delivered"}, headers=ADMIN)
        assert invalid.status_code == 400

        response = client.put(f"/api/admin/orders/{order['id']}", json={"status": "processing"}, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "processing"

    def test_cannot_delete_self(self, client):
        response = client.delete("/api/admin/customers/admin-1", headers=ADMIN)

        assert response.status_code == 400

    def test_review_unknown_action(self, client):
        response = client.put("/api/admin/reviews/r-1", json={"action": "archive"}, headers=ADMIN)

        assert response.status_code == 400

    def test_dashboard(self, client, products):
        response = client.get("/api/admin/dashboard", headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["data"]["totalProducts"] == 3

    def test_financial_report(self, client, products):
        response = client.get("/api/admin/financial", params={"period": "month", "month": 13}, headers=ADMIN)
        assert response.status_code == 400

        response = client.get("/api/admin/financial", params={"period": "year", "year": 2024}, headers=ADMIN)
        assert response.status_code == 200
        assert response.json()["data"]["summary"]["period"]["type"] == "year"

    def test_upload_image(self, client, supabase):
        response = client.post(
            "/api/admin/upload",
            files={"file": ("sepatu.png", b"\x89PNG\r\n\x1a\n", "image/png")},
            data={"folder": "products"},
            headers=ADMIN,
        )

        assert response.status_code == 200
        assert response.json()["path"].startswith("products/")
        assert len(supabase.storage.files) == 1

    def test_upload_without_file(self, client):
        response = client.post("/api/admin/upload", data={"folder": "products"}, headers=ADMIN)

        assert response.status_code == 400

    def test_upload_too_large(self, client, supabase, monkeypatch):
        monkeypatch.setattr(config, "MAX_UPLOAD_SIZE", 16)

        response = client.post(
            "/api/admin/upload",
            files={"file": ("sepatu.png", b"\x89PNG\r\n\x1a\n" + b"\x00" * 64, "image/png")},
            headers=ADMIN,
        )

        assert response.status_code == 400
        assert "too large" in response.json()["message"]
        assert supabase.storage.files == {}

    def test_upload_from_url(self, client, supabase):
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, content=b"GIF89a", headers={"content-type": "image/gif"})
        )
        storage = ImageStorage(supabase, http_transport=transport)

        with patch("octamart.routers.admin.products.get_image_storage", return_value=storage):
            response = client.post(
                "/api/admin/upload-url",
                json={"imageUrl": "https://cdn.example.com/sandal.gif", "folder": "products"},
                headers=ADMIN,
            )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["path"].endswith(".gif")
        assert body["originalUrl"] == "https://cdn.example.com/sandal.gif"

    def test_upload_from_url_requires_url(self, client):
        response = client.post("/api/admin/upload-url", json={}, headers=ADMIN)

        assert response.status_code == 400
        assert response.json()["message"] == "No image URL provided"

    def test_upload_from_url_admin_only(self, client):
        response = client.post("/api/admin/upload-url", json={"imageUrl": "https://cdn.example.com/a.png"}, headers=CUSTOMER)

        assert response.status_code == 403

    def test_unexpected_error_is_500(self, client):
        with patch("octamart.reports.financial.FinancialReportService.dashboard_stats",
                   AsyncMock(side_effect=RuntimeError("boom"))):
            response = client.get("/api/admin/dashboard", headers=ADMIN)

        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error"
