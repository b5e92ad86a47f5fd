"""Pytest configuration and fixtures"""
import os
from datetime import datetime, timedelta, timezone

import pytest

# Set test environment variables
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test_key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from octamart.services.database import Database, set_database
from octamart.services.models import UserProfile

from fakes import FakeSupabase


def days_ago(days: float) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


@pytest.fixture
def supabase():
    """In-memory Supabase client"""
    return FakeSupabase()


@pytest.fixture
def db(supabase):
    """Database facade over the fake client, installed as the singleton"""
    database = Database(supabase)
    set_database(database)
    yield database
    set_database(None)


@pytest.fixture
def customer_row(supabase):
    return supabase.seed("users", {
        "id": "user-1",
        "email": "budi@example.com",
        "name": "Budi Santoso",
        "role": "customer",
        "is_active": True,
        "phone": "081234567890",
    })[0]


@pytest.fixture
def admin_row(supabase):
    return supabase.seed("users", {
        "id": "admin-1",
        "email": "admin@octamart.id",
        "name": "Admin",
        "role": "admin",
        "is_active": True,
    })[0]


@pytest.fixture
def customer(customer_row):
    return UserProfile(**customer_row)


@pytest.fixture
def admin(admin_row):
    return UserProfile(**admin_row)


@pytest.fixture
def products(supabase):
    """Three products across two categories"""
    return supabase.seed(
        "products",
        {
            "id": "prod-1",
            "name": "Sepatu Lari",
            "price": 250000,
            "description": "Sepatu lari ringan",
            "category": "Sepatu",
            "stock": 20,
            "rating": 0,
            "reviews_count": 0,
            "created_at": days_ago(3),
        },
        {
            "id": "prod-2",
            "name": "Sandal Gunung",
            "price": 150000,
            "description": "Sandal untuk mendaki",
            "category": "Sandal",
            "stock": 5,
            "rating": 0,
            "reviews_count": 0,
            "created_at": days_ago(2),
        },
        {
            "id": "prod-3",
            "name": "Sepatu Kulit",
            "price": 900000,
            "description": "Sepatu formal kulit asli",
            "category": "Sepatu",
            "stock": 2,
            "rating": 0,
            "reviews_count": 0,
            "created_at": days_ago(1),
        },
    )
