"""Tests for report periods, the financial report and dashboard counters"""
from datetime import datetime, timezone

import pytest

from octamart import config
from octamart.errors import ValidationError
from octamart.reports import FinancialReportService, resolve_period

from conftest import days_ago

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class TestResolvePeriod:
    def test_month_is_one_based_and_inclusive(self):
        period = resolve_period("month", year=2024, month=2, now=NOW)

        assert period.start == datetime(2024, 2, 1, tzinfo=timezone.utc)
        assert period.end == datetime(2024, 2, 29, 23, 59, 59, 999999, tzinfo=timezone.utc)

    def test_month_defaults_to_current(self):
        period = resolve_period("month", now=NOW)

        assert period.month == 6
        assert period.year == 2024

    def test_quarter(self):
        period = resolve_period("quarter", year=2023, quarter=4, now=NOW)

        assert period.start == datetime(2023, 10, 1, tzinfo=timezone.utc)
        assert period.end.month == 12 and period.end.day == 31

    def test_semester(self):
        period = resolve_period("semester", year=2024, semester=2, now=NOW)

        assert period.start.month == 7
        assert period.end.month == 12

    def test_year(self):
        period = resolve_period("year", year=2022, now=NOW)

        assert period.start == datetime(2022, 1, 1, tzinfo=timezone.utc)
        assert period.to_dict()["endFormatted"] == "31/12/2022"

    @pytest.mark.parametrize("kwargs", [
        {"period": "month", "month": 13},
        {"period": "quarter", "quarter": 5},
        {"period": "semester", "semester": 3},
        {"period": "month", "month": 0},
        {"period": "quarter", "quarter": 0},
        {"period": "semester", "semester": 0},
    ])
    def test_out_of_range(self, kwargs):
        with pytest.raises(ValidationError):
            resolve_period(now=NOW, **kwargs)

    def test_unknown_period_is_all(self):
        period = resolve_period("decade", now=NOW)

        assert period.type == "all"
        assert period.start == config.STORE_START_DATE
        assert period.end == NOW


@pytest.fixture
def sales(supabase, customer_row, products):
    """One completed, one delivered, one pending and one old cancelled order"""
    supabase.seed(
        "orders",
        {"id": "o-1", "user_id": "user-1", "order_number": "ORD-1", "total_amount": 565000,
         "status": "completed", "customer_name": "Budi Santoso", "created_at": days_ago(2)},
        {"id": "o-2", "user_id": "user-1", "order_number": "ORD-2", "total_amount": 176500,
         "status": "delivered", "created_at": days_ago(1)},
        {"id": "o-3", "user_id": "user-1", "order_number": "ORD-3", "total_amount": 1009000,
         "status": "pending", "customer_name": "Budi Santoso", "created_at": days_ago(1)},
        {"id": "o-4", "user_id": "user-1", "order_number": "ORD-4", "total_amount": 287500,
         "status": "cancelled", "customer_name": "Budi Santoso", "created_at": "2021-03-01T10:00:00+00:00"},
    )
    supabase.seed(
        "order_items",
        {"order_id": "o-1", "product_id": "prod-1", "product_name": "Sepatu Lari", "quantity": 2, "price": 250000},
        {"order_id": "o-2", "product_id": "prod-2", "product_name": "Sandal Gunung", "quantity": 1, "price": 150000},
        {"order_id": "o-3", "product_id": "prod-3", "product_name": "Sepatu Kulit", "quantity": 1, "price": 900000},
        {"order_id": "o-4", "product_id": "prod-1", "product_name": "Sepatu Lari", "quantity": 1, "price": 250000},
    )


class TestFinancialReport:
    @pytest.mark.asyncio
    async def test_all_time_report(self, db, sales):
        report = await FinancialReportService(db).generate(resolve_period("all"))

        summary = report["summary"]
        assert summary["totalOrders"] == 4
        assert summary["completedOrders"] == 2
        assert summary["totalRevenue"] == 741500
        assert report["statusDistribution"] == {"completed": 1, "delivered": 1, "pending": 1, "cancelled": 1}

        performance = report["productPerformance"]
        assert [p["id"] for p in performance] == ["prod-3", "prod-1", "prod-2"]
        assert performance[1]["totalSold"] == 3
        assert performance[1]["totalRevenue"] == 750000
        assert performance[1]["ordersCount"] == 2

        categories = {c["category"]: c for c in report["categoryStats"]}
        assert categories["Sepatu"]["totalRevenue"] == 1650000
        assert categories["Sepatu"]["productCount"] == 2

    @pytest.mark.asyncio
    async def test_period_filters_orders(self, db, sales):
        now = datetime.now(timezone.utc)
        report = await FinancialReportService(db).generate(resolve_period("year", year=2021, now=now))

        assert report["summary"]["totalOrders"] == 1
        assert report["summary"]["totalRevenue"] == 0
        assert report["orders"][0]["orderNumber"] == "ORD-4"

    @pytest.mark.asyncio
    async def test_customer_name_from_profile(self, db, sales):
        report = await FinancialReportService(db).generate(resolve_period("all"))

        names = {o["orderNumber"]: o["customerName"] for o in report["orders"]}
        assert names["ORD-2"] == "Budi Santoso"

    @pytest.mark.asyncio
    async def test_unsold_products_listed(self, db, products):
        report = await FinancialReportService(db).generate(resolve_period("all"))

        assert len(report["productPerformance"]) == 3
        assert all(p["totalSold"] == 0 for p in report["productPerformance"])
        assert report["summary"]["totalRevenue"] == 0


class TestDashboard:
    @pytest.mark.asyncio
    async def test_counters(self, db, sales):
        stats = await FinancialReportService(db).dashboard_stats()

        assert stats == {
            "totalProducts": 3,
            "totalStock": 27,
            "totalOrders": 4,
            "totalRevenue": 741500,
            "lowStockProducts": 2,
        }

    @pytest.mark.asyncio
    async def test_empty_store(self, db):
        stats = await FinancialReportService(db).dashboard_stats()

        assert stats["totalProducts"] == 0
        assert stats["totalRevenue"] == 0
