"""
Financial report and admin dashboard counters.

Revenue counts only orders that reached a revenue status (completed or
delivered). Product performance is computed from order_items snapshots,
so later price edits do not rewrite history.
"""
from calendar import monthrange
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from octamart import config
from octamart.errors import ValidationError
from octamart.logging import get_logger
from octamart.services.money import multiply, to_decimal, to_json_number

logger = get_logger(__name__)

PERIODS = ("all", "month", "quarter", "semester", "year")


@dataclass
class ReportPeriod:
    type: str
    start: datetime
    end: datetime
    year: int
    month: Optional[int] = None
    quarter: Optional[int] = None
    semester: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "year": self.year,
            "month": self.month,
            "quarter": self.quarter,
            "semester": self.semester,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "startFormatted": self.start.strftime("%d/%m/%Y"),
            "endFormatted": self.end.strftime("%d/%m/%Y"),
        }


def _months_range(year: int, first_month: int, last_month: int) -> tuple[datetime, datetime]:
    """First instant of first_month through the last instant of last_month."""
    start = datetime(year, first_month, 1, tzinfo=timezone.utc)
    last_day = monthrange(year, last_month)[1]
    end = datetime(year, last_month, last_day, 23, 59, 59, 999999, tzinfo=timezone.utc)
    return start, end


def _require(value: Optional[int], low: int, high: int, name: str) -> int:
    if value is None or not low <= value <= high:
        raise ValidationError(f"{name} must be between {low} and {high}")
    return value


def resolve_period(
    period: Optional[str] = "all",
    year: Optional[int] = None,
    month: Optional[int] = None,
    quarter: Optional[int] = None,
    semester: Optional[int] = None,
    now: Optional[datetime] = None,
) -> ReportPeriod:
    """
    Date range of a report period.

    Months are 1-12. Unknown period names fall back to "all", which spans
    from the store start date to now.
    """
    now = now or datetime.now(timezone.utc)
    year = year or now.year
    period = (period or "all").lower()

    if period == "month":
        month = _require(now.month if month is None else month, 1, 12, "Month")
        start, end = _months_range(year, month, month)
        return ReportPeriod(period, start, end, year, month=month)
    if period == "quarter":
        quarter = _require(1 if quarter is None else quarter, 1, 4, "Quarter")
        first = (quarter - 1) * 3 + 1
        start, end = _months_range(year, first, first + 2)
        return ReportPeriod(period, start, end, year, quarter=quarter)
    if period == "semester":
        semester = _require(1 if semester is None else semester, 1, 2, "Semester")
        first = (semester - 1) * 6 + 1
        start, end = _months_range(year, first, first + 5)
        return ReportPeriod(period, start, end, year, semester=semester)
    if period == "year":
        start, end = _months_range(year, 1, 12)
        return ReportPeriod(period, start, end, year)

    return ReportPeriod("all", config.STORE_START_DATE, now, year)


def is_revenue_status(status: Optional[str]) -> bool:
    return (status or "").lower() in config.REVENUE_STATUSES


def product_performance(products, order_items) -> list[dict[str, Any]]:
    """Sales per product (every product, unsold ones with zeros), best revenue first."""
    sales: dict[str, dict[str, Any]] = {}
    for item in order_items:
        entry = sales.setdefault(item.product_id, {"sold": 0, "revenue": Decimal("0"), "orders": set()})
        entry["sold"] += item.quantity
        entry["revenue"] += multiply(item.price, item.quantity)
        entry["orders"].add(item.order_id)

    rows = []
    for product in products:
        entry = sales.get(product.id)
        rows.append({
            "id": product.id,
            "name": product.name,
            "category": product.category,
            "price": to_json_number(product.price),
            "image": product.image,
            "stock": product.stock,
            "totalSold": entry["sold"] if entry else 0,
            "totalRevenue": entry["revenue"] if entry else Decimal("0"),
            "ordersCount": len(entry["orders"]) if entry else 0,
        })
    rows.sort(key=lambda row: row["totalRevenue"], reverse=True)
    return rows


def category_stats(performance: list[dict[str, Any]]) -> list[dict[str, Any]]:
    categories: dict[str, dict[str, Any]] = {}
    for row in performance:
        name = row["category"] or "Uncategorized"
        stats = categories.setdefault(name, {
            "category": name,
            "totalRevenue": Decimal("0"),
            "totalSold": 0,
            "productCount": 0,
        })
        stats["totalRevenue"] += row["totalRevenue"]
        stats["totalSold"] += row["totalSold"]
        stats["productCount"] += 1
    return sorted(categories.values(), key=lambda c: c["totalRevenue"], reverse=True)


def _jsonify_revenue(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [{**row, "totalRevenue": to_json_number(row["totalRevenue"])} for row in rows]


class FinancialReportService:
    def __init__(self, db):
        self.db = db

    async def generate(self, period: ReportPeriod) -> dict[str, Any]:
        orders = await self.db.orders.get_in_range(period.start, period.end)
        products = await self.db.products.get_all()
        items = await self.db.orders.get_items_for_orders([o.id for o in orders])
        customers = await self.db.users.get_many([o.user_id for o in orders if not o.customer_name])

        logger.info(
            f"Financial report {period.type}: {len(orders)} orders, {len(items)} items "
            f"between {period.start.date()} and {period.end.date()}"
        )

        revenue_orders = [o for o in orders if is_revenue_status(o.status)]
        total_revenue = sum((to_decimal(o.total_amount) for o in revenue_orders), Decimal("0"))

        performance = product_performance(products, items)
        status_distribution: dict[str, int] = {}
        for order in orders:
            status_distribution[order.status] = status_distribution.get(order.status, 0) + 1

        order_rows = []
        for order in orders:
            customer = customers.get(order.user_id)
            order_rows.append({
                "id": order.id,
                "orderNumber": order.order_number,
                "customerName": order.customer_name or (customer.name if customer else None) or "Unknown",
                "total": to_json_number(order.total_amount),
                "status": order.status,
                "date": order.created_at.date().isoformat() if order.created_at else None,
            })

        return {
            "summary": {
                "totalRevenue": to_json_number(total_revenue),
                "totalOrders": len(orders),
                "completedOrders": len(revenue_orders),
                "totalUnitsSold": sum(row["totalSold"] for row in performance),
                "period": period.to_dict(),
            },
            "productPerformance": _jsonify_revenue(performance[:config.TOP_PRODUCTS_LIMIT]),
            "categoryStats": _jsonify_revenue(category_stats(performance)),
            "statusDistribution": status_distribution,
            "orders": order_rows,
        }

    async def dashboard_stats(self) -> dict[str, Any]:
        products = await self.db.products.get_all()
        orders = await self.db.orders.get_totals()
        revenue = sum(
            (to_decimal(o.get("total_amount")) for o in orders if is_revenue_status(o.get("status"))),
            Decimal("0"),
        )
        return {
            "totalProducts": len(products),
            "totalStock": sum(p.stock for p in products),
            "totalOrders": len(orders),
            "totalRevenue": to_json_number(revenue),
            "lowStockProducts": sum(1 for p in products if p.stock <= config.LOW_STOCK_THRESHOLD),
        }
