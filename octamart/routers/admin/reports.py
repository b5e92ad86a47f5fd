"""Admin Reports Router - financial report and dashboard counters."""
from typing import Optional

from fastapi import APIRouter, Depends

from octamart.auth import verify_admin
from octamart.reports import resolve_period
from octamart.routers.deps import get_report_service, service_errors

router = APIRouter(tags=["admin-reports"])


@router.get("/financial")
async def admin_financial_report(
    period: str = "all",
    year: Optional[int] = None,
    month: Optional[int] = None,
    quarter: Optional[int] = None,
    semester: Optional[int] = None,
    admin=Depends(verify_admin),
):
    """Revenue, product and category performance for a period (months are 1-12)."""
    with service_errors("Financial report"):
        report_period = resolve_period(period, year=year, month=month, quarter=quarter, semester=semester)
        report = await get_report_service().generate(report_period)
    label = "all data" if report_period.type == "all" else f"{report_period.type} {report_period.year}"
    return {"success": True, "data": report, "message": f"Financial report generated successfully for {label}"}


@router.get("/dashboard")
async def admin_dashboard(admin=Depends(verify_admin)):
    with service_errors("Dashboard stats"):
        stats = await get_report_service().dashboard_stats()
    return {"success": True, "data": stats}
