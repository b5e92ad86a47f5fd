"""Admin reports."""
from .financial import FinancialReportService, ReportPeriod, resolve_period

__all__ = ["FinancialReportService", "ReportPeriod", "resolve_period"]
