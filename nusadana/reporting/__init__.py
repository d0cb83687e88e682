"""Reporting module for NusaDana.

Fund totals, month-bucketed metrics and the LPJ project report. Money is
summed as ``Decimal``.
"""

from nusadana.reporting.funds import FundsSummary, compute_funds_summary, summarize_funds
from nusadana.reporting.lpj import LpjReport, build_lpj_report
from nusadana.reporting.metrics import (
    MonthBucket,
    bucket_projects_by_month,
    compute_projects_by_month,
)

__all__ = [
    "FundsSummary",
    "LpjReport",
    "MonthBucket",
    "bucket_projects_by_month",
    "build_lpj_report",
    "compute_funds_summary",
    "compute_projects_by_month",
    "summarize_funds",
]
