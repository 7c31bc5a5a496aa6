"""
PDV Reporting Engine - Public API
===================================
"""

from engines.reporting.report import (
    BestSeller,
    SalesReport,
    available_days,
    best_sellers,
    build_sales_report,
    group_sales_by_day,
    sale_day,
)

__all__ = [
    "BestSeller",
    "SalesReport",
    "available_days",
    "best_sellers",
    "build_sales_report",
    "group_sales_by_day",
    "sale_day",
]
