"""
Reports package.

Aggregations behind the dashboard and report views, and the Excel export.
"""

from wealthtrack.reports.export import EXCEL_MIME_TYPE, export_filename, export_workbook
from wealthtrack.reports.summary import (
    CategoryStat,
    DashboardTotals,
    GroupStat,
    category_ledger,
    category_stats,
    dashboard_totals,
    group_for_category,
    group_stats,
)

__all__ = [
    "CategoryStat",
    "DashboardTotals",
    "GroupStat",
    "category_ledger",
    "category_stats",
    "dashboard_totals",
    "group_for_category",
    "group_stats",
    "EXCEL_MIME_TYPE",
    "export_filename",
    "export_workbook",
]
