"""Travel expense analytics shared by the dashboard applications.

Every view that groups expenses (the analytics endpoint, the overview cards
and any preview rendered by a client) calls into this package so the
grouping rules exist exactly once.
"""

from .grouping import (
    GROUPINGS,
    UNCATEGORIZED,
    accumulate_fixed,
    aggregate,
    category_key,
    department_key,
    group_by_category,
    group_by_department,
    group_by_month,
    group_by_submitter,
    month_key,
    submitter_key,
)
from .models import (
    AnalyticsResult,
    Bucket,
    ExpenseRecord,
    OverviewStats,
    Summary,
    TimeWindow,
)
from .ranking import rank_by_key, rank_descending, top_n
from .summary import (
    TOP_SUBMITTERS,
    TREND_MONTHS,
    category_shares,
    compute_analytics,
    monthly_trend,
    overview_stats,
    summarize,
    top_submitters,
)
from .windows import DEFAULT_RANGE, RANGE_TOKENS, filter_records, resolve_window

__all__ = [
    "AnalyticsResult",
    "Bucket",
    "DEFAULT_RANGE",
    "ExpenseRecord",
    "GROUPINGS",
    "OverviewStats",
    "RANGE_TOKENS",
    "Summary",
    "TOP_SUBMITTERS",
    "TREND_MONTHS",
    "TimeWindow",
    "UNCATEGORIZED",
    "accumulate_fixed",
    "aggregate",
    "category_key",
    "category_shares",
    "compute_analytics",
    "department_key",
    "filter_records",
    "group_by_category",
    "group_by_department",
    "group_by_month",
    "group_by_submitter",
    "month_key",
    "monthly_trend",
    "overview_stats",
    "rank_by_key",
    "rank_descending",
    "resolve_window",
    "submitter_key",
    "summarize",
    "top_n",
    "top_submitters",
]
