"""Presentation helpers for the travel expenses API."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .shared_models import (
    AnalyticsResult,
    Bucket,
    ExpenseRecord,
    OverviewStats,
    category_shares,
)


@dataclass(slots=True)
class ExpenseType:
    """Expense type offered to submitters."""

    code: str
    description: str


DEFAULT_EXPENSE_TYPES: List[ExpenseType] = [
    ExpenseType(code="hotel", description="Hotel and lodging costs."),
    ExpenseType(code="flight", description="Airfare."),
    ExpenseType(code="train", description="Rail tickets."),
    ExpenseType(code="transport", description="Taxis, metro and other local transport."),
]


def describe_expense_type(code: str) -> str:
    """Return the stored description for ``code``, inventing one for new types."""

    for expense_type in DEFAULT_EXPENSE_TYPES:
        if expense_type.code == code:
            return expense_type.description
    return f"{code} expenses"


def money(value: Decimal) -> float:
    """Round a monetary amount to cents for JSON output."""

    return float(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def serialize_record(record: ExpenseRecord) -> Dict[str, Any]:
    return {
        "id": record.id,
        "amount": money(record.amount),
        "date": record.date.isoformat(),
        "category": record.category,
        "description": record.description,
        "location": record.location,
        "user": {
            "name": record.submitter_name,
            "email": record.submitter_email,
            "department": record.submitter_department,
        },
    }


def serialize_buckets(
    buckets: Iterable[Bucket], labels: Optional[Mapping[str, str]] = None
) -> List[Dict[str, Any]]:
    """Convert buckets to JSON-ready dictionaries.

    When ``labels`` is provided each entry gains a ``label`` looked up by key,
    falling back to the key itself.
    """

    payload = []
    for bucket in buckets:
        entry: Dict[str, Any] = {
            "key": bucket.key,
            "total": money(bucket.total),
            "count": bucket.count,
            "average": money(bucket.average),
        }
        if labels is not None:
            entry["label"] = labels.get(bucket.key, bucket.key)
        payload.append(entry)
    return payload


def _with_shares(
    entries: List[Dict[str, Any]], buckets: Iterable[Bucket], total: Decimal
) -> List[Dict[str, Any]]:
    shares = category_shares(buckets, total)
    for entry in entries:
        entry["share"] = float(shares[entry["key"]])
    return entries


def serialize_analytics(
    result: AnalyticsResult, labels: Mapping[str, str]
) -> Dict[str, Any]:
    """Render an :class:`AnalyticsResult` with display labels for categories."""

    summary = result.summary
    categories = result.groupings.get("category", ())
    return {
        "summary": {
            "total_amount": money(summary.total_amount),
            "average_amount": money(summary.average_amount),
            "record_count": summary.record_count,
            "time_range": summary.window_label,
            "window_start": result.window.start.isoformat(),
            "window_end": result.window.end.isoformat(),
        },
        "categories": _with_shares(
            serialize_buckets(categories, labels), categories, summary.total_amount
        ),
        "departments": serialize_buckets(result.groupings.get("department", ())),
        "submitters": serialize_buckets(result.groupings.get("submitter", ())),
        "monthly": serialize_buckets(result.groupings.get("month", ())),
        "top_submitters": serialize_buckets(result.top_submitters),
        "monthly_trend": serialize_buckets(result.monthly_trend),
    }


def serialize_overview(stats: OverviewStats, labels: Mapping[str, str]) -> Dict[str, Any]:
    return {
        "total_amount": money(stats.total_amount),
        "current_month_amount": money(stats.current_month_amount),
        "record_count": stats.record_count,
        "average_amount": money(stats.average_amount),
        "categories": _with_shares(
            serialize_buckets(stats.categories, labels),
            stats.categories,
            stats.total_amount,
        ),
    }


def search_records(
    records: Iterable[ExpenseRecord], term: str = "", category: str = "all"
) -> List[ExpenseRecord]:
    """Filter records by free text and category, keeping their order.

    ``term`` is matched case-insensitively against the submitter's name,
    email and department, the description and the location. ``category``
    ``"all"`` (or empty) disables the category filter.
    """

    needle = term.strip().lower()
    matches = []
    for record in records:
        if category and category != "all" and record.category != category:
            continue
        if needle:
            haystack = (
                record.submitter_name,
                record.submitter_email,
                record.submitter_department,
                record.description,
                record.location,
            )
            if not any(needle in value.lower() for value in haystack if value):
                continue
        matches.append(record)
    return matches
