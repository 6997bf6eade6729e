"""Summary figures and the assembled analytics payload."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Sequence

from dateutil.relativedelta import relativedelta

from .grouping import GROUPINGS, accumulate_fixed, aggregate, month_key, submitter_key
from .models import AnalyticsResult, Bucket, ExpenseRecord, OverviewStats, Summary, TimeWindow
from .ranking import top_n
from .windows import (
    filter_records,
    month_key as format_month,
    month_start,
    resolve_window,
    trailing_month_keys,
)

logger = logging.getLogger(__name__)

TOP_SUBMITTERS = 10
TREND_MONTHS = 12
CENTS = Decimal("0.01")


def _average(total: Decimal, count: int) -> Decimal:
    if count <= 0:
        return Decimal()
    return (total / count).quantize(CENTS, rounding=ROUND_HALF_UP)


def summarize(records: Sequence[ExpenseRecord], window_label: str = "") -> Summary:
    """Return total, average and count for ``records``.

    The average is rounded to cents and defined as zero for an empty sequence.
    """

    total = sum((record.amount for record in records), Decimal())
    return Summary(
        total_amount=total,
        average_amount=_average(total, len(records)),
        record_count=len(records),
        window_label=window_label,
    )


def top_submitters(
    records: Iterable[ExpenseRecord], limit: int = TOP_SUBMITTERS
) -> List[Bucket]:
    """Rank submitters by total spend and keep the first ``limit``."""

    return top_n(aggregate(records, submitter_key), limit)


def monthly_trend(
    records: Iterable[ExpenseRecord], now: datetime, months: int = TREND_MONTHS
) -> List[Bucket]:
    """Return one bucket per trailing calendar month ending with ``now``'s month.

    The view always spans ``months`` buckets, oldest first, with zero totals
    for months without expenses. Only records between the first day of the
    oldest month and ``now`` contribute, whatever range the caller selected
    elsewhere.
    """

    if months <= 0:
        return []
    keys = trailing_month_keys(now, months)
    oldest = month_start(now - relativedelta(months=months - 1))
    window = TimeWindow(start=oldest, end=now, label=f"{months}months")
    return accumulate_fixed(filter_records(records, window), keys, month_key)


def category_shares(buckets: Iterable[Bucket], total: Decimal) -> Dict[str, Decimal]:
    """Return each bucket's percentage of ``total`` rounded to one decimal place."""

    if not total:
        return {bucket.key: Decimal() for bucket in buckets}
    return {
        bucket.key: (bucket.total * 100 / total).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        for bucket in buckets
    }


def compute_analytics(
    records: Iterable[ExpenseRecord], range_token: str | None, now: datetime
) -> AnalyticsResult:
    """Build the full analytics payload for one range selection.

    Args:
        records: Snapshot of every candidate record. The sequence is read but
            never modified.
        range_token: Range selector such as ``"3months"``. Unknown values use
            the default six-month window.
        now: Reference instant shared by every view in the payload.

    Returns:
        AnalyticsResult: Summary and per-dimension buckets for the selected
        window, the top ten submitters over that window, and the twelve-month
        trend computed over its own fixed window.
    """

    snapshot = list(records)
    window = resolve_window(range_token, now)
    selected = filter_records(snapshot, window)
    groupings = {name: tuple(group(selected)) for name, group in GROUPINGS.items()}
    summary = summarize(selected, window.label)
    logger.info(
        "Computed analytics for %s: %d of %d records, total %s",
        window.label,
        summary.record_count,
        len(snapshot),
        summary.total_amount,
    )
    return AnalyticsResult(
        summary=summary,
        window=window,
        groupings=groupings,
        top_submitters=tuple(top_submitters(selected)),
        monthly_trend=tuple(monthly_trend(snapshot, now)),
    )


def overview_stats(records: Iterable[ExpenseRecord], now: datetime) -> OverviewStats:
    """Compute the all-time overview figures plus the current month's spend."""

    snapshot = list(records)
    overall = summarize(snapshot)
    current_key = format_month(now)
    current_month = sum(
        (record.amount for record in snapshot if month_key(record) == current_key),
        Decimal(),
    )
    return OverviewStats(
        total_amount=overall.total_amount,
        current_month_amount=current_month,
        record_count=overall.record_count,
        average_amount=overall.average_amount,
        categories=tuple(GROUPINGS["category"](snapshot)),
    )
