"""Bucket aggregation over expense records.

Two accumulation policies live here:

* :func:`aggregate` emits one bucket per key observed among the records.
* :func:`accumulate_fixed` starts from a predetermined key set seeded with
  zero totals and ignores records whose key falls outside it.

Records are always visited in the order received so repeated runs over the
same snapshot produce identical buckets.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Callable, Dict, Iterable, List, Sequence

from .models import Bucket, ExpenseRecord
from .ranking import rank_by_key, rank_descending
from .windows import month_key as _format_month

logger = logging.getLogger(__name__)

UNCATEGORIZED = "uncategorized"

KeyFunc = Callable[[ExpenseRecord], str]


def category_key(record: ExpenseRecord) -> str:
    return record.category


def department_key(record: ExpenseRecord) -> str:
    department = (record.submitter_department or "").strip()
    return department or UNCATEGORIZED


def submitter_key(record: ExpenseRecord) -> str:
    return record.submitter_name


def month_key(record: ExpenseRecord) -> str:
    return _format_month(record.date)


def _accumulate(
    records: Iterable[ExpenseRecord],
    key_func: KeyFunc,
    totals: Dict[str, Decimal],
    counts: Dict[str, int],
    *,
    observed: bool,
) -> None:
    for record in records:
        key = key_func(record)
        if key not in totals:
            if not observed:
                continue
            totals[key] = Decimal()
            counts[key] = 0
        totals[key] += record.amount
        counts[key] += 1


def aggregate(records: Iterable[ExpenseRecord], key_func: KeyFunc) -> List[Bucket]:
    """Group ``records`` by ``key_func`` into buckets in first-seen key order.

    Args:
        records: Expense snapshots, typically the output of
            :func:`~packages.expense_analytics.windows.filter_records`.
        key_func: Callable returning the bucket key for a record.

    Returns:
        List[Bucket]: One bucket per distinct key. Empty input yields an empty
        list.
    """

    totals: Dict[str, Decimal] = {}
    counts: Dict[str, int] = {}
    _accumulate(records, key_func, totals, counts, observed=True)
    buckets = [Bucket(key=key, total=totals[key], count=counts[key]) for key in totals]
    logger.debug("Aggregated records into %d buckets", len(buckets))
    return buckets


def accumulate_fixed(
    records: Iterable[ExpenseRecord], keys: Sequence[str], key_func: KeyFunc
) -> List[Bucket]:
    """Accumulate ``records`` into a fixed key set, preserving ``keys`` order.

    Every key produces a bucket, with zero total and count when no record
    matched it. Records mapping to keys outside ``keys`` are dropped.
    """

    totals: Dict[str, Decimal] = {key: Decimal() for key in keys}
    counts: Dict[str, int] = {key: 0 for key in keys}
    _accumulate(records, key_func, totals, counts, observed=False)
    return [Bucket(key=key, total=totals[key], count=counts[key]) for key in totals]


def group_by_category(records: Iterable[ExpenseRecord]) -> List[Bucket]:
    """Raw category codes, largest total first."""

    return rank_descending(aggregate(records, category_key))


def group_by_department(records: Iterable[ExpenseRecord]) -> List[Bucket]:
    """Submitter departments, largest total first; blanks fall into ``uncategorized``."""

    return rank_descending(aggregate(records, department_key))


def group_by_submitter(records: Iterable[ExpenseRecord]) -> List[Bucket]:
    return rank_descending(aggregate(records, submitter_key))


def group_by_month(records: Iterable[ExpenseRecord]) -> List[Bucket]:
    """Observed calendar months in chronological order."""

    return rank_by_key(aggregate(records, month_key))


GROUPINGS: Dict[str, Callable[[Iterable[ExpenseRecord]], List[Bucket]]] = {
    "category": group_by_category,
    "department": group_by_department,
    "submitter": group_by_submitter,
    "month": group_by_month,
}
