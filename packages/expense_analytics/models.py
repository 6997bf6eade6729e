"""Value types shared by the expense analytics pipeline.

The dataclasses below are deliberately free of persistence concerns so the
same snapshots can be produced by the web application's repository, a batch
job, or a test fixture. Every type is immutable; aggregation functions build
new instances rather than mutating the ones they receive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Dict, Optional, Tuple


@dataclass(frozen=True, slots=True)
class ExpenseRecord:
    """Single expense submitted by a traveller.

    Submitter and category metadata arrive already denormalised from the
    record store, so the analytics code never has to join anything.
    """

    id: Optional[int]
    amount: Decimal
    date: datetime
    category: str
    submitter_name: str
    submitter_department: Optional[str] = None
    submitter_email: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Closed ``[start, end]`` interval used to select records."""

    start: datetime
    end: datetime
    label: str = ""

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError("TimeWindow start must not be after end")

    def contains(self, moment: datetime) -> bool:
        """Return ``True`` when ``moment`` lies inside the window, bounds included."""

        return self.start <= moment <= self.end


@dataclass(frozen=True, slots=True)
class Bucket:
    """Running total and record count for one grouping key."""

    key: str
    total: Decimal = Decimal()
    count: int = 0

    @property
    def average(self) -> Decimal:
        if not self.count:
            return Decimal()
        return self.total / self.count


@dataclass(frozen=True, slots=True)
class Summary:
    """Headline figures returned alongside the grouped views."""

    total_amount: Decimal
    average_amount: Decimal
    record_count: int
    window_label: str = ""


@dataclass(frozen=True, slots=True)
class AnalyticsResult:
    """Complete analytics payload for one range selection.

    ``groupings`` maps a dimension name (``category``, ``department``,
    ``submitter``, ``month``) to its ordered buckets. ``top_submitters`` and
    ``monthly_trend`` are separate views with their own windowing rules.
    """

    summary: Summary
    window: TimeWindow
    groupings: Dict[str, Tuple[Bucket, ...]] = field(default_factory=dict)
    top_submitters: Tuple[Bucket, ...] = ()
    monthly_trend: Tuple[Bucket, ...] = ()


@dataclass(frozen=True, slots=True)
class OverviewStats:
    """All-time figures shown on the dashboard overview cards."""

    total_amount: Decimal
    current_month_amount: Decimal
    record_count: int
    average_amount: Decimal
    categories: Tuple[Bucket, ...] = ()
