"""Range token resolution and date-window filtering."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Dict, Iterable, List

from dateutil.relativedelta import relativedelta

from .models import ExpenseRecord, TimeWindow

logger = logging.getLogger(__name__)

DEFAULT_RANGE = "6months"

# Number of calendar months covered by each supported range token.
RANGE_TOKENS: Dict[str, int] = {
    "1month": 1,
    "3months": 3,
    "6months": 6,
    "1year": 12,
}

MONTH_KEY_FORMAT = "%Y-%m"


def resolve_window(token: str | None, now: datetime) -> TimeWindow:
    """Translate a range token into a concrete window ending at ``now``.

    Months are subtracted on the calendar rather than in fixed-length chunks,
    so 31 March minus one month lands on the last day of February. Unknown
    tokens silently use :data:`DEFAULT_RANGE`.

    Args:
        token: One of the keys of :data:`RANGE_TOKENS`. Any other value,
            including ``None``, selects the default range.
        now: Reference instant that becomes the window end.

    Returns:
        TimeWindow: Window labelled with the token that was actually applied.
    """

    applied = token if token in RANGE_TOKENS else DEFAULT_RANGE
    if applied != token:
        logger.debug("Unknown range token %r; using %s", token, applied)
    start = now - relativedelta(months=RANGE_TOKENS[applied])
    return TimeWindow(start=start, end=now, label=applied)


def filter_records(
    records: Iterable[ExpenseRecord], window: TimeWindow
) -> List[ExpenseRecord]:
    """Return the records dated inside ``window`` in their original order."""

    return [record for record in records if window.contains(record.date)]


def month_key(moment: datetime) -> str:
    """Return the zero-padded ``YYYY-MM`` key for ``moment``."""

    return moment.strftime(MONTH_KEY_FORMAT)


def month_start(moment: datetime) -> datetime:
    """Truncate ``moment`` to the first instant of its calendar month."""

    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def trailing_month_keys(now: datetime, months: int = 12) -> List[str]:
    """Return ``months`` month keys, oldest first, ending with ``now``'s month."""

    return [
        month_key(now - relativedelta(months=offset))
        for offset in range(months - 1, -1, -1)
    ]
