"""Shared builders for the analytics tests."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from packages.expense_analytics import ExpenseRecord


def make_record(
    amount: str,
    date: datetime,
    category: str = "hotel",
    submitter: str = "Alex",
    department: str | None = "Tech",
    record_id: int | None = None,
) -> ExpenseRecord:
    """Build an :class:`ExpenseRecord` with sensible defaults."""

    return ExpenseRecord(
        id=record_id,
        amount=Decimal(amount),
        date=date,
        category=category,
        submitter_name=submitter,
        submitter_department=department,
    )
