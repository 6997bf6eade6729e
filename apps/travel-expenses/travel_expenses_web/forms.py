"""Conversion of submitted expense payloads into typed values."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional, Tuple

CENT = Decimal("0.01")
# Stored as integer cents in a signed 64-bit column.
MAX_AMOUNT = Decimal("1000000000000")


@dataclass(slots=True)
class ExpenseFormData:
    """Typed expense fields returned by :func:`parse_expense_payload`."""

    user_name: str
    user_email: Optional[str]
    user_department: Optional[str]
    expense_type: str
    amount: Decimal
    date: datetime
    description: Optional[str]
    location: Optional[str]


def _text(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    return str(value).strip()


def parse_datetime(raw: str) -> Optional[datetime]:
    """Accept ``YYYY-MM-DD`` or an ISO 8601 timestamp; return a naive datetime."""

    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_expense_payload(
    payload: Mapping[str, Any]
) -> Tuple[Optional[ExpenseFormData], List[str]]:
    """Convert a JSON or form submission into :class:`ExpenseFormData`.

    Returns a tuple of ``(result, errors)``. ``result`` is ``None`` when a
    field cannot be converted.
    """

    errors: List[str] = []
    user_name = _text(payload, "user_name")
    expense_type = _text(payload, "expense_type")
    if not user_name:
        errors.append("Submitter name is required.")
    if not expense_type:
        errors.append("Expense type is required.")

    date_raw = _text(payload, "date")
    expense_date = parse_datetime(date_raw) if date_raw else None
    if expense_date is None:
        errors.append("Date is required and must be YYYY-MM-DD or an ISO timestamp.")

    amount_raw = _text(payload, "amount")
    try:
        amount = Decimal(amount_raw)
        if not amount.is_finite() or amount < 0:
            errors.append("Amount must be zero or greater.")
        elif amount >= MAX_AMOUNT:
            errors.append(f"Amount must be less than {MAX_AMOUNT:,}.")
        elif amount != amount.quantize(CENT):
            errors.append("Amount must have at most two decimal places.")
    except (InvalidOperation, ValueError):
        errors.append("Amount must be a valid number.")
        amount = Decimal("0")

    if errors:
        return None, errors

    return (
        ExpenseFormData(
            user_name=user_name,
            user_email=_text(payload, "user_email") or None,
            user_department=_text(payload, "user_department") or None,
            expense_type=expense_type,
            amount=amount,
            date=expense_date,
            description=_text(payload, "description") or None,
            location=_text(payload, "location") or None,
        ),
        [],
    )
