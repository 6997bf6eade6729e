"""HTTP routes exposing expense analytics."""

from __future__ import annotations

from datetime import datetime
from typing import List

from dateutil.relativedelta import relativedelta
from flask import Blueprint, Response, abort, current_app, jsonify, request

from .. import get_repository
from ..forms import parse_datetime
from ..services import serialize_analytics, serialize_buckets, serialize_overview
from ..shared_models import (
    GROUPINGS,
    ExpenseRecord,
    compute_analytics,
    filter_records,
    monthly_trend,
    overview_stats,
    resolve_window,
    top_submitters,
)

analytics_bp = Blueprint("analytics", __name__, url_prefix="/api")

# Covers the trailing trend window whatever range was selected.
SNAPSHOT_MONTHS = 12


def _reference_time() -> datetime:
    """Return ``?as_of=`` when supplied, otherwise the current local time."""

    raw = request.args.get("as_of", "").strip()
    if raw:
        parsed = parse_datetime(raw)
        if parsed is None:
            abort(400, description="as_of must be an ISO date or timestamp")
        return parsed
    return datetime.now()


def _load_snapshot(range_token: str | None, now: datetime) -> List[ExpenseRecord]:
    window = resolve_window(range_token, now)
    earliest = min(window.start, now - relativedelta(months=SNAPSHOT_MONTHS))
    return get_repository().load_records(start=earliest, end=now)


@analytics_bp.get("/analytics")
def analytics() -> Response:
    """Return the analytics payload for ``?timeRange=`` (default six months)."""

    now = _reference_time()
    range_token = request.args.get("timeRange")
    records = _load_snapshot(range_token, now)
    result = compute_analytics(records, range_token, now)
    return jsonify(serialize_analytics(result, current_app.config["CATEGORY_LABELS"]))


@analytics_bp.get("/analytics/<dimension>")
def analytics_dimension(dimension: str) -> Response:
    """Return a single grouping for dashboard widgets that need one view.

    ``dimension`` is ``category``, ``department``, ``submitter``, ``month``,
    ``trend`` or ``top-submitters``.
    """

    now = _reference_time()
    range_token = request.args.get("timeRange")
    records = _load_snapshot(range_token, now)
    window = resolve_window(range_token, now)
    labels = current_app.config["CATEGORY_LABELS"] if dimension == "category" else None

    if dimension == "trend":
        buckets = monthly_trend(records, now)
    elif dimension == "top-submitters":
        limit = request.args.get("limit", default=10, type=int)
        buckets = top_submitters(filter_records(records, window), limit=limit)
    elif dimension in GROUPINGS:
        buckets = GROUPINGS[dimension](filter_records(records, window))
    else:
        abort(404, description=f"Unknown analytics dimension '{dimension}'")

    return jsonify(
        {
            "dimension": dimension,
            "time_range": window.label,
            "buckets": serialize_buckets(buckets, labels),
        }
    )


@analytics_bp.get("/overview")
def overview() -> Response:
    """Return the all-time figures shown on the dashboard overview cards."""

    now = _reference_time()
    stats = overview_stats(get_repository().load_records(), now)
    return jsonify(serialize_overview(stats, current_app.config["CATEGORY_LABELS"]))
