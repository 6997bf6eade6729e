"""Utilities for importing the shared analytics package across apps."""

from __future__ import annotations

from importlib import import_module
from pathlib import Path
import sys
from types import ModuleType
from typing import Iterable

_PACKAGE_NAME = "packages.expense_analytics"


def _ensure_repo_root_on_path() -> None:
    """Add the monorepo root to ``sys.path`` when running from source."""

    for candidate in Path(__file__).resolve().parents:
        packages_dir = candidate / "packages"
        if packages_dir.is_dir():
            root_path = str(candidate)
            if root_path not in sys.path:
                sys.path.insert(0, root_path)
            break


def _load_shared_module() -> ModuleType:
    """Import the shared analytics module, retrying after path adjustment."""

    try:
        return import_module(_PACKAGE_NAME)
    except ModuleNotFoundError:
        _ensure_repo_root_on_path()
        try:
            return import_module(_PACKAGE_NAME)
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise ModuleNotFoundError(
                "Unable to import 'packages.expense_analytics'. Install the project "
                "or ensure the repository root is on PYTHONPATH."
            ) from exc


_shared = _load_shared_module()

AnalyticsResult = _shared.AnalyticsResult
Bucket = _shared.Bucket
ExpenseRecord = _shared.ExpenseRecord
OverviewStats = _shared.OverviewStats
GROUPINGS = _shared.GROUPINGS
category_shares = _shared.category_shares
compute_analytics = _shared.compute_analytics
filter_records = _shared.filter_records
monthly_trend = _shared.monthly_trend
overview_stats = _shared.overview_stats
resolve_window = _shared.resolve_window
top_submitters = _shared.top_submitters

__all__: Iterable[str] = [
    "AnalyticsResult",
    "Bucket",
    "ExpenseRecord",
    "GROUPINGS",
    "OverviewStats",
    "category_shares",
    "compute_analytics",
    "filter_records",
    "monthly_trend",
    "overview_stats",
    "resolve_window",
    "top_submitters",
]
