"""Configuration helpers for the travel expenses web application."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv

# Display labels for the expense types seeded by ``flask init-db``.
DEFAULT_CATEGORY_LABELS: Dict[str, str] = {
    "hotel": "Hotel",
    "flight": "Flight",
    "train": "Train",
    "transport": "Local transport",
}


@dataclass(slots=True)
class AppConfig:
    """Settings loaded from environment variables."""

    database_url: str
    secret_key: str
    category_labels: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_LABELS)
    )
    log_level: str = "INFO"


def _load_category_labels(raw: str | None) -> Dict[str, str]:
    """Parse ``EXPENSES_CATEGORY_LABELS`` or return the built-in table."""

    if not raw:
        return dict(DEFAULT_CATEGORY_LABELS)
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        logging.getLogger("travel_expenses.config").warning(
            "EXPENSES_CATEGORY_LABELS is not valid JSON; using default labels."
        )
        return dict(DEFAULT_CATEGORY_LABELS)
    if not isinstance(parsed, dict):
        logging.getLogger("travel_expenses.config").warning(
            "EXPENSES_CATEGORY_LABELS must be a JSON object; using default labels."
        )
        return dict(DEFAULT_CATEGORY_LABELS)
    return {str(code): str(label) for code, label in parsed.items()}


def load_config() -> AppConfig:
    """Create an :class:`AppConfig` instance from environment variables.

    A ``.env`` file in the working directory is read first; variables already
    present in the environment take precedence.
    """

    load_dotenv()
    database = os.getenv(
        "EXPENSES_DATABASE", "sqlite:///" + str(Path("instance/expenses.db").resolve())
    )
    if database.startswith("sqlite:///"):
        Path(database[len("sqlite:///"):]).parent.mkdir(parents=True, exist_ok=True)
    return AppConfig(
        database_url=database,
        secret_key=os.getenv("EXPENSES_SECRET_KEY", "development"),
        category_labels=_load_category_labels(os.getenv("EXPENSES_CATEGORY_LABELS")),
        log_level=os.getenv("EXPENSES_LOG_LEVEL", "INFO").upper(),
    )
