"""Test fixtures for the travel expenses app."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
import sys

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
REPO_ROOT = Path(__file__).resolve().parents[3]
for path in (PROJECT_ROOT, REPO_ROOT):
    if str(path) not in sys.path:
        sys.path.append(str(path))

from travel_expenses_web import AppConfig, create_app  # noqa: E402

from helpers import make_record  # noqa: E402


@pytest.fixture()
def app(tmp_path: Path):
    """Return a Flask app bound to a throwaway SQLite database."""

    config = AppConfig(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        secret_key="testing",
    )
    application = create_app(config)
    application.config.update(TESTING=True)
    yield application


@pytest.fixture()
def client(app):
    """Return a Flask test client."""

    return app.test_client()


@pytest.fixture()
def sample_records():
    """The three-record scenario used across the analytics tests."""

    return [
        make_record("350", datetime(2024, 1, 15), "hotel", "Zhang", "Tech", 1),
        make_record("1200", datetime(2024, 1, 20), "flight", "Li", "Sales", 2),
        make_record("450", datetime(2024, 2, 5), "train", "Wang", "Sales", 3),
    ]
