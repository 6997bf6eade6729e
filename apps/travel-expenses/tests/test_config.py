"""Tests for environment-driven configuration."""

from __future__ import annotations

import logging

from travel_expenses_web import AppConfig, create_app
from travel_expenses_web.config import DEFAULT_CATEGORY_LABELS, load_config


def test_load_config_reads_environment(monkeypatch, tmp_path):
    db_path = tmp_path / "nested" / "expenses.db"
    monkeypatch.setenv("EXPENSES_DATABASE", f"sqlite:///{db_path}")
    monkeypatch.setenv("EXPENSES_SECRET_KEY", "s3cret")
    monkeypatch.setenv("EXPENSES_CATEGORY_LABELS", '{"hotel": "Lodging", "taxi": "Taxi"}')
    monkeypatch.setenv("EXPENSES_LOG_LEVEL", "debug")

    config = load_config()

    assert config.database_url == f"sqlite:///{db_path}"
    assert db_path.parent.is_dir()
    assert config.secret_key == "s3cret"
    assert config.category_labels == {"hotel": "Lodging", "taxi": "Taxi"}
    assert config.log_level == "DEBUG"


def test_invalid_category_labels_fall_back(monkeypatch, tmp_path, caplog):
    """Malformed label JSON logs a warning and keeps the defaults."""

    monkeypatch.setenv("EXPENSES_DATABASE", f"sqlite:///{tmp_path / 'x.db'}")
    monkeypatch.setenv("EXPENSES_CATEGORY_LABELS", "{not json")
    with caplog.at_level(logging.WARNING):
        config = load_config()
    assert config.category_labels == DEFAULT_CATEGORY_LABELS
    assert "EXPENSES_CATEGORY_LABELS" in caplog.text


def test_injected_labels_reach_analytics(monkeypatch, tmp_path):
    monkeypatch.setenv("EXPENSES_DATABASE", f"sqlite:///{tmp_path / 'labels.db'}")
    monkeypatch.setenv("EXPENSES_CATEGORY_LABELS", '{"hotel": "Lodging"}')
    client = create_app().test_client()
    client.post(
        "/api/expenses",
        json={
            "user_name": "Sam",
            "expense_type": "hotel",
            "amount": "120",
            "date": "2024-02-01",
        },
    )
    payload = client.get("/api/analytics/category?as_of=2024-02-20").get_json()
    assert payload["buckets"][0]["label"] == "Lodging"


def test_log_level_reaches_analytics_logger(tmp_path, caplog):
    """The configured level applies to the shared analytics package too."""

    config = AppConfig(
        database_url=f"sqlite:///{tmp_path / 'levels.db'}",
        secret_key="testing",
        log_level="DEBUG",
    )
    app = create_app(config)
    analytics_logger = logging.getLogger("packages.expense_analytics")
    assert analytics_logger.getEffectiveLevel() == logging.DEBUG
    assert logging.getLogger("travel_expenses_web.repositories").getEffectiveLevel() == logging.DEBUG

    client = app.test_client()
    caplog.clear()
    client.get("/api/analytics?as_of=2024-02-20")
    assert any(
        record.name == "packages.expense_analytics.summary" and record.levelno == logging.INFO
        for record in caplog.records
    )
