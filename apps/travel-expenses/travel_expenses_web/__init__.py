"""Travel expenses Flask application factory."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from flask import Flask, current_app, g, jsonify
from flask.logging import default_handler
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from .config import AppConfig, load_config
from .database import create_db_engine, init_schema
from .repositories import ExpensesRepository
from .services import DEFAULT_EXPENSE_TYPES

ANALYTICS_LOGGER = "packages.expense_analytics"


def create_app(config: AppConfig | None = None) -> Flask:
    """Build and configure the travel expenses Flask application.

    Args:
        config: Optional :class:`AppConfig` override. When ``None`` the helper
            loads configuration via :func:`load_config`, which honours the
            ``EXPENSES_*`` environment variables.

    Returns:
        Flask: Initialised application. The SQLAlchemy engine is stored on
        ``app.config['DB_ENGINE']`` and the category label table on
        ``app.config['CATEGORY_LABELS']``.
    """

    app = Flask(__name__, instance_relative_config=True)
    app_config = config or load_config()
    Path(app.instance_path).mkdir(parents=True, exist_ok=True)
    level = getattr(logging, app_config.log_level, logging.INFO)
    app.logger.setLevel(level)
    # Module loggers under travel_expenses_web inherit from app.logger.
    analytics_logger = logging.getLogger(ANALYTICS_LOGGER)
    analytics_logger.setLevel(level)
    if default_handler not in analytics_logger.handlers:
        analytics_logger.addHandler(default_handler)
    app.config.update(
        SECRET_KEY=app_config.secret_key,
        CATEGORY_LABELS=dict(app_config.category_labels),
    )
    engine = create_db_engine(app_config.database_url)
    init_schema(engine)
    app.config["DB_ENGINE"] = engine

    from .blueprints.analytics import analytics_bp
    from .blueprints.expenses import expenses_bp

    app.register_blueprint(expenses_bp)
    app.register_blueprint(analytics_bp)

    @app.get("/health")
    def health() -> Any:
        return jsonify({"status": "ok"})

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException) -> Any:
        return jsonify({"error": exc.description}), exc.code

    @app.errorhandler(SQLAlchemyError)
    def handle_database_error(exc: SQLAlchemyError) -> Any:
        current_app.logger.exception("Database error: %s", exc)
        return jsonify({"error": "Database operation failed"}), 500

    @app.teardown_appcontext
    def teardown(_: Any) -> None:
        g.pop("expenses_repo", None)

    @app.cli.command("init-db")
    def init_db_command() -> None:
        """Create tables and seed the default expense types."""

        init_schema(engine)
        added = ExpensesRepository(engine).seed_expense_types(
            {item.code: item.description for item in DEFAULT_EXPENSE_TYPES}
        )
        import click

        click.echo(f"Database initialized ({added} expense types added).")

    return app


def get_repository() -> ExpensesRepository:
    """Return a repository cached on :mod:`flask.g` for the active request."""

    if not hasattr(g, "expenses_repo"):
        engine = current_app.config["DB_ENGINE"]
        g.expenses_repo = ExpensesRepository(engine)
    return g.expenses_repo


__all__ = ["create_app", "AppConfig", "get_repository"]
