"""HTTP routes for managing expense records."""

from __future__ import annotations

from typing import Any, Mapping

from flask import Blueprint, Response, abort, current_app, jsonify, request
from sqlalchemy.exc import NoResultFound

from .. import get_repository
from ..forms import parse_expense_payload
from ..services import (
    DEFAULT_EXPENSE_TYPES,
    describe_expense_type,
    search_records,
    serialize_record,
)

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api")

MAX_PAGE_SIZE = 100


def _payload() -> Mapping[str, Any]:
    """Return the submitted fields from a JSON body or form data."""

    body = request.get_json(silent=True)
    if isinstance(body, dict):
        return body
    return request.form


def _positive_int(name: str, default: int) -> int:
    value = request.args.get(name, type=int)
    if value is None or value < 1:
        return default
    return value


@expenses_bp.get("/expenses")
def list_expenses() -> Response:
    """Return one page of expenses, newest first."""

    page = _positive_int("page", 1)
    limit = min(_positive_int("limit", 10), MAX_PAGE_SIZE)
    repo = get_repository()
    items = repo.list_expenses(page=page, limit=limit)
    return jsonify(
        {
            "items": [serialize_record(item) for item in items],
            "page": page,
            "limit": limit,
            "total": repo.count_expenses(),
        }
    )


@expenses_bp.post("/expenses")
def create_expense() -> Any:
    """Create an expense from a JSON or form submission."""

    form_data, errors = parse_expense_payload(_payload())
    if errors or form_data is None:
        return jsonify({"errors": errors}), 400
    saved = get_repository().create_expense(
        form_data, type_description=describe_expense_type(form_data.expense_type)
    )
    current_app.logger.info(
        "Created expense %s for %s", saved.id, saved.submitter_name
    )
    return jsonify(serialize_record(saved)), 201


@expenses_bp.get("/expenses/search")
def search_expenses() -> Response:
    """Search every expense by free text and optional category."""

    records = get_repository().load_records()
    matches = search_records(
        records,
        term=request.args.get("q", ""),
        category=request.args.get("category", "all"),
    )
    return jsonify({"items": [serialize_record(item) for item in matches]})


@expenses_bp.get("/expenses/<int:expense_id>")
def get_expense(expense_id: int) -> Response:
    try:
        record = get_repository().get_expense(expense_id)
    except NoResultFound:
        abort(404, description="Expense not found")
    return jsonify(serialize_record(record))


@expenses_bp.put("/expenses/<int:expense_id>")
def update_expense(expense_id: int) -> Any:
    """Replace the fields of an existing expense."""

    form_data, errors = parse_expense_payload(_payload())
    if errors or form_data is None:
        return jsonify({"errors": errors}), 400
    try:
        saved = get_repository().update_expense(
            expense_id,
            form_data,
            type_description=describe_expense_type(form_data.expense_type),
        )
    except NoResultFound:
        abort(404, description="Expense not found")
    return jsonify(serialize_record(saved))


@expenses_bp.delete("/expenses/<int:expense_id>")
def delete_expense(expense_id: int) -> Response:
    try:
        get_repository().delete_expense(expense_id)
    except NoResultFound:
        abort(404, description="Expense not found")
    current_app.logger.info("Deleted expense %s", expense_id)
    return jsonify({"message": "Expense deleted"})


@expenses_bp.post("/init")
def init_expense_types() -> Response:
    """Seed the default expense types; safe to call repeatedly."""

    added = get_repository().seed_expense_types(
        {item.code: item.description for item in DEFAULT_EXPENSE_TYPES}
    )
    return jsonify(
        {
            "message": "Expense types initialized",
            "expense_types": len(DEFAULT_EXPENSE_TYPES),
            "added": added,
        }
    )
