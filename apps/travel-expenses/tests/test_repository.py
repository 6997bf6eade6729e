"""Repository integration tests."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import NoResultFound

from travel_expenses_web.database import expense_types, users
from travel_expenses_web.forms import ExpenseFormData
from travel_expenses_web.repositories import ExpensesRepository


def _form(**overrides) -> ExpenseFormData:
    values = dict(
        user_name="Jamie",
        user_email="jamie@example.com",
        user_department="Logistics",
        expense_type="hotel",
        amount=Decimal("350.00"),
        date=datetime(2024, 1, 15),
        description="Beijing hotel",
        location="Beijing",
    )
    values.update(overrides)
    return ExpenseFormData(**values)


def _count(engine, table) -> int:
    with engine.connect() as connection:
        return connection.execute(select(func.count()).select_from(table)).scalar_one()


def test_repository_crud(app):
    """Exercise create, read, update and delete on the repository."""

    repo = ExpensesRepository(app.config["DB_ENGINE"])
    saved = repo.create_expense(_form(), type_description="Hotel stays")
    assert saved.id is not None
    assert saved.amount == Decimal("350")
    assert saved.category == "hotel"
    assert saved.submitter_department == "Logistics"

    updated = repo.update_expense(
        saved.id, _form(amount=Decimal("85.50"), expense_type="transport")
    )
    assert updated.amount == Decimal("85.5")
    assert updated.category == "transport"
    assert repo.get_expense(saved.id) == updated

    repo.delete_expense(saved.id)
    assert repo.list_expenses() == []
    with pytest.raises(NoResultFound):
        repo.get_expense(saved.id)


def test_missing_expense_raises(app):
    repo = ExpensesRepository(app.config["DB_ENGINE"])
    with pytest.raises(NoResultFound):
        repo.update_expense(999, _form())
    with pytest.raises(NoResultFound):
        repo.delete_expense(999)


def test_submitters_and_types_are_reused(app):
    """A known email or name maps to the existing submitter row."""

    engine = app.config["DB_ENGINE"]
    repo = ExpensesRepository(engine)
    repo.create_expense(_form())
    repo.create_expense(_form(user_name="Jamie R.", expense_type="hotel"))
    repo.create_expense(_form(user_email=None))
    repo.create_expense(_form(user_name="Sam", user_email="sam@example.com"))

    assert _count(engine, users) == 2
    assert _count(engine, expense_types) == 1


def test_list_expenses_paginates_newest_first(app):
    repo = ExpensesRepository(app.config["DB_ENGINE"])
    for day in (3, 1, 2):
        repo.create_expense(_form(date=datetime(2024, 2, day)))

    first_page = repo.list_expenses(page=1, limit=2)
    second_page = repo.list_expenses(page=2, limit=2)
    assert [record.date.day for record in first_page] == [3, 2]
    assert [record.date.day for record in second_page] == [1]
    assert repo.count_expenses() == 3


def test_load_records_respects_date_range(app):
    """The bulk read returns date-ordered snapshots inside inclusive bounds."""

    repo = ExpensesRepository(app.config["DB_ENGINE"])
    for day in (20, 5, 10, 31):
        repo.create_expense(_form(date=datetime(2024, 1, day)))

    everything = repo.load_records()
    assert [record.date.day for record in everything] == [5, 10, 20, 31]

    selected = repo.load_records(start=datetime(2024, 1, 10), end=datetime(2024, 1, 20))
    assert [record.date.day for record in selected] == [10, 20]


def test_seed_expense_types_is_idempotent(app):
    repo = ExpensesRepository(app.config["DB_ENGINE"])
    types = {"hotel": "Hotels", "flight": "Flights"}
    assert repo.seed_expense_types(types) == 2
    assert repo.seed_expense_types(types) == 0


def test_amounts_round_half_up_to_cents(app):
    """Cent conversion rounds half up, matching the analytics averages."""

    repo = ExpensesRepository(app.config["DB_ENGINE"])
    assert repo.create_expense(_form(amount=Decimal("0.005"))).amount == Decimal("0.01")
    assert repo.create_expense(_form(amount=Decimal("10.125"))).amount == Decimal("10.13")
