"""Database access layer for the travel expenses web app."""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Mapping, Optional

from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import NoResultFound
from sqlalchemy.orm import Session

from .database import expense_types, expenses, session_scope, users
from .forms import ExpenseFormData
from .shared_models import ExpenseRecord

logger = logging.getLogger(__name__)


def _record_query():
    """Select expenses joined with their submitter and type."""

    return select(
        expenses.c.id,
        expenses.c.amount_cents,
        expenses.c.date,
        expenses.c.description,
        expenses.c.location,
        users.c.name.label("submitter_name"),
        users.c.email.label("submitter_email"),
        users.c.department.label("submitter_department"),
        expense_types.c.name.label("category"),
    ).select_from(
        expenses.join(users, expenses.c.user_id == users.c.id).join(
            expense_types, expenses.c.expense_type_id == expense_types.c.id
        )
    )


class ExpensesRepository:
    """Provides CRUD operations and bulk reads for expense records."""

    def __init__(self, engine: Engine):
        self._engine = engine

    def seed_expense_types(self, descriptions: Mapping[str, str]) -> int:
        """Insert any missing expense types and return how many were added."""

        added = 0
        with session_scope(self._engine) as session:
            existing = set(session.execute(select(expense_types.c.name)).scalars())
            for name, description in descriptions.items():
                if name in existing:
                    continue
                session.execute(
                    insert(expense_types).values(name=name, description=description)
                )
                added += 1
        if added:
            logger.info("Seeded %d expense types", added)
        return added

    def create_expense(
        self, data: ExpenseFormData, type_description: Optional[str] = None
    ) -> ExpenseRecord:
        """Persist a new expense, creating its submitter and type on first use."""

        with session_scope(self._engine) as session:
            values = self._expense_values(session, data, type_description)
            result = session.execute(
                insert(expenses).values(**values).returning(expenses.c.id)
            )
            expense_id = result.scalar_one()
        return self.get_expense(expense_id)

    def update_expense(
        self,
        expense_id: int,
        data: ExpenseFormData,
        type_description: Optional[str] = None,
    ) -> ExpenseRecord:
        """Replace every editable field of an existing expense."""

        with session_scope(self._engine) as session:
            values = self._expense_values(session, data, type_description)
            result = session.execute(
                update(expenses).where(expenses.c.id == expense_id).values(**values)
            )
            if result.rowcount == 0:
                raise NoResultFound(f"Expense {expense_id} not found")
        return self.get_expense(expense_id)

    def get_expense(self, expense_id: int) -> ExpenseRecord:
        """Fetch a single expense with its submitter and type."""

        with session_scope(self._engine) as session:
            row = session.execute(
                _record_query().where(expenses.c.id == expense_id)
            ).one_or_none()
        if row is None:
            raise NoResultFound(f"Expense {expense_id} not found")
        return self._row_to_record(row)

    def delete_expense(self, expense_id: int) -> None:
        """Remove an expense."""

        with session_scope(self._engine) as session:
            result = session.execute(delete(expenses).where(expenses.c.id == expense_id))
            if result.rowcount == 0:
                raise NoResultFound(f"Expense {expense_id} not found")

    def list_expenses(self, page: int = 1, limit: int = 10) -> List[ExpenseRecord]:
        """Return one page of expenses, newest first."""

        offset = (max(page, 1) - 1) * limit
        with session_scope(self._engine) as session:
            rows = session.execute(
                _record_query()
                .order_by(expenses.c.date.desc(), expenses.c.id.desc())
                .offset(offset)
                .limit(limit)
            ).all()
        return [self._row_to_record(row) for row in rows]

    def count_expenses(self) -> int:
        with session_scope(self._engine) as session:
            return session.execute(select(func.count()).select_from(expenses)).scalar_one()

    def load_records(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[ExpenseRecord]:
        """Return denormalised snapshots, optionally limited to ``[start, end]``.

        Records come back ordered by date and then ID so aggregations over the
        same data always visit records in the same order.
        """

        query = _record_query()
        if start is not None:
            query = query.where(expenses.c.date >= start)
        if end is not None:
            query = query.where(expenses.c.date <= end)
        with session_scope(self._engine) as session:
            rows = session.execute(
                query.order_by(expenses.c.date, expenses.c.id)
            ).all()
        return [self._row_to_record(row) for row in rows]

    def _expense_values(
        self,
        session: Session,
        data: ExpenseFormData,
        type_description: Optional[str],
    ) -> dict:
        user_id = self._find_or_create_user(session, data)
        type_id = self._find_or_create_type(session, data.expense_type, type_description)
        return {
            "user_id": user_id,
            "expense_type_id": type_id,
            "amount_cents": int((data.amount * 100).to_integral_value(ROUND_HALF_UP)),
            "date": data.date,
            "description": data.description,
            "location": data.location,
        }

    @staticmethod
    def _find_or_create_user(session: Session, data: ExpenseFormData) -> int:
        """Match a submitter by email or name, inserting one when neither exists."""

        conditions = [users.c.name == data.user_name]
        if data.user_email:
            conditions.append(users.c.email == data.user_email)
        user_id = session.execute(
            select(users.c.id).where(or_(*conditions)).order_by(users.c.id).limit(1)
        ).scalar_one_or_none()
        if user_id is not None:
            return user_id
        result = session.execute(
            insert(users)
            .values(
                name=data.user_name,
                email=data.user_email,
                department=data.user_department,
            )
            .returning(users.c.id)
        )
        logger.debug("Created submitter %s", data.user_name)
        return result.scalar_one()

    @staticmethod
    def _find_or_create_type(
        session: Session, name: str, description: Optional[str]
    ) -> int:
        type_id = session.execute(
            select(expense_types.c.id).where(expense_types.c.name == name)
        ).scalar_one_or_none()
        if type_id is not None:
            return type_id
        result = session.execute(
            insert(expense_types)
            .values(name=name, description=description)
            .returning(expense_types.c.id)
        )
        return result.scalar_one()

    @staticmethod
    def _row_to_record(row) -> ExpenseRecord:
        """Convert a SQLAlchemy row to an :class:`ExpenseRecord`."""

        values = row._mapping
        return ExpenseRecord(
            id=values["id"],
            amount=Decimal(values["amount_cents"]) / Decimal(100),
            date=values["date"],
            category=values["category"],
            submitter_name=values["submitter_name"],
            submitter_department=values["submitter_department"],
            submitter_email=values["submitter_email"],
            description=values["description"],
            location=values["location"],
        )
