"""
Shared fixtures.

Unit tests run against `InMemoryLedgerStore`, a dict-backed fake of the
ledger store. SQL tests use an in-memory SQLite database through aiosqlite.
"""

import copy
from datetime import date, datetime, timedelta
from decimal import Decimal
from itertools import count

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine

from components.core.database import DatabaseManager
from components.core.exceptions import NotFoundError, StoreError, ValidationError
from components.ledger.store import CHOOSE_QUOTE, NOT_NULL, LedgerStore, SqlLedgerStore

TABLES = ("projects", "payments", "installments", "items", "quotes")


class InMemoryLedgerStore(LedgerStore):
    """Dict-backed LedgerStore with the same filter/order semantics as SQL."""

    def __init__(self):
        self.tables = {name: {} for name in TABLES}
        self._ids = {name: count(1) for name in TABLES}
        self._clock = datetime(2026, 1, 1)
        self.fail_on = set()
        self.calls = []

    def _check(self, operation: str, table: str) -> None:
        self.calls.append((operation, table))
        if (operation, table) in self.fail_on or operation in self.fail_on:
            raise StoreError(f"{operation} {table} failed")

    async def insert(self, table, records):
        self._check("insert", table)
        stored = []
        for record in records:
            row = copy.deepcopy(dict(record))
            row["id"] = next(self._ids[table])
            self._clock += timedelta(seconds=1)
            row.setdefault("created_at", self._clock)
            stored.append(row)
        for row in stored:
            self.tables[table][row["id"]] = row
        return copy.deepcopy(stored)

    async def query(self, table, filters=None, order_by=None, offset=None, limit=None):
        self._check("query", table)

        def matches(row):
            for column, value in (filters or {}).items():
                if value is NOT_NULL:
                    if row.get(column) is None:
                        return False
                elif isinstance(value, (list, tuple, set)):
                    if row.get(column) not in value:
                        return False
                elif row.get(column) != value:
                    return False
            return True

        rows = [row for row in self.tables[table].values() if matches(row)]
        for key in reversed(order_by or []):
            rows.sort(key=lambda r: r[key.lstrip("-")], reverse=key.startswith("-"))
        total = len(rows)
        start = offset or 0
        end = start + limit if limit is not None else None
        return copy.deepcopy(rows[start:end]), total

    async def update(self, table, record_id, patch):
        self._check("update", table)
        row = self.tables[table].get(record_id)
        if row is None:
            raise NotFoundError(table, record_id)
        row.update(copy.deepcopy(patch))
        return copy.deepcopy(row)

    async def atomic_select(self, procedure, args):
        self._check("atomic_select", procedure)
        if procedure != CHOOSE_QUOTE:
            raise StoreError(f"Atomic operation {procedure!r} is not available")
        quotes = [q for q in self.tables["quotes"].values() if q["project_id"] == args["project_id"]]
        if args["quote_id"] not in {q["id"] for q in quotes}:
            raise ValidationError("quote does not belong to project")
        for quote in quotes:
            quote["chosen"] = quote["id"] == args["quote_id"]

    # Helpers for arranging ledger state directly
    def add(self, table, **values):
        row = dict(values)
        row["id"] = next(self._ids[table])
        self._clock += timedelta(seconds=1)
        row.setdefault("created_at", self._clock)
        self.tables[table][row["id"]] = row
        return row


def payment_row(project_id, total_amount, **overrides):
    row = {
        "project_id": project_id,
        "owner_id": 1,
        "description": "Payment",
        "category": "material",
        "payment_method": "pix",
        "total_amount": Decimal(total_amount),
        "is_installment": False,
        "num_installments": 1,
        "has_interest": False,
        "interest_rate": Decimal("0"),
        "total_with_interest": None,
        "item_id": None,
        "supplier_id": None,
        "quote_id": None,
        "note": None,
    }
    row.update(overrides)
    return row


def installment_row(payment_id, number, amount, due_date, status="pending", **overrides):
    row = {
        "payment_id": payment_id,
        "owner_id": 1,
        "installment_number": number,
        "amount": Decimal(amount),
        "due_date": due_date,
        "paid_date": None,
        "status": status,
        "payment_method_used": None,
        "receipt_url": None,
        "note": None,
    }
    row.update(overrides)
    return row


def item_row(project_id, estimated_total, name="Item"):
    return {
        "project_id": project_id,
        "name": name,
        "description": None,
        "quantity": Decimal("1"),
        "unit": "un",
        "estimated_unit_price": Decimal(estimated_total),
        "estimated_total": Decimal(estimated_total),
        "category": "material",
    }


@pytest.fixture
def store():
    return InMemoryLedgerStore()


@pytest.fixture
def project(store):
    return store.add("projects", name="Bathroom", owner_id=7)


@pytest.fixture
def today():
    return date(2026, 3, 20)


@pytest_asyncio.fixture
async def db_manager():
    engine = create_async_engine("sqlite+aiosqlite://")
    manager = DatabaseManager(engine=engine)
    await manager.create_tables()
    yield manager
    await manager.dispose()


@pytest_asyncio.fixture
async def sql_store(db_manager):
    async with db_manager.get_db() as session:
        yield SqlLedgerStore(session)
