"""
Ledger store: the persistence boundary of the reconciliation engine.

Repositories receive a `LedgerStore` instead of a database session so the
financial logic can run against SQL in production and against an in-memory
fake in tests. Records cross this boundary as plain dicts.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import case, func, inspect as sa_inspect, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import LedgerError, NotFoundError, StoreError, ValidationError
from components.core.log import get_logger
from components.item.models import Item
from components.payment.models import Installment, Payment
from components.project.models import Project
from components.quote.models import Quote

logger = get_logger(__name__)

Record = Dict[str, Any]


class _NotNull:
    def __repr__(self) -> str:
        return "NOT_NULL"


# Filter value meaning "column IS NOT NULL"
NOT_NULL = _NotNull()

CHOOSE_QUOTE = "choose_quote"


class LedgerStore(ABC):
    """Abstract interface of the relational store holding the ledger."""

    @abstractmethod
    async def insert(self, table: str, records: Sequence[Record]) -> List[Record]:
        """
        Insert all records in one round trip.

        Either every record is stored or none is. Returns the stored rows
        with their generated ids.
        """

    @abstractmethod
    async def query(
        self,
        table: str,
        filters: Optional[Record] = None,
        order_by: Optional[Sequence[str]] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Tuple[List[Record], int]:
        """
        Load rows matching all filters.

        A list/tuple filter value means IN, `NOT_NULL` means IS NOT NULL,
        anything else is equality. `order_by` names prefixed with "-" sort
        descending. The count is taken before offset/limit.
        """

    @abstractmethod
    async def update(self, table: str, record_id: int, patch: Record) -> Record:
        """Patch one row by id and return it. Raises NotFoundError."""

    @abstractmethod
    async def atomic_select(self, procedure: str, args: Record) -> None:
        """Run a named store-side atomic operation."""


class SqlLedgerStore(LedgerStore):
    """LedgerStore over a SQLAlchemy async session."""

    TABLES = {
        "projects": Project,
        "payments": Payment,
        "installments": Installment,
        "items": Item,
        "quotes": Quote,
    }

    def __init__(self, session: AsyncSession):
        """Initialize store with database session."""
        self.session = session
        self._procedures = {
            CHOOSE_QUOTE: self._choose_quote,
        }

    def _model(self, table: str):
        try:
            return self.TABLES[table]
        except KeyError:
            raise StoreError(f"Unknown table: {table}") from None

    @staticmethod
    def _column(model, name: str):
        if name not in model.__table__.columns:
            raise StoreError(f"Unknown column: {model.__tablename__}.{name}")
        return getattr(model, name)

    @staticmethod
    def _to_record(row) -> Record:
        return {attr.key: getattr(row, attr.key) for attr in sa_inspect(row).mapper.column_attrs}

    @asynccontextmanager
    async def _transaction(self, operation: str):
        """Commit on success, roll back and surface StoreError on failure."""
        try:
            yield
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.error("ledger_store_failed", operation=operation, error=str(exc))
            raise StoreError(f"{operation} failed: {exc}") from exc
        except LedgerError:
            await self.session.rollback()
            raise

    async def insert(self, table: str, records: Sequence[Record]) -> List[Record]:
        model = self._model(table)
        if not records:
            return []
        try:
            rows = [model(**record) for record in records]
        except TypeError as exc:
            raise StoreError(f"Invalid record for {table}: {exc}") from exc
        async with self._transaction(f"insert into {table}"):
            self.session.add_all(rows)
            await self.session.flush()
        return [self._to_record(row) for row in rows]

    async def query(
        self,
        table: str,
        filters: Optional[Record] = None,
        order_by: Optional[Sequence[str]] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Tuple[List[Record], int]:
        model = self._model(table)
        stmt = select(model)
        for column, value in (filters or {}).items():
            attr = self._column(model, column)
            if value is NOT_NULL:
                stmt = stmt.where(attr.is_not(None))
            elif isinstance(value, (list, tuple, set)):
                stmt = stmt.where(attr.in_(list(value)))
            else:
                stmt = stmt.where(attr == value)

        count_stmt = select(func.count()).select_from(stmt.subquery())

        for key in order_by or ():
            attr = self._column(model, key.lstrip("-"))
            stmt = stmt.order_by(attr.desc() if key.startswith("-") else attr.asc())
        if offset is not None:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        # Rows already in the identity map may be stale after bulk updates
        stmt = stmt.execution_options(populate_existing=True)

        try:
            total = await self.session.scalar(count_stmt)
            result = await self.session.execute(stmt)
            rows = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.error("ledger_store_failed", operation=f"query {table}", error=str(exc))
            raise StoreError(f"query {table} failed: {exc}") from exc
        return [self._to_record(row) for row in rows], total or 0

    async def update(self, table: str, record_id: int, patch: Record) -> Record:
        model = self._model(table)
        async with self._transaction(f"update {table}"):
            row = await self.session.get(model, record_id, populate_existing=True)
            if row is None:
                raise NotFoundError(table, record_id)
            for key, value in patch.items():
                self._column(model, key)
                setattr(row, key, value)
            await self.session.flush()
        return self._to_record(row)

    async def atomic_select(self, procedure: str, args: Record) -> None:
        handler = self._procedures.get(procedure)
        if handler is None:
            raise StoreError(f"Atomic operation {procedure!r} is not available")
        async with self._transaction(procedure):
            await handler(**args)

    async def _choose_quote(self, quote_id: int, project_id: int) -> None:
        """
        Make `quote_id` the only chosen quote of `project_id`.

        Runs inside one transaction: the project's quote rows are locked,
        then a single conditional UPDATE flips every flag at once.
        """
        result = await self.session.execute(
            select(Quote.id).where(Quote.project_id == project_id).with_for_update()
        )
        quote_ids = set(result.scalars().all())
        if quote_id not in quote_ids:
            raise ValidationError(f"Quote {quote_id} does not belong to project {project_id}")

        await self.session.execute(
            update(Quote)
            .where(Quote.project_id == project_id)
            .values(chosen=case((Quote.id == quote_id, True), else_=False))
            .execution_options(synchronize_session="fetch")
        )
