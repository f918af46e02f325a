"""Database initialization and dependency injection."""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import AsyncGenerator, AsyncIterator

import fastapi
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import DatabaseManager
from components.ledger.store import LedgerStore, SqlLedgerStore


@lru_cache()
def get_db_manager() -> DatabaseManager:
    """Single DatabaseManager per process, created on first use."""
    return DatabaseManager()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    async with get_db_manager().get_db() as session:
        yield session


async def get_store(db: AsyncSession = Depends(get_db)) -> LedgerStore:
    """FastAPI dependency for the ledger store of the current request."""
    return SqlLedgerStore(db)


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI) -> AsyncIterator[None]:
    """Create tables on startup and release the pool on shutdown."""
    manager = get_db_manager()
    await manager.create_tables()
    yield
    await manager.dispose()
