"""Database engine, session factory, and declarative base.

All document tables share one DeclarativeBase. Request handlers receive a
session through get_db(), which wraps the whole request in one transaction:
commit on success, rollback on any exception. Multi-row writes issued by
the gateways (parent row, then item rows) therefore land together or not
at all.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from invoicedesk.config import settings


def create_engine_and_sessionmaker(
    url: str | None = None,
    **engine_kwargs,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Build an engine and a matching session factory.

    Pool sizing only applies to server databases; SQLite URLs (used by the
    test suite) get the driver defaults.
    """
    url = url or settings.database_url
    if not url.startswith("sqlite"):
        engine_kwargs.setdefault("pool_size", settings.db_pool_size)
        engine_kwargs.setdefault("max_overflow", settings.db_max_overflow)
    engine = create_async_engine(url, echo=False, **engine_kwargs)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return engine, factory


engine, async_session = create_engine_and_sessionmaker()


# ── Base class ──────────────────────────────────────────────

class Base(DeclarativeBase):
    """Declarative base for invoices, quotations and company info."""
    pass


# ── Session dependency ──────────────────────────────────────

async def get_db() -> AsyncIterator[AsyncSession]:
    """Yield a session whose transaction spans the whole request."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


@asynccontextmanager
async def unit_of_work(
    factory: async_sessionmaker[AsyncSession] | None = None,
) -> AsyncIterator[AsyncSession]:
    """Same commit/rollback contract as get_db() for scripts and tests."""
    factory = factory or async_session
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
