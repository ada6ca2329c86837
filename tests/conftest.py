"""Pytest configuration and fixtures for InvoiceDesk tests.

Database-backed tests run against a fresh in-memory SQLite database per
test (aiosqlite driver); the app's get_db dependency is pointed at it.
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AUTH_ENABLED"] = "true"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["AUTH_JWT_AUDIENCE"] = "authenticated"

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from invoicedesk import database
from invoicedesk.config import settings
from invoicedesk.database import Base, create_engine_and_sessionmaker, get_db
from invoicedesk.main import app
from invoicedesk.schemas.common import LineItem
from invoicedesk.schemas.invoice import InvoiceData
from invoicedesk.schemas.quotation import QuotationData


# ── Test Database Setup ──────────────────────────────────────────

@pytest_asyncio.fixture
async def test_engine():
    """Fresh in-memory database with all tables."""
    engine, factory = create_engine_and_sessionmaker(
        "sqlite+aiosqlite://", poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine, factory

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return test_engine[1]


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Session for gateway/service tests; nothing is committed."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def client(test_engine, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client with get_db bound to the test database."""
    engine, factory = test_engine
    monkeypatch.setattr(database, "engine", engine)

    async def override_get_db():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# ── Auth ─────────────────────────────────────────────────────────

def make_token(user_id: str = "user-1", secret: str | None = None, **claims) -> str:
    """Access token shaped like the identity provider's."""
    payload = {
        "sub": user_id,
        "email": "owner@example.com",
        "aud": settings.auth_jwt_audience,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=5),
        **claims,
    }
    return jwt.encode(payload, secret or settings.auth_jwt_secret, algorithm="HS256")


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_token()}"}


# ── Test Data ────────────────────────────────────────────────────

def invoice_data(**overrides) -> InvoiceData:
    fields = {
        "invoice_number": "0001",
        "client_name": "Acme Traders",
        "client_contact": "0300 1234567",
        "client_address": "12 Mall Road, Lahore",
        "items": [
            LineItem(description="Structure fabrication", quantity=2, rate=500),
            LineItem(description="Wiring", quantity=1, rate=250.5),
        ],
        "advance": 300,
        "payment_terms": "50% upfront",
        "terms_and_conditions": "Workmanship warranty six months",
        "bank_account_details": "Bank 0001",
    }
    fields.update(overrides)
    return InvoiceData(**fields)


def quotation_data(**overrides) -> QuotationData:
    fields = {
        "quotation_number": "0012",
        "client_name": "Beta Foods",
        "client_contact": "beta@example.com",
        "client_address": "7 Canal View",
        "items": [LineItem(description="Solar panels install", quantity=2, rate=500)],
        "quotation_terms": "Valid for 30 days",
        "terms_and_conditions": "Taxes excluded",
        "bank_account_details": "Bank 0002",
    }
    fields.update(overrides)
    return QuotationData(**fields)


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Database-backed tests")
    config.addinivalue_line("markers", "api: HTTP API tests")
