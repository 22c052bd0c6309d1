"""
BizTime Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the test suite.

Fixture Hierarchy:
    ├── mock_db_session: AsyncMock session for service unit tests (no DB)
    ├── fixed_today:     Deterministic "today" for add_date / paid_date
    ├── seeded_db:       Fresh SQLite schema (foreign keys on) + the standard companies/invoices
    └── test_client:     HTTPX AsyncClient talking to the real app over ASGI

Seed data loaded before every route test:
    companies: apple "Apple" (Maker of OSX.), ibm "IBM" (Big blue.)
    invoices:  1 apple 100.00 unpaid     added 2018-01-01
               2 apple 200.00 paid       added 2018-02-01, paid 2018-02-02
               3 ibm   300.00 unpaid     added 2018-03-01
"""

import os
import tempfile
from datetime import date
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

# Settings are read at import time; point them at a throwaway SQLite file
# before anything from biztime is imported
_TEST_DB_DIR = tempfile.mkdtemp(prefix="biztime_test_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR}/biztime.db"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402

from biztime import database  # noqa: E402
from biztime.database import Base  # noqa: E402
from biztime.models import Company, Invoice  # noqa: E402
from biztime.services.invoice_service import invoice_service  # noqa: E402

FIXED_TODAY = date(2024, 1, 1)


# SQLite ignores REFERENCES ... ON DELETE CASCADE unless enabled per connection
@event.listens_for(database.engine.sync_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def fixed_today():
    return FIXED_TODAY


@pytest.fixture
def mock_db_session():
    """
    A MagicMock standing in for AsyncSession.

    Usage:
        mock_db_session.execute.return_value.mappings.return_value \
            .one_or_none.return_value = {"paid": False, "paid_date": None}
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.get = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def sample_invoice_row():
    """Invoice 2 of the seed data as a RETURNING row mapping."""
    return {
        "id": 2,
        "comp_code": "apple",
        "amt": Decimal("200.00"),
        "paid": True,
        "add_date": date(2018, 2, 1),
        "paid_date": date(2018, 2, 2),
    }


@pytest_asyncio.fixture
async def seeded_db(monkeypatch):
    """
    Recreate the schema and load the seed data.

    Also pins the app's invoice clock to FIXED_TODAY and disposes the
    engine afterwards so no pooled connection outlives the test's loop.
    """
    monkeypatch.setattr(invoice_service, "_clock", lambda: FIXED_TODAY)

    async with database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with database.async_session_factory() as session:
        session.add_all([
            Company(code="apple", name="Apple", description="Maker of OSX."),
            Company(code="ibm", name="IBM", description="Big blue."),
        ])
        await session.flush()
        session.add_all([
            Invoice(comp_code="apple", amt=Decimal("100.00"), paid=False,
                    add_date=date(2018, 1, 1), paid_date=None),
            Invoice(comp_code="apple", amt=Decimal("200.00"), paid=True,
                    add_date=date(2018, 2, 1), paid_date=date(2018, 2, 2)),
            Invoice(comp_code="ibm", amt=Decimal("300.00"), paid=False,
                    add_date=date(2018, 3, 1), paid_date=None),
        ])
        await session.commit()

    yield

    await database.engine.dispose()


@pytest_asyncio.fixture
async def test_client(seeded_db):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/companies")
    """
    from biztime.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
