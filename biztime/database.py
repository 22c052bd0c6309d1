"""
BizTime Backend — Database Session Management
===============================================

What:  Async SQLAlchemy engine, session factory, declarative base and the
       FastAPI session dependency.
How:   One engine per process. Each request gets its own AsyncSession which
       commits once when the handler returns and rolls back if it raises,
       so a read-then-write inside one handler shares a single transaction.

Pooling:
    PostgreSQL (asyncpg) uses a sized queue pool with pre-ping and hourly
    recycling. SQLite (aiosqlite, used by the test suite) keeps SQLAlchemy's
    default pool since it does not accept the sizing arguments.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from biztime.config import settings


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not settings.is_sqlite:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return options


engine = create_async_engine(settings.database_url, **_engine_options())

# expire_on_commit=False: response models are built from ORM objects after
# the flush, outside any lazy-load context
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """Base class for all ORM models; its metadata drives Alembic."""
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    Commits after the handler returns, rolls back and re-raises on any
    exception, and always closes the session.

    Example:
        @router.get("/companies")
        async def list_companies(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def dispose_engine() -> None:
    """Close every pooled connection. Called from the app lifespan on shutdown."""
    await engine.dispose()
