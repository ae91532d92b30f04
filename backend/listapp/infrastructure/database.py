"""Database Session Manager - async engine with automatic rollback and health checks.

Invariants:
    - Every session rolls back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to StorageError (core/errors.py)
    - Engine created once per process and disposed once on shutdown
    - Messages raised to callers never include driver text; it goes to the log

Design Decisions:
    - Owned by AppContext and built in the FastAPI lifespan, not a module global
    - expire_on_commit=False: rows stay readable after the write is committed
    - aiosqlite driver: awaitable SQLite IO, requests are not serialized in Python
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import func, select, text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from listapp.core.errors import StorageError, StartupError
from listapp.models.item import Item

logger = logging.getLogger(__name__)


def build_database_url(db_name: str) -> str:
    """Turn DB_NAME into an async SQLAlchemy URL.

    A bare path (or ":memory:") is treated as a SQLite file for aiosqlite;
    anything containing "://" is assumed to be a full URL already.
    """
    if "://" in db_name:
        return db_name
    return f"sqlite+aiosqlite:///{db_name}"


class DatabaseSessionManager:
    """Manages async database sessions with rollback and health checks."""

    def __init__(self, database_url: str):
        self.engine = create_async_engine(
            database_url, pool_pre_ping=True,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise StorageError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise StorageError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise StorageError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise StorageError("Database operation failed", "unknown") from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def verify(self) -> None:
        """Fail startup unless the database opens and the items table is readable."""
        try:
            async with self.session() as db:
                count = await db.scalar(select(func.count()).select_from(Item))
        except StorageError as e:
            raise StartupError(
                "database not reachable or items table missing", "storage",
            ) from e
        logger.info(f"Database ready ({count} items)")

    async def dispose(self) -> None:
        await self.engine.dispose()
