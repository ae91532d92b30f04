"""Item Repository - the only code that issues SQL against the items table.

Invariants:
    - Every statement is built with SQLAlchemy Core: user text is always a bound parameter
    - Each write is exactly one statement followed by a commit
    - list_items() orders by id ascending; an empty table yields []
    - delete/edit of an absent id is a no-op (rowcount 0), never an error
    - Every call is bounded by timeout_seconds; overrun raises StorageTimeoutError

Design Decisions:
    - Repository wraps a request-scoped AsyncSession; it never opens its own
    - Driver errors are left to DatabaseSessionManager.session() for mapping
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from listapp.core.errors import StorageTimeoutError
from listapp.models.item import Item
from listapp.schemas.item import ItemView

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ItemRepository:
    """Async CRUD over the items table."""

    def __init__(self, db: AsyncSession, timeout_seconds: float | None = None):
        self._db = db
        self._timeout = timeout_seconds

    async def list_items(self) -> list[ItemView]:
        """Return every stored item, ordered by id."""
        return await self._bounded("list", self._list())

    async def add_item(self, entry: str) -> int:
        """Insert one item and return the id storage assigned to it."""
        return await self._bounded("insert", self._add(entry))

    async def delete_item(self, item_id: int) -> int:
        """Delete by id. Returns the number of rows removed (0 or 1)."""
        return await self._bounded("delete", self._write(
            delete(Item).where(Item.id == item_id),
        ))

    async def edit_item(self, item_id: int, new_entry: str) -> int:
        """Overwrite entry for id. Returns the number of rows changed (0 or 1)."""
        return await self._bounded("update", self._write(
            update(Item).where(Item.id == item_id).values(entry=new_entry),
        ))

    async def _list(self) -> list[ItemView]:
        result = await self._db.execute(
            select(Item).order_by(Item.id.asc())
            .execution_options(populate_existing=True),
        )
        return [ItemView.model_validate(item) for item in result.scalars().all()]

    async def _add(self, entry: str) -> int:
        result = await self._db.execute(
            insert(Item).values(entry=entry).returning(Item.id),
        )
        item_id = result.scalar_one()
        await self._db.commit()
        return item_id

    async def _write(self, statement) -> int:
        result = await self._db.execute(statement)
        await self._db.commit()
        return result.rowcount

    async def _bounded(self, operation: str, coro: Awaitable[T]) -> T:
        if self._timeout is None:
            return await coro
        try:
            return await asyncio.wait_for(coro, self._timeout)
        except asyncio.TimeoutError as e:
            logger.warning(
                f"Storage {operation} exceeded {self._timeout}s",
                extra={"error_code": "DATABASE_TIMEOUT"},
            )
            raise StorageTimeoutError(self._timeout, operation) from e
