"""Item Routes - shell page, list fragment and the three mutations.

Invariants:
    - Mutations are POST only; GET routes never write
    - Every mutation is: one committed write, then a fresh read + render
    - If the write fails, no render happens; the error reaches the handler layer
    - Responses are complete HTML strings (never a partially rendered fragment)
    - A non-numeric or out-of-range {item_id} matches no row: nothing is written
      and the current list is returned

Design Decisions:
    - Missing form fields read as "": empty entries are legal items
    - Errors are annotated with route and item_id on the way out for logging
"""

import logging
import re
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse

from listapp.api.context import AppContext, get_context
from listapp.core.errors import ListAppError
from listapp.infrastructure.item_repository import ItemRepository

logger = logging.getLogger(__name__)
router = APIRouter(tags=["items"])

_ID_PATTERN = re.compile(r"-?[0-9]+")
_SQLITE_INT_MAX = 2**63 - 1


def parse_item_id(raw: str) -> int | None:
    """Return raw as an integer id, or None when it can match no row."""
    if not _ID_PATTERN.fullmatch(raw):
        return None
    value = int(raw)
    if not -_SQLITE_INT_MAX - 1 <= value <= _SQLITE_INT_MAX:
        return None
    return value


@asynccontextmanager
async def _request_scope(
    context: AppContext, route: str, item_id: str | None = None,
) -> AsyncGenerator[ItemRepository, None]:
    """Open a request-scoped repository and tag any failure with its origin."""
    try:
        async with context.db.session() as db:
            yield ItemRepository(db, context.settings.query_timeout_seconds)
    except ListAppError as e:
        e.context.route = route
        e.context.item_id = item_id
        raise


async def _render_current(context: AppContext, items: ItemRepository) -> HTMLResponse:
    html = context.renderer.render_list(await items.list_items())
    return HTMLResponse(html)


@router.get("/", response_class=HTMLResponse)
async def index(context: AppContext = Depends(get_context)):
    """Static shell page; the list is fetched from /load."""
    try:
        return HTMLResponse(context.renderer.render_shell())
    except ListAppError as e:
        e.context.route = "index"
        raise


@router.get("/load", response_class=HTMLResponse)
async def load_items(context: AppContext = Depends(get_context)):
    """Current list fragment."""
    async with _request_scope(context, "load") as items:
        return await _render_current(context, items)


@router.post("/add", response_class=HTMLResponse)
async def add_item(
    entry: str = Form(""), context: AppContext = Depends(get_context),
):
    """Insert a new item and return the updated fragment."""
    async with _request_scope(context, "add") as items:
        item_id = await items.add_item(entry)
        logger.info(f"Added item {item_id}", extra={"route": "add", "item_id": str(item_id)})
        return await _render_current(context, items)


@router.post("/delete/{item_id}", response_class=HTMLResponse)
async def delete_item(
    item_id: str, context: AppContext = Depends(get_context),
):
    """Delete an item and return the updated fragment."""
    async with _request_scope(context, "delete", item_id) as items:
        parsed = parse_item_id(item_id)
        if parsed is None:
            logger.debug(f"Ignoring delete for non-numeric id {item_id!r}")
        else:
            removed = await items.delete_item(parsed)
            logger.info(
                f"Deleted {removed} item(s)",
                extra={"route": "delete", "item_id": item_id},
            )
        return await _render_current(context, items)


@router.post("/edit/{item_id}", response_class=HTMLResponse)
async def edit_item(
    item_id: str,
    editing: str = Form(""),
    context: AppContext = Depends(get_context),
):
    """Overwrite an item's entry and return the updated fragment."""
    async with _request_scope(context, "edit", item_id) as items:
        parsed = parse_item_id(item_id)
        if parsed is None:
            logger.debug(f"Ignoring edit for non-numeric id {item_id!r}")
        else:
            changed = await items.edit_item(parsed, editing)
            logger.info(
                f"Edited {changed} item(s)",
                extra={"route": "edit", "item_id": item_id},
            )
        return await _render_current(context, items)
