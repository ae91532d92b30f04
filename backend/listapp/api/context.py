"""Application Context - the storage handle and template set shared by all requests.

Invariants:
    - Exactly one AppContext per running app, created in the lifespan
    - Handlers receive it through Depends(get_context), never a module global
    - create() either returns a fully verified context or raises StartupError
      with nothing left open
"""

import logging
from dataclasses import dataclass

from fastapi import Request

from listapp.config import Settings
from listapp.infrastructure.database import DatabaseSessionManager, build_database_url
from listapp.infrastructure.renderer import Renderer

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    db: DatabaseSessionManager
    renderer: Renderer

    @classmethod
    async def create(cls, settings: Settings) -> "AppContext":
        renderer = Renderer.from_directory(settings.templates_dir)
        db = DatabaseSessionManager(build_database_url(settings.db_name))
        try:
            await db.verify()
        except BaseException:
            await db.dispose()
            raise
        return cls(settings=settings, db=db, renderer=renderer)

    async def close(self) -> None:
        await self.db.dispose()
        logger.info("Database connections released")


def get_context(request: Request) -> AppContext:
    """FastAPI dependency for the application context."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("Application context not initialized")
    return context
