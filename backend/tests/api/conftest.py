"""API test fixtures - FastAPI app with a ready AppContext + async HTTP client.

Invariants:
    - The app's context points at the per-test SQLite file from db_manager
    - The lifespan is not run here; lifespan behavior has its own tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from listapp.api.context import AppContext
from listapp.infrastructure.renderer import Renderer
from listapp.main import create_app


@pytest.fixture
async def app(settings, db_manager):
    application = create_app(settings)
    application.state.context = AppContext(
        settings=settings, db=db_manager, renderer=Renderer.from_directory(),
    )
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
