"""Root conftest - shared settings and database fixtures.

Invariants:
    - Every test gets a fresh file-backed SQLite database under tmp_path
    - The items table is created from Base.metadata (no migrations in this project)
    - Settings never read a stray .env file during tests
"""

import os

import pytest

from listapp.config import Settings
from listapp.db.base import Base
from listapp.infrastructure.database import DatabaseSessionManager, build_database_url
import listapp.models  # noqa: F401

os.environ.setdefault("PORT", ":8080")
os.environ.setdefault("DB_NAME", "listapp-test.db")


@pytest.fixture
def settings(tmp_path):
    static_dir = tmp_path / "static"
    static_dir.mkdir()
    (static_dir / "style.css").write_text("body { margin: 0; }\n")
    return Settings(
        port=":8080",
        db_name=str(tmp_path / "items.db"),
        static_dir=static_dir,
        log_format="text",
        _env_file=None,
    )


@pytest.fixture
async def db_manager(settings):
    manager = DatabaseSessionManager(build_database_url(settings.db_name))
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest.fixture
async def test_db(db_manager):
    async with db_manager.session() as session:
        yield session
