"""Shared pytest fixtures for store, service and API tests.

The database is a SQLite file per test (``aiosqlite`` driver) and the object
sink is an in-memory recorder, so no external services are required.
"""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shortlinks.config import Settings
from shortlinks.database import Database
from shortlinks.dependencies import AppResources
from shortlinks.main import app
from shortlinks.store import LinkStore


class RecordingSink:
    """Object sink that keeps uploads in memory."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str]] = {}

    async def put_object(self, key: str, body: bytes, content_type: str) -> str:
        self.objects[key] = (body, content_type)
        return f"https://files.example.com/{key}"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        APP_ENV="test",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'links.db'}",
        PUBLIC_BASE_URL="https://sho.rt",
        ALIAS_PREFIX="brev.ly/",
        EXPORT_PUBLIC_URL="https://files.example.com",
    )


@pytest_asyncio.fixture(scope="function")
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    db = Database.from_settings(settings)
    await db.create_all()
    yield db
    await db.drop_all()
    await db.dispose()


@pytest.fixture
def store(database: Database) -> LinkStore:
    return LinkStore(database)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def resources(settings: Settings, database: Database, sink: RecordingSink) -> AppResources:
    return AppResources(settings, database, sink)


@pytest_asyncio.fixture(scope="function")
async def client(resources: AppResources) -> AsyncGenerator[AsyncClient, None]:
    app.state.resources = resources
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.state.resources = None
