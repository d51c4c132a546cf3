from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from fleet_registry.config import Settings
from fleet_registry.database import Database
from fleet_registry.dependencies import get_today
from fleet_registry.main import create_app

TODAY = date(2026, 10, 19)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest_asyncio.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_tables()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def db_session(database):
    async with database.session() as session:
        yield session


@pytest_asyncio.fixture
async def client(database):
    # ASGITransport does not run the lifespan, so the database is attached by hand
    app = create_app(Settings(database_url="sqlite+aiosqlite:///:memory:", seed_on_startup=False))
    app.state.db = database
    app.dependency_overrides[get_today] = lambda: TODAY

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
