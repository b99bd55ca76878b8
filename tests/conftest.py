from __future__ import annotations

import os
import sys
from collections.abc import AsyncIterator
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from reminder_service.core.config import get_settings  # noqa: E402

TEST_DB_PATH = ROOT / "test.db"
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["API_TOKENS"] = "token-account-1:1,token-account-2:2"
os.environ.pop("STRICT_QUERY_TYPE", None)
get_settings.cache_clear()

ACCOUNT_ONE = {"Authorization": "Bearer token-account-1"}
ACCOUNT_TWO = {"Authorization": "Bearer token-account-2"}


@pytest.fixture()
async def database():
    from reminder_service.main import app

    database = app.state.database
    await database.drop_all()
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture()
async def session(database):
    async with database.session() as session:
        yield session


@pytest.fixture()
async def customers(database):
    from reminder_service.models import Customer

    async with database.session() as session:
        session.add_all(
            [
                Customer(
                    id=5,
                    account_id=1,
                    name="Alice Johnson",
                    company="Acme Corp",
                    email="alice@example.com",
                    phone="+1-555-0101",
                ),
                Customer(id=6, account_id=1, name="Bob Smith", company="Beta LLC"),
                Customer(id=7, account_id=2, name="Carol Other"),
                Customer(id=8, account_id=1, name="Dan Deleted", is_deleted=True),
            ]
        )
        await session.commit()


@pytest.fixture()
async def client(database) -> AsyncIterator[AsyncClient]:
    from reminder_service.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"
