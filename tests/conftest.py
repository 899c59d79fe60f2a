import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from link_sanitizer import database
from link_sanitizer.main import app


@pytest.fixture
def engine(tmp_path):
    # One throwaway SQLite file per test; NullPool keeps connections off the
    # event loop that created them.
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool
    )
    database.set_engine(engine)
    yield engine
    database.set_engine(None)


@pytest.fixture
async def db_session(engine):
    await database.init_db()
    async with database.get_session_factory()() as session:
        yield session


@pytest.fixture
def client(engine):
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
