import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database.engine import (
    create_engine,
    create_session_factory,
    get_db,
    get_session_factory,
    init_db,
)
from app.features.users.dependencies import get_current_user
from app.core import config
from app.main import app


@pytest.fixture(autouse=True)
def appwrite_config(monkeypatch):
    monkeypatch.setattr(config, "APPWRITE_ENDPOINT", "https://appwrite.test/v1")
    monkeypatch.setattr(config, "APPWRITE_PROJECT_ID", "test-project")


@pytest.fixture
async def engine(tmp_path):
    test_engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


class CurrentUser:
    """Holder for the user the API client authenticates as."""

    def __init__(self):
        self.user = None


@pytest.fixture
def current_user():
    return CurrentUser()


@pytest.fixture
async def client(session_factory, current_user):
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_get_current_user():
        return current_user.user

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_current_user] = override_get_current_user
    app.state.limiter.enabled = False

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
