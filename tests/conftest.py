"""
Pytest configuration and fixtures for SimVex API tests.
"""

import os

# Settings are read once at import time; pin the test environment first.
os.environ.setdefault("STORAGE_BACKEND", "local")
os.environ.setdefault("CDN_URL", "https://cdn.test")
os.environ.setdefault("DEV_MODE", "true")
os.environ.setdefault("DEV_USER_ID", "test-user-001")

from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from simvex.db.base import Base
from simvex.db.session import get_db
from simvex.dependencies import get_assistant_client, get_node_resolver
from simvex.main import app
from simvex.models import Team, User, UserProfile
from simvex.services.assistant_client import AssistantClient
from simvex.services.node_service import NodeMetadataResolver
from simvex.storage import LocalStorageBackend, NamingPolicy, get_naming_policy, get_storage

CDN_BASE_URL = "https://cdn.test"
ASSISTANT_BASE_URL = "https://assistant.test"

TEST_USER_ID = "test-user-001"
OTHER_USER_ID = "test-user-002"
TEST_TEAM_ID = "team-001"


def cdn_transport(storage_root: Path) -> httpx.MockTransport:
    """Serve CDN URLs straight from a local storage directory."""

    def handler(request: httpx.Request) -> httpx.Response:
        path = storage_root / request.url.path.lstrip("/")
        if not path.is_file():
            return httpx.Response(404)
        return httpx.Response(200, content=path.read_bytes())

    return httpx.MockTransport(handler)


@pytest_asyncio.fixture(scope="function")
async def db_engine(tmp_path):
    """Create a test database engine backed by a per-test SQLite file."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        echo=False,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def seed(db_session: AsyncSession) -> dict[str, str]:
    """Two users with profiles and one team."""
    db_session.add_all([
        User(id=TEST_USER_ID, personal_id="tester", email="tester@simvex.test", password_hash="x"),
        User(id=OTHER_USER_ID, personal_id="other", email="other@simvex.test", password_hash="x"),
        UserProfile(user_id=TEST_USER_ID, nickname="Tester"),
        UserProfile(user_id=OTHER_USER_ID, nickname="Other", bio="Second user"),
        Team(id=TEST_TEAM_ID, name="Test Team"),
    ])
    await db_session.commit()

    return {"user_id": TEST_USER_ID, "other_user_id": OTHER_USER_ID, "team_id": TEST_TEAM_ID}


@pytest.fixture
def storage_root(tmp_path) -> Path:
    return tmp_path / "storage"


@pytest.fixture
def test_storage(storage_root) -> LocalStorageBackend:
    """Create a test storage backend."""
    return LocalStorageBackend(base_path=str(storage_root))


@pytest.fixture
def naming_policy() -> NamingPolicy:
    return NamingPolicy(CDN_BASE_URL)


@pytest.fixture
def node_resolver(storage_root) -> NodeMetadataResolver:
    return NodeMetadataResolver(transport=cdn_transport(storage_root))


@pytest.fixture
def assistant_requests() -> list[httpx.Request]:
    """Requests received by the fake assistant service."""
    return []


@pytest.fixture
def assistant_client(assistant_requests) -> AssistantClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assistant_requests.append(request)
        return httpx.Response(200, json={"answer": "It is a wheel."})

    return AssistantClient(ASSISTANT_BASE_URL, transport=httpx.MockTransport(handler))


@pytest_asyncio.fixture(scope="function")
async def client(
    db_session,
    seed,
    test_storage,
    naming_policy,
    node_resolver,
    assistant_client,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: test_storage
    app.dependency_overrides[get_naming_policy] = lambda: naming_policy
    app.dependency_overrides[get_node_resolver] = lambda: node_resolver
    app.dependency_overrides[get_assistant_client] = lambda: assistant_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def model_files() -> list[tuple[str, tuple[str, bytes, str]]]:
    """Multipart parts for two model files."""
    return [
        ("modelFiles", ("car.glb", b"glTF binary car", "model/gltf-binary")),
        ("modelFiles", ("Wheel.GLB", b"glTF binary wheel", "model/gltf-binary")),
    ]


@pytest.fixture
def scene_document() -> bytes:
    return b'{"wheel": {"mass": 12}, "body": {"material": "steel"}}'
