"""Test fixtures — in-memory SQLite record store, services and FastAPI test client."""

import random

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from dropzone.database import create_engine_for
from dropzone.main import create_app
from dropzone.models import Base
from dropzone.records import SqlRecordClient
from dropzone.services import get_file_service, get_folder_service, get_session
from dropzone.services.file_service import FileService
from dropzone.services.folder_service import FolderService
from dropzone.services.session import DriveSession


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest_asyncio.fixture
async def session_factory():
    """Async sessions bound to a fresh in-memory SQLite database."""
    engine = create_engine_for(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
def record_client(session_factory):
    return SqlRecordClient(session_factory, actor="tests")


@pytest.fixture
def folder_service(record_client):
    return FolderService(record_client)


@pytest.fixture
def file_service(record_client, folder_service):
    return FileService(record_client, folder_service=folder_service)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def drive(file_service, folder_service, clock):
    """Drive session with a deterministic clock and seeded randomness."""
    return DriveSession(
        file_service,
        folder_service,
        clock=clock,
        rng=random.Random(1234),
    )


@pytest_asyncio.fixture
async def client(file_service, folder_service, drive):
    """Async test client with the service dependencies overridden."""
    app = create_app()

    app.dependency_overrides[get_file_service] = lambda: file_service
    app.dependency_overrides[get_folder_service] = lambda: folder_service
    app.dependency_overrides[get_session] = lambda: drive

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
