"""테스트 인프라 — 임시 로컬 저장소, 인메모리 SQLite DB, httpx 클라이언트 픽스처.

Test infrastructure — Temporary local storage, in-memory SQLite database,
portal session registry and httpx client fixtures.
Remote persistence runs on SQLite (aiosqlite) with a static pool so every
session shares the same in-memory database.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from civicconnect.config import settings
from civicconnect.database import Base, get_db
from civicconnect.main import app
from civicconnect.models import *  # noqa: F401,F403 — register all models with metadata
from civicconnect.repositories.local_issue_store import LocalIssueStore
from civicconnect.schemas.issue import Identity, IssueRecord, IssueReportForm
from civicconnect.services.issue_store import IssueStore
from civicconnect.services.portal_session import PortalSession, session_registry

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ---------------------------------------------------------------------------
# 로컬 저장소 / 세션 — Local storage and sessions
# ---------------------------------------------------------------------------
@pytest.fixture
def storage_dir(tmp_path: Path) -> Path:
    return tmp_path / "storage"


@pytest.fixture
def local_store(storage_dir: Path) -> LocalIssueStore:
    """테스트 전용 디렉토리를 쓰는 로컬 저장소."""
    return LocalIssueStore(storage_dir)


@pytest.fixture
def store(local_store: LocalIssueStore) -> IssueStore:
    s = IssueStore(local_store)
    s.initialize()
    return s


@pytest.fixture
def portal(local_store: LocalIssueStore):
    """마운트된 포털 세션 — 테스트 종료 시 닫힘."""
    session = PortalSession("test-session", local_store).mount()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path: Path, storage_dir: Path):
    """전역 레지스트리와 업로드 경로를 테스트 디렉토리로 격리합니다."""
    monkeypatch.setattr(settings, "LOCAL_UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "REMOTE_SYNC_ENABLED", False)
    monkeypatch.setattr(session_registry, "local_store_factory", lambda: LocalIssueStore(storage_dir))
    yield
    session_registry.close_all()


# ---------------------------------------------------------------------------
# 원격 저장소 — Remote persistence (in-memory SQLite)
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    eng = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션을 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 — Builders
# ---------------------------------------------------------------------------
def make_identity(user_id: str = "u1", name: str | None = "User One", email: str | None = "u1@test.com") -> Identity:
    return Identity(authenticated=True, id=user_id, display_name=name, email=email)


LOGGED_OUT: Identity = Identity(authenticated=False)


def make_record(issue_id: str, **overrides) -> IssueRecord:
    data = {
        "id": issue_id,
        "owner_id": "u1",
        "owner_label": "User One",
        "title": f"Issue {issue_id}",
        "description": "Something is broken",
        "category": "other",
        "location": {"lat": 28.6, "lng": 77.2},
        "status": "reported",
        "created_at": "2026-10-01T10:00:00+00:00",
        "upvotes": 1,
    }
    data.update(overrides)
    return IssueRecord.model_validate(data)


def make_form(**overrides) -> IssueReportForm:
    data = {
        "title": "Pothole",
        "category": "pothole",
        "description": "deep",
        "latitude": 28.7,
        "longitude": 77.1,
    }
    data.update(overrides)
    return IssueReportForm.model_validate(data)
