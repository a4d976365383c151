"""원격 저장소 데이터베이스 설정 모듈.

Remote persistence database setup.
The portal works without a reachable database: sessions are only opened
lazily, and nothing connects unless remote sync or the admin remote list
actually runs a query.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from civicconnect.config import settings


class Base(DeclarativeBase):
    """ORM 선언적 베이스 — Declarative base for the remote models."""


def build_engine(url: str | None = None) -> AsyncEngine:
    """비동기 엔진 생성 — 서버형 DB에만 커넥션 풀 옵션 적용.

    Build the async engine. Pool sizing applies to server databases
    (PostgreSQL via asyncpg); file or memory SQLite URLs get the defaults.
    """
    database_url = url or settings.DATABASE_URL
    options: dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if not database_url.startswith("sqlite"):
        options.update(pool_size=5, max_overflow=10)
    return create_async_engine(database_url, **options)


engine: AsyncEngine = build_engine()

# expire_on_commit=False: 커밋 후 레코드 변환 시 재조회 불필요
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 세션 의존성 — Request-scoped session, closed after the response."""
    async with async_session() as session:
        yield session
