"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어 및 라우터 등록.

FastAPI application entry point — Logging, middleware and router registration.
Portal sessions live in process memory; all of them are closed (and their
map widgets released) when the application shuts down.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from civicconnect import __version__
from civicconnect.config import settings
from civicconnect.middleware.axiom_logging import AxiomLoggingMiddleware
from civicconnect.services.portal_session import session_registry
from civicconnect.services.storage_service import uploads_dir

# 로깅 설정 — civicconnect.* 로거 계층 (Logger hierarchy for the whole package)
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("civicconnect")


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info("%s %s starting", settings.APP_NAME, __version__)
    try:
        yield
    finally:
        # 열린 세션 정리 — Release every mounted portal session
        session_registry.close_all()


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok", "sessions": str(len(session_registry))}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from civicconnect.api.portal import portal_router  # noqa: E402

app.include_router(portal_router, prefix="/api/v1/portal")

# 로컬 모드 업로드 파일 제공 — Serve local-mode uploads at the URLs the storage service returns
app.mount("/uploads", StaticFiles(directory=uploads_dir(), check_dir=False), name="uploads")
