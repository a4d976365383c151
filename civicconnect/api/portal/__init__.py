"""포털 API 라우터 패키지 — 모든 포털 세션 엔드포인트 통합.

Portal API Router package — Aggregates all portal-session endpoints
into a single router for inclusion in the FastAPI application.

Included routers:
    - sessions: 세션 마운트/언마운트, 인증·필터·관리자 모드 신호
      (Mount/unmount, identity, filter and admin-mode signals)
    - issues: 필터 뷰, 제보, 삭제, 상태 변경 (Filtered view, submit, delete, status)
    - map: 지도 스냅샷 및 위젯 이벤트 (Map snapshot and widget events)
    - admin: 원격 제보 목록 (Remote issue list for the admin dashboard)
"""

from fastapi import APIRouter

from civicconnect.api.portal.admin import router as admin_router
from civicconnect.api.portal.issues import router as issues_router
from civicconnect.api.portal.map import router as map_router
from civicconnect.api.portal.sessions import router as sessions_router

portal_router: APIRouter = APIRouter()

# 모든 하위 라우터는 /sessions 아래에 위치 — every route is scoped to a session
portal_router.include_router(sessions_router, prefix="/sessions", tags=["Portal Sessions"])
portal_router.include_router(issues_router, prefix="/sessions", tags=["Portal Issues"])
portal_router.include_router(map_router, prefix="/sessions", tags=["Portal Map"])
portal_router.include_router(admin_router, prefix="/sessions", tags=["Portal Admin"])
