"""포털 세션 라우터 — 마운트/언마운트 및 입력 신호 API.

Portal Session Router — Mount/unmount a portal view and push the identity,
filter and admin-mode signals into it.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from civicconnect.api.deps import get_portal_session
from civicconnect.schemas.common import MessageResponse
from civicconnect.schemas.issue import (
    AdminModeUpdate,
    FilterUpdate,
    Identity,
    SessionResponse,
)
from civicconnect.services.portal_session import PortalSession, session_registry

router: APIRouter = APIRouter()


def build_session_response(session: PortalSession) -> SessionResponse:
    return SessionResponse(
        session_id=session.session_id,
        identity=session.identity,
        admin_mode=session.admin_mode.enabled,
        status_filter=session.status_filter,
        total=len(session.store),
        visible=len(session.view),
    )


@router.post("", response_model=SessionResponse, status_code=201)
async def mount_session() -> SessionResponse:
    """포털 뷰 마운트 — 시드 레코드만으로 시작 (seed-only first paint)."""
    return build_session_response(session_registry.create())


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> SessionResponse:
    return build_session_response(session)


@router.delete("/{session_id}", response_model=MessageResponse)
async def unmount_session(
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> dict:
    """포털 뷰 언마운트 — 지도 위젯을 해제합니다."""
    session_registry.close(session.session_id)
    return {"message": "포털 세션이 종료되었습니다 (Portal session closed)"}


@router.put("/{session_id}/identity", response_model=SessionResponse)
async def push_identity(
    identity: Identity,
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> SessionResponse:
    """인증 신호 반영 — 머지 정책을 다시 실행합니다.

    Apply the identity signal; re-runs the merge policy and replaces the
    canonical list.
    """
    session.apply_identity(identity)
    return build_session_response(session)


@router.put("/{session_id}/filter", response_model=SessionResponse)
async def set_status_filter(
    data: FilterUpdate,
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> SessionResponse:
    session.set_filter(data.status)
    return build_session_response(session)


@router.put("/{session_id}/admin-mode", response_model=SessionResponse)
async def set_admin_mode(
    data: AdminModeUpdate,
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> SessionResponse:
    """관리자 모드 토글 — 서버 검증 없음 (no server-side verification)."""
    if data.enabled:
        session.admin_mode.enable()
    else:
        session.admin_mode.disable()
    return build_session_response(session)
