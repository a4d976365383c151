"""FastAPI 의존성 주입 모듈 — 포털 세션 조회.

FastAPI dependency injection module — Portal session lookup.

There is no server-side authorization in the portal: the identity is pushed
by the client's authentication provider and Admin Mode is a client-local
toggle. Dependencies here resolve the session the request targets and check
the session-local signals (logged in, Admin Mode) that gate client affordances.
"""

from typing import Annotated

from fastapi import Depends, Path

from civicconnect.services.portal_session import PortalSession, session_registry
from civicconnect.utils.exceptions import ForbiddenError, NotFoundError


async def get_portal_session(
    session_id: Annotated[str, Path(min_length=1, max_length=64)],
) -> PortalSession:
    """경로의 세션 ID로 마운트된 포털 세션을 반환합니다.

    Resolve the mounted portal session addressed by the path.

    Raises:
        NotFoundError(404): 세션이 없거나 이미 닫힘 (Unknown or closed session)
    """
    session = session_registry.get(session_id)
    if session is None:
        raise NotFoundError("포털 세션을 찾을 수 없습니다 (Portal session not found)")
    return session


async def require_admin_mode(
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> PortalSession:
    """관리자 화면 전용 — Admin Mode must be on. Client-side affordance only."""
    if not session.admin_mode.enabled:
        raise ForbiddenError("관리자 모드가 꺼져 있습니다 (Admin mode is off)")
    return session


async def require_authenticated(
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> PortalSession:
    """제보는 로그인 사용자 전용 — the identity signal must be authenticated.

    Raises:
        ForbiddenError(403): 비로그인 세션 (Logged-out session)
    """
    if not session.identity.authenticated:
        raise ForbiddenError("You must be logged in to report an issue.")
    return session
