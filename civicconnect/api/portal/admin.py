"""관리자 대시보드 라우터 — 원격 저장소의 제보 목록 API.

Admin Dashboard Router — Lists issues from remote persistence.
Reachable only with Admin Mode on, which is a client-side affordance and
not a server-verified role.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from civicconnect.api.deps import require_admin_mode
from civicconnect.database import get_db
from civicconnect.repositories.issue_report_repository import issue_report_repository
from civicconnect.schemas.common import ListResponse
from civicconnect.services.portal_session import PortalSession
from civicconnect.utils.exceptions import UpstreamError

router: APIRouter = APIRouter()


@router.get("/{session_id}/admin/remote-issues", response_model=ListResponse)
async def list_remote_issues(
    db: Annotated[AsyncSession, Depends(get_db)],
    session: Annotated[PortalSession, Depends(require_admin_mode)],
) -> dict:
    """원격 제보 목록 조회. 관리자 모드 전용."""
    try:
        records = await issue_report_repository.list_issues(db)
    except SQLAlchemyError:
        raise UpstreamError("원격 목록 조회에 실패했습니다 (Failed to get issues)")
    items = [record.model_dump(mode="json") for record in records]
    return {"items": items, "total": len(items)}
