"""포털 이슈 라우터 — 이슈 목록, 제보, 삭제, 상태 변경 API.

Portal Issue Router — Filtered issue list, report submission, gated delete
and admin status changes for one portal session.
A refused delete or status change is not an error: the response carries
applied=false and a warning message.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from civicconnect.api.deps import get_portal_session, require_authenticated
from civicconnect.database import get_db
from civicconnect.schemas.common import ListResponse
from civicconnect.schemas.issue import (
    IssueRecord,
    IssueReportForm,
    MutationResponse,
    StatusChange,
)
from civicconnect.services.filter_view import parse_status_filter
from civicconnect.services.portal_session import PortalSession
from civicconnect.services.storage_service import storage_service, upload_path
from civicconnect.services.submission_service import submission_service
from civicconnect.utils.exceptions import NotFoundError

router: APIRouter = APIRouter()


def _require_issue(session: PortalSession, issue_id: str) -> IssueRecord:
    record = session.store.get(issue_id)
    if record is None:
        raise NotFoundError("이슈를 찾을 수 없습니다 (Issue not found)")
    return record


@router.get("/{session_id}/issues", response_model=ListResponse)
async def list_issues(
    session: Annotated[PortalSession, Depends(get_portal_session)],
    status: str | None = Query(None),
) -> dict:
    """현재 필터 뷰 조회. status 지정 시 필터를 변경합니다."""
    if status is not None:
        session.set_filter(parse_status_filter(status))
    items = [record.model_dump(mode="json") for record in session.view]
    return {"items": items, "total": len(items)}


@router.get("/{session_id}/issues/{issue_id}", response_model=IssueRecord)
async def get_issue(
    issue_id: str,
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> IssueRecord:
    return _require_issue(session, issue_id)


@router.post("/{session_id}/issues", status_code=201, response_model=None)
async def submit_issue(
    form: IssueReportForm,
    session: Annotated[PortalSession, Depends(require_authenticated)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict | JSONResponse:
    """이슈 제보. 로그인 필요(403), 필수값 누락 시 400과 오류 목록을 반환합니다."""
    result = await submission_service.submit(session, form, db)
    if not result.ok:
        return JSONResponse(
            status_code=400,
            content={"detail": "Please fill in all required fields", "errors": result.errors},
        )
    return {
        "issue": result.record.model_dump(mode="json"),
        "remote_id": result.remote_id,
    }


@router.delete("/{session_id}/issues/{issue_id}", response_model=MutationResponse)
async def delete_issue(
    issue_id: str,
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> MutationResponse:
    """이슈 삭제. 본인 제보 또는 관리자 모드만 가능, 시드는 불가."""
    record = _require_issue(session, issue_id)
    if session.delete_issue(issue_id):
        return MutationResponse(applied=True, message=f"Issue {issue_id} deleted")
    if record.is_seed:
        return MutationResponse(applied=False, message="Cannot delete demo issues")
    return MutationResponse(applied=False, message="You can only delete your own issues")


@router.patch("/{session_id}/issues/{issue_id}/status", response_model=MutationResponse)
async def change_issue_status(
    issue_id: str,
    data: StatusChange,
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> MutationResponse:
    """이슈 상태 변경. 관리자 모드 전용, 해결 증빙 이미지 첨부 가능."""
    _require_issue(session, issue_id)
    if not session.status_change_allowed(issue_id):
        return MutationResponse(
            applied=False,
            message="Status can only be changed in admin mode and never on demo issues",
        )

    resolution_image_url: str | None = None
    if data.resolution_image is not None:
        resolution_image_url = await storage_service.upload_file(
            data.resolution_image.data,
            upload_path("resolutions", data.resolution_image.filename),
            data.resolution_image.content_type,
        )

    updated = session.change_status(issue_id, data.status, resolution_image_url)
    if updated is None:
        return MutationResponse(applied=False, message=f"Issue {issue_id} was not updated")
    return MutationResponse(applied=True, message=f"Issue {issue_id} is now {updated.status.value}")


@router.post("/{session_id}/issues/{issue_id}/focus", response_model=MutationResponse)
async def focus_issue(
    issue_id: str,
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> MutationResponse:
    """이슈 위치로 지도 이동 — Pan/zoom the map to the issue."""
    record = _require_issue(session, issue_id)
    if session.map.focus(record):
        return MutationResponse(applied=True, message=f"Map focused on {issue_id}")
    return MutationResponse(applied=False, message=f"Issue {issue_id} has no location on the map")
