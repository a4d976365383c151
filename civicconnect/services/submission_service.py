"""제보 제출 서비스.

Submission service — Form input → record construction → store insert,
with optional image upload and optional remote create.
"""

import logging
import time
from datetime import datetime, timezone

from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from civicconnect.config import settings
from civicconnect.repositories.issue_report_repository import issue_report_repository
from civicconnect.schemas.issue import (
    GeoPoint,
    Identity,
    IssueRecord,
    IssueReportForm,
    IssueStatus,
)
from civicconnect.services.issue_store import IssueStore
from civicconnect.services.portal_session import PortalSession
from civicconnect.services.storage_service import storage_service, upload_path
from civicconnect.utils.exceptions import UpstreamError

logger = logging.getLogger("civicconnect.submission")


class SubmissionResult(BaseModel):
    record: IssueRecord | None = None
    errors: list[str] = []
    remote_id: str | None = None

    @property
    def ok(self) -> bool:
        return self.record is not None and not self.errors


class SubmissionService:

    def validate(self, form: IssueReportForm) -> list[str]:
        errors: list[str] = []
        if not form.title.strip():
            errors.append("title is required")
        if not form.description.strip():
            errors.append("description is required")
        return errors

    def new_issue_id(self, store: IssueStore) -> str:
        """issue-<epoch-ms>, 같은 밀리초 충돌 시 접미사 추가 (suffix on collision, hidden records included)."""
        base = f"issue-{int(time.time() * 1000)}"
        candidate, suffix = base, 1
        while store.has_id(candidate):
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    def build_record(
        self,
        issue_id: str,
        form: IssueReportForm,
        identity: Identity,
        image_url: str | None = None,
    ) -> IssueRecord:
        return IssueRecord(
            id=issue_id,
            owner_id=identity.owner_id,
            owner_label=identity.display_label,
            title=form.title.strip(),
            description=form.description.strip(),
            category=form.category,
            location=GeoPoint(lat=form.latitude, lng=form.longitude),
            address=form.address or None,
            status=IssueStatus.REPORTED,
            created_at=datetime.now(timezone.utc),
            upvotes=1,
            image_url=image_url,
        )

    async def submit(
        self,
        session: PortalSession,
        form: IssueReportForm,
        db: AsyncSession | None = None,
    ) -> SubmissionResult:
        """제보를 제출합니다.

        Submit a report for the session's current identity.

        Order: validate → upload image → build and insert (optimistic) →
        remote create. An upload failure happens before the insert; a
        remote-create failure happens after it and the insert is not undone.

        Args:
            session: 대상 포털 세션 (Portal session receiving the record)
            form: 제보 폼 입력 (Report form input)
            db: 원격 저장소 세션, 원격 동기화 시에만 사용 (Remote session, used when sync is enabled)

        Returns:
            SubmissionResult: 생성된 레코드 또는 검증 오류 (Created record or validation errors)

        Raises:
            UpstreamError: 이미지 업로드 또는 원격 저장 실패 (Upload or remote create failed)
        """
        errors = self.validate(form)
        if errors:
            return SubmissionResult(errors=errors)

        image_url: str | None = None
        if form.image is not None:
            image_url = await storage_service.upload_file(
                form.image.data,
                upload_path("issues", form.image.filename),
                form.image.content_type,
            )

        record = self.build_record(
            self.new_issue_id(session.store), form, session.identity, image_url
        )
        session.store.insert(record)
        # 제출 후 선택 위치 초기화 — the click target is consumed by the report
        session.map.clear_selection()

        remote_id: str | None = None
        if settings.REMOTE_SYNC_ENABLED and db is not None:
            try:
                remote_id = await issue_report_repository.create_issue(db, record)
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.error("Remote create of issue %s failed: %s", record.id, exc)
                raise UpstreamError("원격 저장에 실패했습니다 (Failed to create issue remotely)")

        return SubmissionResult(record=record, remote_id=remote_id)


submission_service: SubmissionService = SubmissionService()
