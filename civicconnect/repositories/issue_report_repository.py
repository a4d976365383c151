"""이슈 리포트 레포지토리.

Issue report repository — Remote persistence for submitted issues.
Exposes the two operations the portal consumes: create(record) -> id and
list() -> records.
"""

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from civicconnect.models.issue import IssueReport
from civicconnect.repositories.base import BaseRepository
from civicconnect.schemas.issue import GeoPoint, IssueRecord, IssueStatus


class IssueReportRepository(BaseRepository[IssueReport]):

    def __init__(self) -> None:
        super().__init__(IssueReport)

    @staticmethod
    def to_record(row: IssueReport) -> IssueRecord:
        location: GeoPoint | None = None
        if row.latitude is not None and row.longitude is not None:
            location = GeoPoint(lat=row.latitude, lng=row.longitude)
        return IssueRecord(
            id=str(row.id),
            owner_id=row.owner_id,
            owner_label=row.owner_label,
            title=row.title,
            description=row.description,
            category=row.category,
            location=location,
            address=row.address,
            status=IssueStatus(row.status),
            created_at=row.created_at,
            upvotes=row.upvotes,
            image_url=row.image_url,
            resolution_image_url=row.resolution_image_url,
        )

    async def create_issue(self, db: AsyncSession, record: IssueRecord) -> str:
        row = await self.create(
            db,
            {
                "client_id": record.id,
                "owner_id": record.owner_id,
                "owner_label": record.owner_label,
                "title": record.title,
                "description": record.description,
                "category": record.category,
                "latitude": record.location.lat if record.location else None,
                "longitude": record.location.lng if record.location else None,
                "address": record.address,
                "status": record.status.value,
                "upvotes": record.upvotes,
                "image_url": record.image_url,
                "resolution_image_url": record.resolution_image_url,
                "created_at": record.created_at,
            },
        )
        return str(row.id)

    async def list_issues(self, db: AsyncSession) -> list[IssueRecord]:
        rows: Sequence[IssueReport] = await self.get_all(
            db, order_by=IssueReport.created_at.desc()
        )
        return [self.to_record(row) for row in rows]


issue_report_repository: IssueReportRepository = IssueReportRepository()
