"""원격 이슈 리포트 SQLAlchemy ORM 모델.

Remote issue report ORM model.
Rows are written by the submission pipeline when remote sync is enabled
and read back by the admin dashboard.

Tables:
    - issue_reports: 시민 이슈 제보 (Citizen issue reports)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from civicconnect.database import Base


class IssueReport(Base):
    """이슈 리포트 모델 — 원격 저장소의 제보 레코드.

    Issue report model — Remote copy of a submitted issue.
    The remote store assigns its own UUID; the session-local id is kept in
    client_id for traceability.

    Attributes:
        id: 원격 고유 식별자 UUID (Store-assigned identifier)
        client_id: 세션 로컬 id (issue-<ms> id of the local record)
        owner_id: 제보자 식별자 (Submitting identity or "anonymous")
        owner_label: 제보자 표시 이름 (Display name at submission)
        status: reported / inProgress / resolved
        latitude/longitude: 좌표, 없을 수 있음 (Optional coordinates)
        image_url: 첨부 이미지 참조 (Attached image reference)
    """

    __tablename__ = "issue_reports"

    # 원격 고유 식별자 — Remote unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    client_id: Mapped[str | None] = mapped_column(String(64), nullable=True, index=True)
    owner_id: Mapped[str] = mapped_column(String(128), nullable=False)
    owner_label: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(String(30), nullable=False, default="other")
    # 좌표 — NULL이면 지도에 표시하지 않음 (NULL = list only)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="reported")
    upvotes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    resolution_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
