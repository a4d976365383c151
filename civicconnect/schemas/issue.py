"""이슈 레코드 Pydantic 스키마.

Issue record, identity and report form schemas.
IssueRecord is the single record shape that flows through the store,
the filter view, the marker reconciler and the durable local storage.
"""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import Base64Bytes, BaseModel, ConfigDict, Field

# 시드 레코드 예약 접두사 — Reserved id prefix for seed records
SEED_ID_PREFIX: str = "demo-"

# 비로그인 제보자 식별자 — Owner sentinel for unauthenticated submissions
ANONYMOUS_OWNER: str = "anonymous"
ANONYMOUS_LABEL: str = "Anonymous"

# 필터 전체 선택 값 — Filter predicate matching every status
ALL_STATUSES: Literal["all"] = "all"


class IssueStatus(str, Enum):
    REPORTED = "reported"
    IN_PROGRESS = "inProgress"
    RESOLVED = "resolved"


StatusFilter = IssueStatus | Literal["all"]


class GeoPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)


class IssueRecord(BaseModel):
    """이슈 레코드 — 캐노니컬 리스트의 단위 항목.

    Issue record as held in the canonical list.
    Frozen: every change produces a new instance, so seed records can be
    shared without copying.

    Attributes:
        id: 고유 식별자 (demo-* = 시드, issue-<ms> = 사용자 제보)
        owner_id: 제보자 식별자 또는 "anonymous" (Submitting identity or sentinel)
        owner_label: 제보 시점의 표시 이름 (Display name captured at submission)
        location: 좌표, 없으면 지도에 표시하지 않음 (None = list only, no marker)
        image_url: 업로드된 이미지 참조 (Upload reference, never raw bytes)
        resolution_image_url: 해결 증빙 이미지 참조 (Proof photo attached on resolve)
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    owner_id: str = ANONYMOUS_OWNER
    owner_label: str = ANONYMOUS_LABEL
    title: str
    description: str = ""
    category: str = "other"  # pothole, streetLight, traffic, garbage, water, other
    location: GeoPoint | None = None
    address: str | None = None
    status: IssueStatus = IssueStatus.REPORTED
    created_at: datetime
    upvotes: int = Field(default=0, ge=0)
    image_url: str | None = None
    resolution_image_url: str | None = None

    @property
    def is_seed(self) -> bool:
        return self.id.startswith(SEED_ID_PREFIX)


class Identity(BaseModel):
    """인증 제공자가 전달하는 현재 사용자 신호.

    Latest identity signal emitted by the authentication provider.
    """

    authenticated: bool = False
    id: str | None = None
    display_name: str | None = None
    email: str | None = None

    @property
    def owner_id(self) -> str:
        if self.authenticated and self.id:
            return self.id
        return ANONYMOUS_OWNER

    @property
    def display_label(self) -> str:
        return self.display_name or self.email or ANONYMOUS_LABEL

    @property
    def claimed_label(self) -> str | None:
        """제공자가 준 실제 이름/이메일 — None when logged out or neither is set."""
        if not self.authenticated:
            return None
        return self.display_name or self.email or None


class ImageAttachment(BaseModel):
    filename: str = Field(min_length=1, max_length=255)
    content_type: str = "application/octet-stream"
    data: Base64Bytes


class IssueReportForm(BaseModel):
    """제보 폼 입력 — 필수값 검증은 제출 파이프라인에서 수행.

    Report form input. Blank title/description are accepted here and
    reported back by the submission pipeline as validation errors.
    """

    title: str = ""
    description: str = ""
    category: str = "other"
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    address: str | None = None
    image: ImageAttachment | None = None


class StatusChange(BaseModel):
    status: IssueStatus
    resolution_image: ImageAttachment | None = None


class FilterUpdate(BaseModel):
    status: StatusFilter = ALL_STATUSES


class AdminModeUpdate(BaseModel):
    enabled: bool


class MutationResponse(BaseModel):
    applied: bool
    message: str


class SessionResponse(BaseModel):
    session_id: str
    identity: Identity
    admin_mode: bool
    status_filter: StatusFilter
    total: int  # 캐노니컬 리스트 크기 (Canonical list size)
    visible: int  # 필터 적용 후 크기 (Filtered view size)
