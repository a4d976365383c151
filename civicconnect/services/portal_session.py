"""포털 세션 — 마운트된 포털 뷰 하나의 상태.

Portal session — State of one mounted portal view.

Wires the data flow of the issue-state core:
identity change → merge policy → record store → filter view → marker reconciler.
User actions (submit, delete, status change) mutate the store directly and
flow back through the same filter/reconcile path.
"""

import logging
import uuid
from collections.abc import Callable

from civicconnect.repositories.local_issue_store import LocalIssueStore
from civicconnect.schemas.issue import (
    ALL_STATUSES,
    Identity,
    IssueRecord,
    IssueStatus,
    StatusFilter,
)
from civicconnect.services.filter_view import filter_issues
from civicconnect.services.issue_store import IssueStore
from civicconnect.services.marker_service import InMemoryMapWidget, MapFactory, MapSession
from civicconnect.services.mutation_gate import AdminMode, can_change_status

logger = logging.getLogger("civicconnect.portal")


class PortalSession:
    """마운트된 포털 뷰의 상태 컨테이너.

    State container for one mounted portal view. Created by the registry on
    mount and closed on unmount; closing releases the map widget.

    Attributes:
        session_id: 세션 식별자 (Session identifier)
        store: 캐노니컬 리스트 (Record store)
        admin_mode: 관리자 모드 토글 (Admin Mode toggle)
        status_filter: 현재 필터 조건 (Current status predicate)
        identity: 최신 인증 신호 (Latest identity signal)
        map: 지도 세션 (Map session owning the widget)
        view: 필터 적용 결과 (Current display list)
    """

    def __init__(
        self,
        session_id: str,
        local_store: LocalIssueStore,
        map_session: MapSession | None = None,
    ) -> None:
        self.session_id: str = session_id
        self.store: IssueStore = IssueStore(local_store)
        self.admin_mode: AdminMode = AdminMode()
        self.status_filter: StatusFilter = ALL_STATUSES
        self.identity: Identity = Identity()
        self.map: MapSession = map_session or MapSession()
        self.view: list[IssueRecord] = []
        self.closed: bool = False
        self._unsubscribe: Callable[[], None] = self.store.subscribe(self._on_records_changed)

    def mount(self) -> "PortalSession":
        self.store.initialize()
        self.map.open()
        return self

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._unsubscribe()
        self.map.close()

    # --- 입력 신호 (Signals) ---

    def apply_identity(self, identity: Identity) -> None:
        self.identity = identity
        self.store.on_identity_change(identity)

    def set_filter(self, predicate: StatusFilter) -> list[IssueRecord]:
        self.status_filter = predicate
        self._refresh()
        return self.view

    # --- 변경 (Mutations) ---

    def delete_issue(self, issue_id: str) -> bool:
        return self.store.delete(issue_id, self.identity, self.admin_mode.enabled)

    def status_change_allowed(self, issue_id: str) -> bool:
        record = self.store.get(issue_id)
        return record is not None and can_change_status(record, self.admin_mode.enabled)

    def change_status(
        self,
        issue_id: str,
        new_status: IssueStatus,
        resolution_image_url: str | None = None,
    ) -> IssueRecord | None:
        """관리자 화면의 상태 변경 — None when absent or not allowed."""
        if not self.status_change_allowed(issue_id):
            logger.warning("Status change of issue %s refused (admin mode: %s)", issue_id, self.admin_mode.enabled)
            return None
        return self.store.update_status(issue_id, new_status, resolution_image_url)

    # --- 파생 뷰 (Derived view) ---

    def _on_records_changed(self, records: tuple[IssueRecord, ...]) -> None:
        self._refresh(records)

    def _refresh(self, records: tuple[IssueRecord, ...] | None = None) -> None:
        source = self.store.records if records is None else records
        self.view = filter_issues(source, self.status_filter)
        self.map.reconciler.reconcile(self.view)


class SessionRegistry:
    """포털 세션 레지스트리 — 프로세스 전역 세션 보관소.

    Process-wide registry of mounted portal sessions.
    """

    def __init__(
        self,
        local_store_factory: Callable[[], LocalIssueStore] = LocalIssueStore,
        map_factory: MapFactory = InMemoryMapWidget,
    ) -> None:
        self.local_store_factory = local_store_factory
        self.map_factory: MapFactory = map_factory
        self._sessions: dict[str, PortalSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self) -> PortalSession:
        session = PortalSession(
            uuid.uuid4().hex,
            self.local_store_factory(),
            MapSession(factory=self.map_factory),
        )
        self._sessions[session.session_id] = session.mount()
        logger.info("Portal session %s mounted", session.session_id)
        return session

    def get(self, session_id: str) -> PortalSession | None:
        return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.close()
        logger.info("Portal session %s closed", session_id)
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)


session_registry: SessionRegistry = SessionRegistry()
