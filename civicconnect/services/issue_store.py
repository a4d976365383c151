"""레코드 스토어 — 세션의 캐노니컬 이슈 리스트.

Record store — Holds the canonical list of issue records for one portal
session and keeps the user subset in durable local storage.
"""

import logging
from collections.abc import Callable, Sequence

from civicconnect.repositories.local_issue_store import LocalIssueStore
from civicconnect.schemas.issue import Identity, IssueRecord, IssueStatus
from civicconnect.seed import SEED_ISSUES
from civicconnect.services.merge_policy import merge_issues, user_subset
from civicconnect.services.mutation_gate import can_mutate
from civicconnect.utils.exceptions import BadRequestError, DuplicateError

logger = logging.getLogger("civicconnect.issue_store")

Listener = Callable[[tuple[IssueRecord, ...]], None]


class IssueStore:
    """캐노니컬 리스트 보관소.

    Canonical list holder. The list is always the seed set plus zero or more
    user records, newest user records first after an insert.

    Bulk replacement happens only through ``on_identity_change``. Every other
    mutation writes the user subset back to local storage; a failed write is
    logged and the in-memory list stays authoritative.

    While the identity is unauthenticated the persisted user records are kept
    aside as hidden records. They are not part of the canonical list but are
    written back with every mutation so that nothing in storage is lost.

    Attributes:
        local_store: 로컬 영속 저장소 (Durable local storage)
        seed: 고정 시드 레코드 (Fixed seed set)
    """

    def __init__(
        self,
        local_store: LocalIssueStore,
        seed: Sequence[IssueRecord] = SEED_ISSUES,
    ) -> None:
        self.local_store: LocalIssueStore = local_store
        self.seed: tuple[IssueRecord, ...] = tuple(seed)
        self._records: list[IssueRecord] = list(self.seed)
        self._hidden: list[IssueRecord] = []
        self._listeners: list[Listener] = []

    # --- 조회 (Read) ---

    @property
    def records(self) -> tuple[IssueRecord, ...]:
        return tuple(self._records)

    def get(self, issue_id: str) -> IssueRecord | None:
        for record in self._records:
            if record.id == issue_id:
                return record
        return None

    def __contains__(self, issue_id: object) -> bool:
        return any(record.id == issue_id for record in self._records)

    def __len__(self) -> int:
        return len(self._records)

    def has_id(self, issue_id: str) -> bool:
        """보이는 레코드와 숨겨진 레코드 모두에서 id 사용 여부 확인."""
        return issue_id in self or any(hidden.id == issue_id for hidden in self._hidden)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """변경 리스너 등록 — Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # --- 일괄 교체 (Bulk replacement) ---

    def initialize(self) -> None:
        """첫 마운트 — 저장소를 읽지 않고 시드만 표시 (deterministic first paint)."""
        self._records = list(self.seed)
        self._hidden = []
        self._notify()

    def on_identity_change(self, identity: Identity) -> None:
        """인증 상태 변화 시 캐노니컬 리스트를 다시 계산합니다.

        Re-run the merge policy for the new identity signal and replace the
        canonical list. Storage is read once here and not written.

        Args:
            identity: 최신 인증 신호 (Latest identity signal)
        """
        persisted: list[IssueRecord] | None = self.local_store.read_user_records()
        self._records = merge_issues(
            self.seed, persisted, authenticated=identity.authenticated
        )
        if identity.authenticated:
            self._hidden = []
            logger.info(
                "Logged in - loaded %d user reports + %d seed issues",
                len(self._records) - len(self.seed),
                len(self.seed),
            )
        else:
            self._hidden = user_subset(persisted or [])
            logger.info(
                "Logged out - showing only seed issues (%d user reports hidden)",
                len(self._hidden),
            )
        self._notify()

    # --- 변경 (Mutations) ---

    def insert(self, record: IssueRecord) -> IssueRecord:
        """새 레코드를 리스트 맨 앞에 추가합니다 (newest-first).

        Raises:
            DuplicateError: 시드 접두사 또는 중복 id (Seed-prefixed or duplicate id)
        """
        if record.is_seed:
            raise DuplicateError(f"Reserved seed id: {record.id}")
        if self.has_id(record.id):
            raise DuplicateError(f"Issue id already exists: {record.id}")

        self._records.insert(0, record)
        logger.info("Issue %s reported. New count: %d", record.id, len(self._records))
        self._commit()
        return record

    def update_status(
        self,
        issue_id: str,
        new_status: IssueStatus | str,
        resolution_image_url: str | None = None,
    ) -> IssueRecord | None:
        """레코드 상태를 교체합니다.

        Replace the record's status. Absent ids and seed ids are silently
        ignored (returns None). Unknown status values are rejected.

        Args:
            issue_id: 대상 id (Target id)
            new_status: 새 상태 (New status)
            resolution_image_url: 해결 증빙 이미지 참조 (Optional proof photo reference)

        Returns:
            IssueRecord | None: 갱신된 레코드 또는 None (Updated record or None)

        Raises:
            BadRequestError: 알 수 없는 상태 값 (Unknown status value)
        """
        try:
            status = IssueStatus(new_status)
        except ValueError:
            raise BadRequestError(f"Unknown issue status: {new_status!r}")

        for index, record in enumerate(self._records):
            if record.id != issue_id:
                continue
            if record.is_seed:
                logger.warning("Ignoring status change on seed issue %s", issue_id)
                return None
            changes: dict = {"status": status}
            if resolution_image_url is not None:
                changes["resolution_image_url"] = resolution_image_url
            updated = record.model_copy(update=changes)
            self._records[index] = updated
            self._commit()
            return updated
        return None

    def delete(self, issue_id: str, requester: Identity, admin_mode: bool) -> bool:
        """뮤테이션 게이트를 통과한 경우에만 삭제합니다.

        Delete the record if the mutation gate allows it.

        Args:
            issue_id: 대상 id (Target id)
            requester: 요청자 신원 (Acting identity)
            admin_mode: 관리자 모드 여부 (Admin Mode flag)

        Returns:
            bool: 삭제 여부, 거부/미존재 시 False (False when denied or absent)
        """
        record = self.get(issue_id)
        if record is None:
            return False

        requester_id = requester.id if requester.authenticated else None
        requester_label = requester.claimed_label
        if not can_mutate(record, requester_id, admin_mode, requester_label):
            if record.is_seed:
                logger.warning("Cannot delete seed issue %s", issue_id)
            else:
                logger.warning("Delete of issue %s denied for %s", issue_id, requester_id)
            return False

        self._records = [r for r in self._records if r.id != issue_id]
        logger.info("Issue %s deleted", issue_id)
        self._commit()
        return True

    # --- 내부 (Internals) ---

    def _commit(self) -> None:
        visible = user_subset(self._records)
        visible_ids = {record.id for record in visible}
        self.local_store.write_user_records(
            visible + [record for record in self._hidden if record.id not in visible_ids]
        )
        self._notify()

    def _notify(self) -> None:
        snapshot = self.records
        for listener in list(self._listeners):
            listener(snapshot)
