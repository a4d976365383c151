"""뮤테이션 게이트 및 관리자 모드.

Mutation gate and admin mode — client-side authorization for delete and
status changes.

Neither piece is real access control. Admin Mode is a local toggle with no
server verification; a deployment with a real backend must replace it with a
server-verified role check.
"""

from civicconnect.schemas.issue import ANONYMOUS_LABEL, ANONYMOUS_OWNER, IssueRecord


class AdminMode:
    """관리자 모드 — 로컬 UI 권한 토글.

    Local elevated-privilege toggle. Shows the mutation controls and bypasses
    ownership checks in the mutation gate. Provides no authorization
    guarantee of its own.
    """

    def __init__(self, enabled: bool = False) -> None:
        self._enabled: bool = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def toggle(self) -> bool:
        self._enabled = not self._enabled
        return self._enabled


def can_mutate(
    record: IssueRecord,
    requester_id: str | None,
    is_admin_mode: bool,
    requester_label: str | None = None,
) -> bool:
    """레코드 변경 가능 여부를 판정합니다.

    Decide whether the requester may mutate (delete) the record.

    Rules, in order:
        1. 시드 레코드는 항상 거부 (Seed records: always denied)
        2. 관리자 모드면 허용 (Admin Mode: allowed)
        3. 소유자 본인이면 허용 (Owner match: allowed)
        4. 익명 제보 + 표시 이름 일치면 허용 (Anonymous reclaim: allowed)

    Rule 4 matches the requester's display label against the owner label
    captured at submission. Labels are not unique and can be chosen freely,
    so this reclaim path is spoofable and must not be treated as proof of
    ownership.

    Args:
        record: 대상 레코드 (Target record)
        requester_id: 요청자 식별자, 비로그인 시 None (Requester id, None when unauthenticated)
        is_admin_mode: 관리자 모드 여부 (Admin Mode flag)
        requester_label: 요청자의 실제 이름 또는 이메일 (Provider-supplied name or email, used by rule 4 only; the "Anonymous" placeholder never matches)

    Returns:
        bool: 허용 여부 (Whether the mutation is allowed)
    """
    if record.is_seed:
        return False
    if is_admin_mode:
        return True

    # 익명 식별자는 소유자 신원으로 인정하지 않음 — the sentinel never proves ownership
    if requester_id is None or requester_id == ANONYMOUS_OWNER:
        return False
    if requester_id == record.owner_id:
        return True

    # 표시 이름 기본값은 신원이 아님 — the placeholder label never matches
    if record.owner_id == ANONYMOUS_OWNER and requester_label and requester_label != ANONYMOUS_LABEL:
        return requester_label == record.owner_label
    return False


def can_change_status(record: IssueRecord, is_admin_mode: bool) -> bool:
    """상태 변경은 관리자 화면 전용 — Status changes require Admin Mode, never on seeds."""
    return is_admin_mode and not record.is_seed
