"""머지 정책 — 시드 레코드와 저장된 사용자 레코드 결합.

Merge policy — Combines the immutable seed set with persisted user records.
Pure functions; run on startup and on every identity transition.
"""

from collections.abc import Iterable, Sequence

from civicconnect.schemas.issue import IssueRecord


def user_subset(records: Iterable[IssueRecord]) -> list[IssueRecord]:
    """시드가 아닌 레코드만 반환 — Records eligible for persistence, order preserved."""
    return [record for record in records if not record.is_seed]


def merge_issues(
    seed: Sequence[IssueRecord],
    persisted: Sequence[IssueRecord] | None,
    *,
    authenticated: bool,
) -> list[IssueRecord]:
    """캐노니컬 리스트를 계산합니다.

    Compute the canonical list for the given identity state.

    Seed records come first in their fixed order, followed by persisted user
    records in persisted order. Unauthenticated sessions see the seed set
    only; their user records stay in storage and reappear on the next
    authenticated merge. ``persisted=None`` (missing or unreadable storage)
    degrades to the seed set.

    Args:
        seed: 고정 시드 레코드 (Fixed seed records)
        persisted: 저장소에서 읽은 레코드, 없거나 손상 시 None
                   (Records read from durable storage, None when absent/corrupt)
        authenticated: 인증 상태 (Identity signal)

    Returns:
        list[IssueRecord]: 새 캐노니컬 리스트 (New canonical list)
    """
    merged: list[IssueRecord] = list(seed)
    if not authenticated or not persisted:
        return merged

    # id 유일성 유지 — first occurrence wins, seed ids are never overridden
    seen: set[str] = {record.id for record in merged}
    for record in user_subset(persisted):
        if record.id in seen:
            continue
        seen.add(record.id)
        merged.append(record)
    return merged
