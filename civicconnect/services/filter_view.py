"""필터 뷰 — 상태별 표시 목록 계산.

Filter view — Derives the display subset of the canonical list.
"""

from collections.abc import Sequence

from civicconnect.schemas.issue import ALL_STATUSES, IssueRecord, IssueStatus, StatusFilter
from civicconnect.utils.exceptions import BadRequestError


def parse_status_filter(value: str | IssueStatus | None) -> StatusFilter:
    """쿼리 문자열을 필터 조건으로 변환 — None/"all" means every status."""
    if value is None or value == ALL_STATUSES:
        return ALL_STATUSES
    try:
        return IssueStatus(value)
    except ValueError:
        raise BadRequestError(f"Unknown status filter: {value!r}")


def filter_issues(records: Sequence[IssueRecord], predicate: StatusFilter) -> list[IssueRecord]:
    """상태 조건에 맞는 레코드를 원래 순서대로 반환합니다.

    Return the records matching the predicate, in canonical order.
    Never mutates its input.
    """
    if predicate == ALL_STATUSES:
        return list(records)
    return [record for record in records if record.status == predicate]
