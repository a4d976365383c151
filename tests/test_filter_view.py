"""필터 뷰 테스트."""

import pytest

from civicconnect.schemas.issue import ALL_STATUSES, IssueStatus
from civicconnect.seed import SEED_ISSUES
from civicconnect.services.filter_view import filter_issues, parse_status_filter
from civicconnect.utils.exceptions import BadRequestError
from tests.conftest import make_record


class TestFilterIssues:

    def test_all_returns_everything_in_order(self):
        records = [make_record("issue-1")] + list(SEED_ISSUES)
        assert filter_issues(records, ALL_STATUSES) == records

    def test_status_predicate_keeps_canonical_order(self):
        records = [
            make_record("issue-2", status="resolved"),
            make_record("issue-1", status="reported"),
        ] + list(SEED_ISSUES)
        result = filter_issues(records, IssueStatus.RESOLVED)
        assert [r.id for r in result] == ["issue-2", "demo-3"]

    def test_no_match_returns_empty(self):
        assert filter_issues([make_record("issue-1")], IssueStatus.IN_PROGRESS) == []

    def test_input_not_mutated(self):
        records = list(SEED_ISSUES)
        filter_issues(records, IssueStatus.REPORTED)
        assert len(records) == 3


class TestParseStatusFilter:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, ALL_STATUSES),
            ("all", ALL_STATUSES),
            ("reported", IssueStatus.REPORTED),
            ("inProgress", IssueStatus.IN_PROGRESS),
            ("resolved", IssueStatus.RESOLVED),
        ],
    )
    def test_known_values(self, raw, expected):
        assert parse_status_filter(raw) == expected

    def test_unknown_value_rejected(self):
        with pytest.raises(BadRequestError):
            parse_status_filter("closed")
