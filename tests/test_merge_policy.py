"""머지 정책 유닛 테스트.

Merge policy unit tests — seed-first ordering, unauthenticated hiding,
corrupt-storage fallback and idempotence.
"""

from civicconnect.seed import SEED_ISSUES
from civicconnect.services.merge_policy import merge_issues, user_subset
from tests.conftest import make_record


class TestMergeIssues:
    """merge_issues 검증."""

    def test_unauthenticated_returns_seed_only(self):
        persisted = [make_record("issue-1"), make_record("issue-2")]
        merged = merge_issues(SEED_ISSUES, persisted, authenticated=False)
        assert merged == list(SEED_ISSUES)

    def test_authenticated_appends_user_records_in_persisted_order(self):
        persisted = [make_record("issue-2"), make_record("issue-1")]
        merged = merge_issues(SEED_ISSUES, persisted, authenticated=True)
        assert [r.id for r in merged] == ["demo-1", "demo-2", "demo-3", "issue-2", "issue-1"]

    def test_missing_or_corrupt_storage_degrades_to_seed(self):
        assert merge_issues(SEED_ISSUES, None, authenticated=True) == list(SEED_ISSUES)
        assert merge_issues(SEED_ISSUES, [], authenticated=True) == list(SEED_ISSUES)

    def test_persisted_seed_ids_are_not_reread(self):
        """저장소에 섞인 시드 레코드는 무시하고 고정 시드를 재주입."""
        tampered = make_record("demo-1", title="Tampered", status="resolved")
        merged = merge_issues(SEED_ISSUES, [tampered, make_record("issue-1")], authenticated=True)
        assert merged[0] == SEED_ISSUES[0]
        assert [r.id for r in merged].count("demo-1") == 1

    def test_duplicate_user_ids_keep_first(self):
        first = make_record("issue-1", title="First")
        second = make_record("issue-1", title="Second")
        merged = merge_issues(SEED_ISSUES, [first, second], authenticated=True)
        user = user_subset(merged)
        assert len(user) == 1
        assert user[0].title == "First"

    def test_merge_is_idempotent(self):
        persisted = [make_record("issue-3"), make_record("issue-1")]
        once = merge_issues(SEED_ISSUES, persisted, authenticated=True)
        twice = merge_issues(SEED_ISSUES, user_subset(once), authenticated=True)
        assert twice == once

    def test_does_not_mutate_inputs(self):
        persisted = [make_record("issue-1")]
        merge_issues(SEED_ISSUES, persisted, authenticated=True)
        assert [r.id for r in persisted] == ["issue-1"]
        assert len(SEED_ISSUES) == 3


class TestSeedSet:

    def test_seed_ids_carry_reserved_prefix(self):
        assert all(r.is_seed for r in SEED_ISSUES)
        assert not make_record("issue-123").is_seed

    def test_user_subset_drops_seed(self):
        records = list(SEED_ISSUES) + [make_record("issue-9")]
        assert [r.id for r in user_subset(records)] == ["issue-9"]
