"""로컬 저장소 테스트.

Local storage tests — missing/corrupt payloads, seed filtering and
failed writes.
"""

import json

from civicconnect.repositories.local_issue_store import LocalIssueStore
from civicconnect.seed import SEED_ISSUES
from tests.conftest import make_record


class TestReadUserRecords:
    """read_user_records 검증."""

    def test_missing_file_reads_as_none(self, local_store: LocalIssueStore):
        assert local_store.read_user_records() is None

    def test_corrupt_json_reads_as_none(self, local_store: LocalIssueStore):
        local_store.path.parent.mkdir(parents=True, exist_ok=True)
        local_store.path.write_text("{not json", encoding="utf-8")
        assert local_store.read_user_records() is None

    def test_wrong_shape_reads_as_none(self, local_store: LocalIssueStore):
        local_store.path.parent.mkdir(parents=True, exist_ok=True)
        local_store.path.write_text(json.dumps({"id": "issue-1"}), encoding="utf-8")
        assert local_store.read_user_records() is None

    def test_invalid_record_reads_as_none(self, local_store: LocalIssueStore):
        local_store.path.parent.mkdir(parents=True, exist_ok=True)
        local_store.path.write_text(json.dumps([{"id": "issue-1"}]), encoding="utf-8")
        assert local_store.read_user_records() is None

    def test_seed_records_in_file_are_dropped(self, local_store: LocalIssueStore):
        local_store.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [
            SEED_ISSUES[0].model_dump(mode="json"),
            make_record("issue-1").model_dump(mode="json"),
        ]
        local_store.path.write_text(json.dumps(payload), encoding="utf-8")

        records = local_store.read_user_records()
        assert [r.id for r in records] == ["issue-1"]


class TestWriteUserRecords:
    """write_user_records 검증."""

    def test_write_then_read_preserves_order(self, local_store: LocalIssueStore):
        records = [make_record("issue-2"), make_record("issue-1")]
        assert local_store.write_user_records(records) is True
        assert local_store.read_user_records() == records

    def test_write_filters_seed(self, local_store: LocalIssueStore):
        local_store.write_user_records(list(SEED_ISSUES) + [make_record("issue-1")])
        stored = json.loads(local_store.path.read_text(encoding="utf-8"))
        assert [item["id"] for item in stored] == ["issue-1"]

    def test_write_replaces_previous_payload(self, local_store: LocalIssueStore):
        local_store.write_user_records([make_record("issue-1")])
        local_store.write_user_records([])
        assert local_store.read_user_records() == []

    def test_write_failure_returns_false(self, tmp_path):
        """디렉토리를 만들 수 없으면 False — parent path is a regular file."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        store = LocalIssueStore(blocker / "nested")

        assert store.write_user_records([make_record("issue-1")]) is False
        assert store.read_user_records() is None

    def test_namespace_selects_file(self, storage_dir):
        store = LocalIssueStore(storage_dir, namespace="other_ns")
        store.write_user_records([make_record("issue-1")])
        assert (storage_dir / "other_ns.json").exists()
