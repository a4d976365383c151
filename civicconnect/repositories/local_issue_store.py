"""로컬 영속 저장소 레포지토리 — 사용자 제보 JSON 파일.

Durable local storage repository — Keeps the user-record subset in a single
JSON file keyed by a fixed namespace. Both operations degrade instead of
raising: a corrupt or unreadable file reads as "no user records" and a
failed write leaves the in-memory canonical list authoritative.
"""

import json
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from civicconnect.config import settings
from civicconnect.schemas.issue import IssueRecord
from civicconnect.services.merge_policy import user_subset

logger = logging.getLogger("civicconnect.local_store")

_PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent.parent
_RECORDS_ADAPTER: TypeAdapter[list[IssueRecord]] = TypeAdapter(list[IssueRecord])


def default_storage_dir() -> Path:
    return Path(settings.LOCAL_STORAGE_DIR) if settings.LOCAL_STORAGE_DIR else _PROJECT_ROOT / "data"


class LocalIssueStore:
    """네임스페이스 단위 JSON 파일 저장소.

    JSON file store for one namespace. Only user records are ever written;
    seed records are filtered out here as well as by the record store.

    Attributes:
        path: 저장 파일 경로 (Backing file path)
    """

    def __init__(self, directory: Path | None = None, namespace: str | None = None) -> None:
        base: Path = directory if directory is not None else default_storage_dir()
        self.namespace: str = namespace or settings.LOCAL_STORAGE_NAMESPACE
        self.path: Path = base / f"{self.namespace}.json"

    def read_user_records(self) -> list[IssueRecord] | None:
        """저장된 사용자 레코드를 읽습니다.

        Read persisted user records.

        Returns:
            list[IssueRecord] | None: 레코드 목록, 파일이 없거나 손상되면 None
                                      (Records, or None when missing or corrupt)
        """
        try:
            raw: str = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("Local storage unreadable (%s): %s", self.path, exc)
            return None

        try:
            records = _RECORDS_ADAPTER.validate_python(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            # 손상된 데이터는 다음 쓰기에서 덮어씀 — Corrupt payload is overwritten on next write
            logger.warning(
                "Discarding corrupt local storage %s: %s",
                self.path,
                str(exc).splitlines()[0],
            )
            return None
        return user_subset(records)

    def write_user_records(self, records: Sequence[IssueRecord]) -> bool:
        """사용자 레코드 전체를 교체 저장합니다.

        Replace the persisted user subset. Seed records are dropped.
        Writes go to a temp file that replaces the target, so readers never
        observe a half-written payload.

        Args:
            records: 저장할 레코드 (Records to persist)

        Returns:
            bool: 저장 성공 여부 (Whether the write succeeded)
        """
        payload = _RECORDS_ADAPTER.dump_python(user_subset(records), mode="json")
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.namespace}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.warning("Local storage write failed (%s): %s", self.path, exc)
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            return False

        logger.debug("Saved %d user issues to %s", len(payload), self.path)
        return True
