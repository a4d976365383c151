"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata, which is required for Alembic migrations.

Modules:
    issue: 원격 이슈 리포트 (Remote issue reports)
"""

from civicconnect.models.issue import IssueReport

__all__ = [
    "IssueReport",
]
