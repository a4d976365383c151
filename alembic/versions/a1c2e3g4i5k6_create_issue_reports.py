"""create_issue_reports

Revision ID: a1c2e3g4i5k6
Revises:
Create Date: 2026-10-18 10:00:00.000000

원격 이슈 리포트(issue_reports) 테이블 생성.
제보 제출 파이프라인이 원격 동기화 시 기록하는 테이블.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "a1c2e3g4i5k6"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "issue_reports",
        sa.Column("id", UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("client_id", sa.String(64), nullable=True),
        sa.Column("owner_id", sa.String(128), nullable=False),
        sa.Column("owner_label", sa.String(255), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), server_default="", nullable=False),
        sa.Column("category", sa.String(30), server_default="other", nullable=False),
        sa.Column("latitude", sa.Float(), nullable=True),
        sa.Column("longitude", sa.Float(), nullable=True),
        sa.Column("address", sa.String(500), nullable=True),
        sa.Column("status", sa.String(20), server_default="reported", nullable=False),
        sa.Column("upvotes", sa.Integer(), server_default="0", nullable=False),
        sa.Column("image_url", sa.Text(), nullable=True),
        sa.Column("resolution_image_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_issue_reports_client_id", "issue_reports", ["client_id"])
    op.create_index("ix_issue_reports_status", "issue_reports", ["status"])


def downgrade() -> None:
    op.drop_index("ix_issue_reports_status")
    op.drop_index("ix_issue_reports_client_id")
    op.drop_table("issue_reports")
