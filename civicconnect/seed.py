"""시드 데이터 — 항상 표시되는 데모 이슈.

Seed dataset — Demonstration issues that are always part of the canonical list.
Seed records are never persisted, never deleted and never mutated; they are
re-injected by the merge policy on every identity transition.

Usage:
    python -m civicconnect.seed
"""

from datetime import datetime, timedelta, timezone

from civicconnect.schemas.issue import (
    GeoPoint,
    IssueRecord,
    IssueStatus,
)

_NOW: datetime = datetime.now(timezone.utc)

SEED_ISSUES: tuple[IssueRecord, ...] = (
    IssueRecord(
        id="demo-1",
        owner_id="demo",
        owner_label="Rajesh Kumar",
        title="Road Damage - Connaught Place",
        category="pothole",
        description="Large crater-sized pothole on CP road causing traffic congestion. Needs immediate attention.",
        status=IssueStatus.REPORTED,
        created_at=_NOW - timedelta(days=2),
        upvotes=12,
        location=GeoPoint(lat=28.7041, lng=77.1025),
    ),
    IssueRecord(
        id="demo-2",
        owner_id="demo",
        owner_label="Priya Singh",
        title="Signal Malfunction - Kasturba Nagar",
        category="traffic",
        description="Traffic signal at Kasturba Nagar junction is malfunctioning. Causing traffic problems.",
        status=IssueStatus.IN_PROGRESS,
        created_at=_NOW - timedelta(days=1),
        upvotes=8,
        location=GeoPoint(lat=28.6129, lng=77.2295),
    ),
    IssueRecord(
        id="demo-3",
        owner_id="demo",
        owner_label="Amit Patel",
        title="Street Light Repaired - Greater Kailash",
        category="streetLight",
        description="Broken street light at Greater Kailash has been successfully repaired by municipal team.",
        status=IssueStatus.RESOLVED,
        created_at=_NOW - timedelta(hours=3),
        upvotes=5,
        location=GeoPoint(lat=28.5355, lng=77.3910),
    ),
)


if __name__ == "__main__":
    for issue in SEED_ISSUES:
        print(f"{issue.id}\t{issue.status.value}\t{issue.title}")
