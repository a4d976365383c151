"""CivicConnect — 시민 이슈 제보 포털 코어.

Citizen issue-reporting portal core: seed/user record merging, persisted
session cache, filtered map overlay, and client-side mutation gating.
"""

__version__ = "1.0.0"
