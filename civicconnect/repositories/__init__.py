"""레포지토리 패키지 — 저장소 접근 계층.

Repository package — Storage access layer.
Contains the remote database repositories (extending BaseRepository) and
the durable local JSON store used by the portal session cache.
"""
