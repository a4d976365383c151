"""서비스 패키지 — 비즈니스 로직 계층.

Service package — Business logic layer.
Contains the issue-state core (merge policy, record store, filter view,
marker reconciler, mutation gate) and the services that orchestrate it
(submission pipeline, portal sessions, upload storage).
"""
