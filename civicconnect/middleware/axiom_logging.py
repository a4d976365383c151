"""Axiom API 로깅 미들웨어.

Axiom request logging middleware for the portal API.
Each portal request becomes one structured event: method, path, portal
session id, masked query/body, status code, duration and the error detail
of 4xx/5xx responses. Identity fields (email) and secrets are masked and
base64 image payloads are truncated before leaving the process.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from civicconnect.config import settings

logger = logging.getLogger("civicconnect.axiom")

_MASKED_KEYS = re.compile(r"(password|secret|token|authorization|api_?key|credential|email)", re.IGNORECASE)

# 로깅 제외 경로 — not worth an event
_UNLOGGED_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})
_UNLOGGED_PREFIXES = ("/uploads/",)

# /api/v1/portal/sessions/<id>/...
_SESSION_ID = re.compile(r"/sessions/([^/]+)")

_MAX_STRING = 2000
_MAX_ITEMS = 20
_MAX_DEPTH = 5


def scrub(value: Any, depth: int = 0) -> Any:
    """민감 필드 마스킹 및 긴 문자열 절단.

    Mask sensitive keys and shorten oversized values, recursively.
    """
    if depth > _MAX_DEPTH:
        return "..."
    if isinstance(value, dict):
        return {
            key: "***" if _MASKED_KEYS.search(str(key)) else scrub(item, depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [scrub(item, depth + 1) for item in value[:_MAX_ITEMS]]
    if isinstance(value, str) and len(value) > _MAX_STRING:
        return f"{value[:_MAX_STRING]}...(truncated {len(value) - _MAX_STRING} chars)"
    return value


def _error_detail(body: bytes) -> str:
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:500]
    if isinstance(payload, dict):
        # 제출 검증 오류 목록 포함 — keep the form validation errors
        detail = payload.get("detail", payload)
        if payload.get("errors"):
            detail = f"{detail}: {payload['errors']}"
        return str(detail)[:500]
    return str(payload)[:500]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """포털 API 요청/응답을 Axiom으로 전송하는 미들웨어.

    Sends one event per portal API request to Axiom. A pass-through when no
    Axiom token or dataset is configured.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self.dataset: str = settings.AXIOM_DATASET
        self.client: AxiomClient | None = (
            AxiomClient(token=settings.AXIOM_API_TOKEN)
            if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET
            else None
        )

    def _skip(self, path: str) -> bool:
        return self.client is None or path in _UNLOGGED_PATHS or path.startswith(_UNLOGGED_PREFIXES)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if self._skip(path):
            return await call_next(request)

        started = time.perf_counter()
        event: dict[str, Any] = {"method": request.method, "path": path, "status_code": 500}

        session_match = _SESSION_ID.search(path)
        if session_match:
            event["portal_session"] = session_match.group(1)
        if request.query_params:
            event["query_params"] = scrub(dict(request.query_params))
        if request.method in ("POST", "PUT", "PATCH"):
            body = await request.body()
            if body:
                try:
                    event["request_body"] = scrub(json.loads(body))
                except (json.JSONDecodeError, UnicodeDecodeError):
                    event["request_body"] = "(non-json body)"

        try:
            response = await call_next(request)
            event["status_code"] = response.status_code
            if response.status_code >= 400:
                # 에러 응답 body는 한 번만 읽을 수 있으므로 재구성
                content = b"".join(
                    [chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                     async for chunk in response.body_iterator]
                )
                event["error"] = _error_detail(content)
                response = Response(
                    content=content,
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.perf_counter() - started) * 1000, 2)
            self._ingest(event)

        return response

    def _ingest(self, event: dict[str, Any]) -> None:
        # 로깅 실패는 요청 처리에 영향 없음 — a failed ingest never fails the request
        try:
            self.client.ingest_events(self.dataset, [event])
        except Exception as exc:
            logger.debug("Axiom ingest failed for %s %s: %s", event["method"], event["path"], exc)
