"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared across routers.
"""

from typing import Any

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """단순 메시지 응답 — Generic message response."""

    message: str


class ListResponse(BaseModel):
    """목록 응답 — List response with item count.

    Attributes:
        items: 항목 목록 (Items)
        total: 항목 수 (Item count)
    """

    items: list[Any]
    total: int
