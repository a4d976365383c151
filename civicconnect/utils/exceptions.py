"""커스텀 HTTP 예외 클래스 모듈.

HTTP exceptions raised by the portal services and routers.
Each class fixes a status code and a default message, so call sites only
pass the detail.

Only faults are raised. Form validation problems are returned by the
submission pipeline, and a refused mutation is a boolean outcome.

Usage:
    from civicconnect.utils.exceptions import NotFoundError, UpstreamError
    raise NotFoundError("Issue not found")
    raise UpstreamError("Image upload failed")
"""

from fastapi import HTTPException, status


class PortalError(HTTPException):
    """포털 예외 베이스 — status code and default detail per subclass."""

    status_code_default: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(status_code=self.status_code_default, detail=detail or self.default_detail)


class NotFoundError(PortalError):
    """404 — 포털 세션 또는 이슈가 없음 (Unknown portal session or issue)."""

    status_code_default = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class DuplicateError(PortalError):
    """409 — 캐노니컬 리스트의 id 유일성 위반.

    Raised for a duplicate id, or a user record carrying the reserved
    seed prefix.
    """

    status_code_default = status.HTTP_409_CONFLICT
    default_detail = "Resource already exists"


class ForbiddenError(PortalError):
    """403 — 관리자 모드가 꺼진 상태에서 관리자 화면 접근."""

    status_code_default = status.HTTP_403_FORBIDDEN
    default_detail = "Insufficient permissions"


class BadRequestError(PortalError):
    """400 — 알 수 없는 상태/필터 값, 잘못된 업로드 경로 (Unknown status or filter, bad upload path)."""

    status_code_default = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"


class UpstreamError(PortalError):
    """502 — 원격 저장소 또는 업로드 실패.

    Raised when the remote persistence or upload collaborator rejects a call.
    The local canonical list is never rolled back because of it.
    """

    status_code_default = status.HTTP_502_BAD_GATEWAY
    default_detail = "Upstream service failed"
