"""포털 지도 라우터 — 지도 위젯 스냅샷 및 이벤트 API.

Portal Map Router — Serves the widget snapshot to the browser renderer and
forwards widget events (click, geolocation, resize) into the map session.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from civicconnect.api.deps import get_portal_session
from civicconnect.schemas.issue import GeoPoint
from civicconnect.services.marker_service import InMemoryMapWidget
from civicconnect.services.portal_session import PortalSession
from civicconnect.utils.exceptions import NotFoundError

router: APIRouter = APIRouter()


def _snapshot(session: PortalSession) -> dict[str, Any]:
    widget = session.map.widget
    if not isinstance(widget, InMemoryMapWidget):
        raise NotFoundError("지도가 열려 있지 않습니다 (Map is not open)")
    selected = session.map.selected_location
    return {
        **widget.snapshot(),
        "selected_location": selected.model_dump() if selected else None,
    }


@router.get("/{session_id}/map")
async def get_map(
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> dict:
    """지도 스냅샷 — center, zoom, tile layers and all placed markers."""
    return _snapshot(session)


@router.post("/{session_id}/map/click")
async def click_map(
    point: GeoPoint,
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> dict:
    """지도 클릭 — 제보 위치를 선택하고 클릭 마커를 표시합니다."""
    widget = session.map.widget
    if isinstance(widget, InMemoryMapWidget):
        widget.click(point)
    else:
        session.map.select_location(point)
    return _snapshot(session)


@router.post("/{session_id}/map/locate")
async def locate_user(
    point: GeoPoint,
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> dict:
    """현재 위치 반영 — Geolocation result from the browser."""
    session.map.show_current_location(point)
    return _snapshot(session)


@router.post("/{session_id}/map/resize")
async def resize_map(
    session: Annotated[PortalSession, Depends(get_portal_session)],
) -> dict:
    session.map.invalidate_size()
    return _snapshot(session)
