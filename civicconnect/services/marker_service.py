"""지도 마커 서비스 — 필터 뷰를 지도 위젯에 투영.

Map marker service — Projects the filtered view onto the mapping widget.

The widget is an explicitly owned resource: a MapSession creates it on mount
and destroys it exactly once on unmount. The MarkerReconciler is the only
writer of issue markers; transient markers (current location, click target)
belong to the MapSession and are never touched by reconciliation.
"""

import html
import itertools
import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from civicconnect.config import settings
from civicconnect.schemas.issue import GeoPoint, IssueRecord, IssueStatus

logger = logging.getLogger("civicconnect.map")

# 상태별 마커 색상 — Status → marker color (amber fallback)
AMBER: str = "#F59E0B"
STATUS_COLORS: dict[IssueStatus, str] = {
    IssueStatus.REPORTED: AMBER,
    IssueStatus.IN_PROGRESS: "#EF4444",
    IssueStatus.RESOLVED: "#10B981",
}
LOCATION_COLOR: str = "#3B82F6"
CLICK_TARGET_COLOR: str = "#EF4444"


class MarkerTag(str, Enum):
    ISSUE = "issue"
    LOCATION = "location"
    CLICK_TARGET = "click_target"


class MarkerStyle(BaseModel):
    model_config = ConfigDict(frozen=True)

    color: str
    tag: MarkerTag
    label: str = ""
    issue_id: str | None = None


ClickHandler = Callable[[GeoPoint], None]


class MapWidget(Protocol):
    """외부 지도 위젯 인터페이스 — Imperative API of the mapping widget."""

    def add_tile_layer(self, url_template: str, attribution: str) -> None: ...

    def add_marker(self, position: GeoPoint, style: MarkerStyle) -> int: ...

    def remove_marker(self, handle: int) -> None: ...

    def pan_to(self, position: GeoPoint, zoom: int) -> None: ...

    def on_click(self, handler: ClickHandler) -> None: ...

    def invalidate_size(self) -> None: ...

    def destroy(self) -> None: ...


# createMap(container, center, zoom)
MapFactory = Callable[[str, GeoPoint, int], MapWidget]


class InMemoryMapWidget:
    """메모리 지도 위젯 — 마커와 뷰 상태를 기록하고 JSON 스냅샷을 제공.

    Bundled widget implementation. Keeps markers, view and tile layers in
    memory; the HTTP API serves its snapshot to the browser-side renderer.
    """

    def __init__(self, container: str, center: GeoPoint, zoom: int) -> None:
        self.container: str = container
        self.center: GeoPoint = center
        self.zoom: int = zoom
        self.tile_layers: list[tuple[str, str]] = []
        self.markers: dict[int, tuple[GeoPoint, MarkerStyle]] = {}
        self.size_invalidations: int = 0
        self.destroyed: bool = False
        self._handlers: list[ClickHandler] = []
        self._handles = itertools.count(1)

    def add_tile_layer(self, url_template: str, attribution: str) -> None:
        self.tile_layers.append((url_template, attribution))

    def add_marker(self, position: GeoPoint, style: MarkerStyle) -> int:
        handle = next(self._handles)
        self.markers[handle] = (position, style)
        return handle

    def remove_marker(self, handle: int) -> None:
        self.markers.pop(handle, None)

    def pan_to(self, position: GeoPoint, zoom: int) -> None:
        self.center = position
        self.zoom = zoom

    def on_click(self, handler: ClickHandler) -> None:
        self._handlers.append(handler)

    def click(self, position: GeoPoint) -> None:
        """위젯 클릭 이벤트 발생 — Dispatch a click to registered handlers."""
        for handler in list(self._handlers):
            handler(position)

    def invalidate_size(self) -> None:
        self.size_invalidations += 1

    def destroy(self) -> None:
        self.markers.clear()
        self._handlers.clear()
        self.destroyed = True

    def snapshot(self) -> dict[str, Any]:
        return {
            "container": self.container,
            "center": self.center.model_dump(),
            "zoom": self.zoom,
            "tile_layers": [
                {"url_template": url, "attribution": attribution}
                for url, attribution in self.tile_layers
            ],
            "markers": [
                {"handle": handle, "position": position.model_dump(), **style.model_dump(mode="json")}
                for handle, (position, style) in self.markers.items()
            ],
        }


def marker_label(record: IssueRecord) -> str:
    """팝업 라벨 — HTML-escaped title, description and owner label."""
    return (
        f"<strong>{html.escape(record.title)}</strong><br>"
        f"{html.escape(record.description)}<br>"
        f"<small>{html.escape(record.owner_label)}</small>"
    )


def marker_style(record: IssueRecord) -> MarkerStyle:
    return MarkerStyle(
        color=STATUS_COLORS.get(record.status, AMBER),
        tag=MarkerTag.ISSUE,
        label=marker_label(record),
        issue_id=record.id,
    )


class MarkerReconciler:
    """이슈 마커 전체 교체기.

    Full-replace reconciler: after ``reconcile(display_list)`` the widget
    carries exactly one issue marker per geolocated record of the list.
    Without a bound widget the call is a no-op apart from remembering the
    list, which is painted as soon as a widget is bound.
    """

    def __init__(self, widget: MapWidget | None = None) -> None:
        self._widget: MapWidget | None = None
        self._placed: dict[str, int] = {}
        self._pending: list[IssueRecord] = []
        if widget is not None:
            self.bind(widget)

    @property
    def placed_issue_ids(self) -> set[str]:
        return set(self._placed)

    def bind(self, widget: MapWidget) -> None:
        if widget is not self._widget:
            self._placed = {}
        self._widget = widget
        self.reconcile(self._pending)

    def unbind(self) -> None:
        # 위젯이 파괴되면 핸들도 무효 — handles die with the widget
        self._widget = None
        self._placed = {}

    def reconcile(self, display_list: Sequence[IssueRecord]) -> None:
        self._pending = list(display_list)
        widget = self._widget
        if widget is None:
            return

        for handle in self._placed.values():
            widget.remove_marker(handle)
        self._placed = {}

        for record in self._pending:
            if record.location is None:
                continue
            self._placed[record.id] = widget.add_marker(record.location, marker_style(record))
        logger.debug("Reconciled %d issue markers", len(self._placed))


class MapSession:
    """지도 위젯 소유자 — 마운트 시 생성, 언마운트 시 파괴.

    Owns the widget for the lifetime of a portal session. Usable as a
    context manager; ``close`` is idempotent.

    Attributes:
        reconciler: 이슈 마커 교체기 (Issue marker reconciler)
        selected_location: 마지막 클릭 위치 (Last clicked location for the report form)
    """

    def __init__(
        self,
        factory: MapFactory = InMemoryMapWidget,
        container: str = "map",
        dark_mode: bool | None = None,
    ) -> None:
        self.factory: MapFactory = factory
        self.container: str = container
        self.dark_mode: bool = settings.MAP_DARK_MODE if dark_mode is None else dark_mode
        self.reconciler: MarkerReconciler = MarkerReconciler()
        self.selected_location: GeoPoint | None = None
        self._widget: MapWidget | None = None
        self._click_marker: int | None = None
        self._location_marker: int | None = None

    @property
    def widget(self) -> MapWidget | None:
        return self._widget

    @property
    def is_open(self) -> bool:
        return self._widget is not None

    def open(self) -> "MapSession":
        if self._widget is not None:
            return self

        center = GeoPoint(lat=settings.MAP_DEFAULT_LAT, lng=settings.MAP_DEFAULT_LNG)
        widget = self.factory(self.container, center, settings.MAP_DEFAULT_ZOOM)
        if self.dark_mode:
            widget.add_tile_layer(settings.MAP_DARK_TILE_URL, settings.MAP_DARK_TILE_ATTRIBUTION)
        else:
            widget.add_tile_layer(settings.MAP_TILE_URL, settings.MAP_TILE_ATTRIBUTION)
        widget.on_click(self.select_location)

        self._widget = widget
        self.reconciler.bind(widget)
        return self

    def close(self) -> None:
        widget = self._widget
        if widget is None:
            return
        self.reconciler.unbind()
        self._widget = None
        self._click_marker = None
        self._location_marker = None
        widget.destroy()

    def __enter__(self) -> "MapSession":
        return self.open()

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # --- 임시 마커 (Transient markers) ---

    def select_location(self, position: GeoPoint) -> None:
        """지도 클릭 — 제보 위치를 선택하고 클릭 마커를 표시."""
        self.selected_location = position
        widget = self._widget
        if widget is None:
            return
        if self._click_marker is not None:
            widget.remove_marker(self._click_marker)
        self._click_marker = widget.add_marker(
            position,
            MarkerStyle(
                color=CLICK_TARGET_COLOR,
                tag=MarkerTag.CLICK_TARGET,
                label="<strong>Report Here</strong><br>Fill in the details below",
            ),
        )

    def clear_selection(self) -> None:
        self.selected_location = None
        if self._widget is not None and self._click_marker is not None:
            self._widget.remove_marker(self._click_marker)
        self._click_marker = None

    def show_current_location(self, position: GeoPoint) -> None:
        """현재 위치로 이동하고 위치 마커를 표시 — Geolocation result."""
        widget = self._widget
        if widget is None:
            return
        widget.pan_to(position, settings.MAP_LOCATE_ZOOM)
        if self._location_marker is not None:
            widget.remove_marker(self._location_marker)
        self._location_marker = widget.add_marker(
            position,
            MarkerStyle(
                color=LOCATION_COLOR,
                tag=MarkerTag.LOCATION,
                label="<strong>Your Location</strong><br>Click on map to report an issue",
            ),
        )

    def focus(self, record: IssueRecord) -> bool:
        """이슈 위치로 확대 — False when the map is closed or the record has no location."""
        if self._widget is None or record.location is None:
            return False
        self._widget.pan_to(record.location, settings.MAP_FOCUS_ZOOM)
        return True

    def invalidate_size(self) -> None:
        if self._widget is not None:
            self._widget.invalidate_size()
