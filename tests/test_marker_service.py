"""지도 마커 테스트.

Map marker tests — full-replace reconciliation, transient markers and the
widget lifecycle.
"""

from civicconnect.config import settings
from civicconnect.schemas.issue import GeoPoint
from civicconnect.seed import SEED_ISSUES
from civicconnect.services.marker_service import (
    AMBER,
    InMemoryMapWidget,
    MapSession,
    MarkerReconciler,
    MarkerTag,
    marker_label,
    marker_style,
)
from tests.conftest import make_record


def _widget() -> InMemoryMapWidget:
    return InMemoryMapWidget("map", GeoPoint(lat=0, lng=0), 13)


def _issue_markers(widget: InMemoryMapWidget) -> list[str]:
    return sorted(
        style.issue_id for _, style in widget.markers.values() if style.tag is MarkerTag.ISSUE
    )


class TestMarkerStyle:

    def test_status_colors(self):
        assert marker_style(make_record("issue-1", status="reported")).color == AMBER
        assert marker_style(make_record("issue-1", status="inProgress")).color == "#EF4444"
        assert marker_style(make_record("issue-1", status="resolved")).color == "#10B981"

    def test_label_is_escaped(self):
        record = make_record("issue-1", title="<script>x</script>", owner_label="A & B")
        label = marker_label(record)
        assert "<script>" not in label
        assert "&lt;script&gt;" in label
        assert "A &amp; B" in label


class TestMarkerReconciler:

    def test_one_marker_per_located_record(self):
        widget = _widget()
        reconciler = MarkerReconciler(widget)
        records = list(SEED_ISSUES) + [make_record("issue-1", location=None)]
        reconciler.reconcile(records)

        assert _issue_markers(widget) == ["demo-1", "demo-2", "demo-3"]
        assert reconciler.placed_issue_ids == {"demo-1", "demo-2", "demo-3"}

    def test_reconcile_replaces_previous_markers(self):
        widget = _widget()
        reconciler = MarkerReconciler(widget)
        reconciler.reconcile(SEED_ISSUES)
        reconciler.reconcile([SEED_ISSUES[2]])
        assert _issue_markers(widget) == ["demo-3"]

    def test_empty_list_clears_markers(self):
        widget = _widget()
        reconciler = MarkerReconciler(widget)
        reconciler.reconcile(SEED_ISSUES)
        reconciler.reconcile([])
        assert widget.markers == {}

    def test_reconcile_before_bind_paints_on_bind(self):
        """위젯 없이 호출하면 기억했다가 바인딩 시 표시."""
        reconciler = MarkerReconciler()
        reconciler.reconcile(SEED_ISSUES)
        widget = _widget()
        reconciler.bind(widget)
        assert _issue_markers(widget) == ["demo-1", "demo-2", "demo-3"]

    def test_transient_markers_untouched(self):
        widget = _widget()
        session = MapSession(factory=lambda *_: widget).open()
        session.select_location(GeoPoint(lat=1, lng=1))
        session.reconciler.reconcile([])

        tags = [style.tag for _, style in widget.markers.values()]
        assert tags == [MarkerTag.CLICK_TARGET]


class TestMapSession:

    def test_open_creates_widget_with_defaults(self):
        session = MapSession(dark_mode=False).open()
        widget = session.widget
        assert widget.center == GeoPoint(lat=settings.MAP_DEFAULT_LAT, lng=settings.MAP_DEFAULT_LNG)
        assert widget.zoom == settings.MAP_DEFAULT_ZOOM
        assert widget.tile_layers == [(settings.MAP_TILE_URL, settings.MAP_TILE_ATTRIBUTION)]
        session.close()

    def test_dark_mode_selects_dark_tiles(self):
        with MapSession(dark_mode=True) as session:
            assert session.widget.tile_layers[0][0] == settings.MAP_DARK_TILE_URL

    def test_close_destroys_once(self):
        session = MapSession().open()
        widget = session.widget
        session.close()
        session.close()
        assert widget.destroyed is True
        assert session.is_open is False

    def test_click_selects_location(self):
        session = MapSession().open()
        point = GeoPoint(lat=28.65, lng=77.23)
        session.widget.click(point)
        session.widget.click(GeoPoint(lat=28.66, lng=77.24))

        assert session.selected_location == GeoPoint(lat=28.66, lng=77.24)
        click_markers = [
            style for _, style in session.widget.markers.values()
            if style.tag is MarkerTag.CLICK_TARGET
        ]
        assert len(click_markers) == 1

        session.clear_selection()
        assert session.selected_location is None
        session.close()

    def test_show_current_location(self):
        session = MapSession().open()
        point = GeoPoint(lat=19.07, lng=72.87)
        session.show_current_location(point)
        assert session.widget.center == point
        assert session.widget.zoom == settings.MAP_LOCATE_ZOOM
        session.close()

    def test_focus(self):
        session = MapSession()
        assert session.focus(SEED_ISSUES[0]) is False
        session.open()
        assert session.focus(SEED_ISSUES[0]) is True
        assert session.widget.zoom == settings.MAP_FOCUS_ZOOM
        assert session.focus(make_record("issue-1", location=None)) is False
        session.close()

    def test_reopen_repaints_pending_list(self):
        session = MapSession().open()
        session.reconciler.reconcile(SEED_ISSUES)
        session.close()
        session.open()
        assert _issue_markers(session.widget) == ["demo-1", "demo-2", "demo-3"]
        session.close()
