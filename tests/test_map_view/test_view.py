"""
Tests for HexMapView, end to end on a real PlotlyMapSurface.

These cover the wiring: router and surface events reach the
synchronizer, the camera moves through the surface, and teardown
releases the tile protocol.
"""

import logging

import pytest
from unittest.mock import MagicMock

from hotspots.config import MapSettings
from hotspots.map_view.geometry import InvalidHexError, hex_center
from hotspots.map_view.navigation import Router, hex_path
from hotspots.map_view.surface import (
    DRONE_RADARS_LAYER_ID,
    HEXES_LAYER_ID,
    CameraTransition,
    FeatureHit,
    PlotlyMapSurface,
    registered_protocols,
)
from hotspots.map_view.view import HexMapView

# Camera over Sydney, far from the sample hex
SYDNEY = (-33.86, 151.21)


@pytest.fixture
def surface() -> PlotlyMapSurface:
    return PlotlyMapSurface(center=SYDNEY, zoom=2)


class TestLifecycle:
    """Tests for open/close and the tile protocol."""

    def test_context_manager_registers_protocol(self, router, surface):
        with HexMapView(router, surface=surface) as view:
            assert view.is_open is True
            assert registered_protocols() == ("pmtiles",)

        assert view.is_open is False
        assert registered_protocols() == ()

    def test_open_twice_is_harmless(self, router, surface):
        view = HexMapView(router, surface=surface)
        view.open()
        view.open()
        view.close()
        view.close()
        assert registered_protocols() == ()

    def test_second_view_cannot_share_protocol(self, surface):
        """Two open views would register pmtiles twice."""
        with HexMapView(Router(), surface=surface):
            with pytest.raises(ValueError):
                HexMapView(Router(), surface=PlotlyMapSurface()).open()

    def test_failed_open_releases_everything(self, surface):
        """A failed open leaves no subscriptions behind."""
        with HexMapView(Router(), surface=surface):
            other_router = Router()
            other = HexMapView(other_router, surface=PlotlyMapSurface())
            with pytest.raises(ValueError):
                other.open()
            assert other.is_open is False

    def test_telemetry_on_open(self, router, surface):
        telemetry = MagicMock()
        with HexMapView(router, surface=surface, telemetry=telemetry):
            pass
        telemetry.assert_called_once_with({"action": "map_load"})

    def test_close_stops_listening(self, router, surface, sample_hex):
        view = HexMapView(router, surface=surface)
        with view:
            surface.load()

        router.push(hex_path(sample_hex))

        assert view.selection is None


class TestSelectionFlow:
    """Tests for path-driven selection through the whole view."""

    def test_example_scenario(self, surface, sample_hex):
        """Hex path at res 8, zoomed out far away: one fly-to at zoom 12."""
        router = Router(hex_path(sample_hex))
        with HexMapView(router, surface=surface) as view:
            surface.load()

            assert view.selection.hex_id == sample_hex
            assert surface.transitions == [CameraTransition(center=hex_center(sample_hex), zoom=12.0)]

    def test_path_before_load_waits_for_load(self, router, surface, sample_hex):
        with HexMapView(router, surface=surface) as view:
            router.push(hex_path(sample_hex))
            assert view.selection is None

            surface.load()
            assert view.selection.hex_id == sample_hex

    def test_open_on_loaded_surface_syncs(self, surface, sample_hex):
        surface.load()
        with HexMapView(Router(hex_path(sample_hex)), surface=surface) as view:
            assert view.selection.hex_id == sample_hex

    def test_nearby_hex_does_not_move_camera(self, router, surface, sample_hex, neighbor_hex):
        """After flying to a hex, selecting its neighbour keeps the camera."""
        with HexMapView(router, surface=surface) as view:
            surface.load()
            router.push(hex_path(sample_hex))
            router.push(hex_path(neighbor_hex))

            assert view.selection.hex_id == neighbor_hex
            assert len(surface.transitions) == 1

    def test_round_trip(self, router, surface, sample_hex):
        with HexMapView(router, surface=surface) as view:
            surface.load()
            router.push(hex_path(sample_hex))
            outline = view.selection.outline

            router.push("/")
            assert view.selection is None

            router.push(hex_path(sample_hex))
            assert view.selection.outline is outline
            assert surface.get_zoom() == 12.0
            assert len(surface.transitions) == 1


class TestClicks:
    """Tests for clicks dispatched by the surface."""

    def test_click_hex_then_toggle_off(self, router, surface, sample_hex):
        with HexMapView(router, surface=surface) as view:
            surface.load()

            surface.click([FeatureHit(HEXES_LAYER_ID, {"id": sample_hex})])
            assert router.path == hex_path(sample_hex)
            assert view.selection.hex_id == sample_hex

            surface.click([FeatureHit(HEXES_LAYER_ID, {"id": sample_hex})])
            assert router.path == "/"
            assert view.selection is None

    def test_radar_click_is_read_only(self, router, surface, sample_hex):
        with HexMapView(router, surface=surface) as view:
            surface.load()
            router.push(hex_path(sample_hex))

            surface.click([FeatureHit(DRONE_RADARS_LAYER_ID, {"id": "drone-3", "status": "inactive"})])

            assert router.path == hex_path(sample_hex)
            assert view.selection.hex_id == sample_hex

    def test_stacked_hits_only_hex_counts(self, router, surface, sample_hex):
        with HexMapView(router, surface=surface) as view:
            surface.load()

            surface.click([
                FeatureHit(DRONE_RADARS_LAYER_ID, {"id": "drone-3"}),
                FeatureHit(HEXES_LAYER_ID, {"id": sample_hex}),
            ])

            assert router.history == ["/", hex_path(sample_hex)]
            assert view.selection.hex_id == sample_hex

    def test_bad_hex_hit_does_not_block_radar_inspection(self, router, surface, caplog):
        """A malformed hex hit fails, but the radar hit of the same click is still inspected."""
        with HexMapView(router, surface=surface) as view:
            surface.load()

            with caplog.at_level(logging.INFO, logger="hotspots.map_view"):
                with pytest.raises(InvalidHexError):
                    surface.click([
                        FeatureHit(HEXES_LAYER_ID, {"id": "bad"}),
                        FeatureHit(DRONE_RADARS_LAYER_ID, {"id": "drone-1"}),
                    ])

            assert "Drone Radar ID: drone-1" in caplog.text
            assert view.selection is None

    def test_cursor_follows_hover(self, router, surface, sample_hex):
        with HexMapView(router, surface=surface) as view:
            surface.hover([FeatureHit(HEXES_LAYER_ID, {"id": sample_hex})])
            assert view.cursor == "pointer"

            surface.hover([])
            assert view.cursor == ""


class TestOverlayLayers:
    """Tests for the layers drawn over the base style."""

    def test_coverage_layer_on_home(self, router, surface):
        view = HexMapView(router, surface=surface)
        assert [layer["name"] for layer in view.overlay_layers()] == [HEXES_LAYER_ID]

    def test_coverage_hidden_on_mobile(self, surface):
        view = HexMapView(Router("/mobile"), surface=surface)
        assert view.show_network_coverage is False
        assert view.overlay_layers() == []

    def test_selected_outline_on_top(self, router, surface, sample_hex):
        with HexMapView(router, surface=surface) as view:
            surface.load()
            router.push(hex_path(sample_hex))

            layers = view.overlay_layers()

        assert layers[-1]["name"] == "selected_hex"
        assert layers[-1]["source"]["geometry"] == view.selection.outline

    def test_children_between_coverage_and_outline(self, router, surface, sample_hex):
        child = MagicMock()
        child.layers.return_value = [{"name": "child"}]

        with HexMapView(router, surface=surface) as view:
            view.add_child(child)
            surface.load()
            router.push(hex_path(sample_hex))
            names = [layer["name"] for layer in view.overlay_layers()]

        assert names == [HEXES_LAYER_ID, "child", "selected_hex"]
        child.layers.assert_called_with(view)

    def test_dark_theme_style(self, router, surface):
        view = HexMapView(router, surface=surface, settings=MapSettings(theme="dark"))
        style = view.map_style()
        assert style["layers"][0]["paint"]["background-color"] == "#1f1f1f"

    def test_open_view_resolves_tiles_through_protocol(self, router, surface):
        """Base tiles go through the registered pmtiles handler while open."""
        settings = MapSettings(pmtiles_url="https://tiles.example.com/base")
        view = HexMapView(router, surface=surface, settings=settings)

        with view:
            tiles = view.map_style()["sources"]["protomaps"]["tiles"]

        assert tiles == ["https://tiles.example.com/base/{z}/{x}/{y}.mvt"]
        assert view.map_style()["sources"]["protomaps"]["tiles"] == [settings.tiles_url]
