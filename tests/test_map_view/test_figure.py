"""Tests for the plotly figure built from a map view."""

from unittest.mock import MagicMock

import plotly.graph_objects as go

from hotspots.map_view.figure import create_figure, export_html
from hotspots.map_view.markers import generate_mock_drones
from hotspots.map_view.navigation import Router, hex_path
from hotspots.map_view.surface import PlotlyMapSurface
from hotspots.map_view.view import HexMapView


class TestCreateFigure:
    """Tests for create_figure."""

    def test_camera_matches_surface(self, router):
        surface = PlotlyMapSurface(center=(10.0, 20.0), zoom=4, size=(900, 600))
        fig = create_figure(HexMapView(router, surface=surface))

        assert fig.layout.map.center.lat == 10.0
        assert fig.layout.map.center.lon == 20.0
        assert fig.layout.map.zoom == 4.0
        assert fig.layout.width == 900
        assert fig.layout.height == 600

    def test_default_title_is_path(self, sample_hex):
        fig = create_figure(HexMapView(Router(hex_path(sample_hex))))
        assert fig.layout.title.text == f"Hotspots: {hex_path(sample_hex)}"

    def test_no_drones_no_traces(self, router):
        fig = create_figure(HexMapView(router))
        assert len(fig.data) == 0

    def test_drone_trace(self, router):
        drones = generate_mock_drones(5, seed=1)
        fig = create_figure(HexMapView(router, drones=drones))

        trace = fig.data[0]
        assert isinstance(trace, go.Scattermap)
        assert list(trace.customdata) == [drone.id for drone in drones]
        assert list(trace.lat) == [drone.lat for drone in drones]

    def test_selection_layer_rendered(self, sample_hex):
        surface = PlotlyMapSurface()
        router = Router(hex_path(sample_hex))
        with HexMapView(router, surface=surface) as view:
            surface.load()
            fig = create_figure(view, title="Selected")

        assert fig.layout.title.text == "Selected"
        assert len(fig.layout.map.layers) == 2
        assert fig.layout.map.zoom == 12.0

    def test_child_traces_added(self, router):
        child = MagicMock()
        child.layers.return_value = []
        child.traces.return_value = [go.Scattermap(lat=[1.0], lon=[2.0], name="child")]
        view = HexMapView(router)
        view.add_child(child)

        fig = create_figure(view)

        assert [trace.name for trace in fig.data] == ["child"]


class TestExportHtml:
    """Tests for export_html."""

    def test_writes_standalone_html(self):
        fig = MagicMock()
        export_html(fig, "out.html")
        fig.write_html.assert_called_once_with("out.html", include_plotlyjs=True, full_html=True)

    def test_real_figure_to_file(self, router, tmp_path):
        fig = create_figure(HexMapView(router))
        output = tmp_path / "map.html"

        export_html(fig, str(output))

        assert output.exists()
        assert "<html>" in output.read_text(encoding="utf-8")
