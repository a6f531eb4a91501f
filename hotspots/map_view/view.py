"""Hex map view: selection, navigation and camera wired to a rendering surface."""

import logging
from contextlib import ExitStack
from typing import Any, Callable, Iterable, Mapping, Protocol

from hotspots.config import MapSettings
from hotspots.map_view.layers import build_map_style, network_coverage_layer, selected_hex_layer
from hotspots.map_view.markers import DroneRadar
from hotspots.map_view.navigation import Router
from hotspots.map_view.selection import Selection, SelectionHolder
from hotspots.map_view.surface import (
    CLICK,
    LOAD,
    MOUSE_ENTER,
    MOUSE_LEAVE,
    MapMouseEvent,
    PlotlyMapSurface,
    PMTilesProtocol,
    resolve_tile,
    tile_protocol,
)
from hotspots.map_view.synchronizer import LocationSynchronizer, inspect_drone_radar_click
from hotspots.map_view.viewport import ZOOM_BY_HEX_RESOLUTION, ViewportDirector

logger = logging.getLogger(__name__)

# Coverage is hidden on the mobile section of the app
MOBILE_SEGMENT = "mobile"


class Overlay(Protocol):
    """
    Child content drawn on top of the map.

    layers() returns plotly map layers; an overlay may also define
    traces(view) returning plotly traces.
    """

    def layers(self, view: "HexMapView") -> list[dict]: ...


class HexMapView:
    """
    Interactive hex map component.

    Owns the selected hex and keeps it in step with the router location.
    Use as a context manager (or call open()/close()) so the tile
    protocol and event subscriptions are released on teardown.

    Example:
        router = Router("/hex/882830829bfffff")
        with HexMapView(router) as view:
            view.surface.load()
            view.selection.hex_id  # "882830829bfffff"
    """

    def __init__(
        self,
        router: Router,
        surface: PlotlyMapSurface | None = None,
        settings: MapSettings | None = None,
        drones: Iterable[DroneRadar] = (),
        telemetry: Callable[[dict[str, Any]], None] | None = None,
        zoom_by_resolution: Mapping[int, float] = ZOOM_BY_HEX_RESOLUTION,
    ) -> None:
        """
        Initialize the view.

        Args:
            router: Location provider driving the selection
            surface: Rendering surface (defaults to a PlotlyMapSurface)
            settings: Map settings (defaults to MapSettings())
            drones: Drone radar markers to draw
            telemetry: Optional callback receiving analytics events
            zoom_by_resolution: Target zoom per hex resolution
        """
        self.router = router
        self.surface = surface or PlotlyMapSurface()
        self.settings = settings or MapSettings()
        self.drones = list(drones)
        self.telemetry = telemetry
        self.holder = SelectionHolder()
        self.director = ViewportDirector(self.surface, zoom_by_resolution)
        self.synchronizer = LocationSynchronizer(self.holder, router, self.surface, self.director)
        self.children: list[Overlay] = []
        self.cursor = ""
        self._stack: ExitStack | None = None

    @property
    def selection(self) -> Selection | None:
        return self.holder.selection

    @property
    def is_open(self) -> bool:
        return self._stack is not None

    @property
    def show_network_coverage(self) -> bool:
        segments = self.router.segments
        return not segments or segments[0] != MOBILE_SEGMENT

    def add_child(self, overlay: Overlay) -> Overlay:
        """Add a child overlay; returns it for chaining."""
        self.children.append(overlay)
        return overlay

    def open(self) -> "HexMapView":
        """Register the tile protocol and subscribe to router and surface events."""
        if self._stack is not None:
            return self

        stack = ExitStack()
        try:
            stack.enter_context(tile_protocol(PMTilesProtocol(self.settings.pmtiles_url)))
            stack.callback(self.router.subscribe(self._on_path_change))
            for event_type, handler in (
                (LOAD, self._on_load),
                (CLICK, self.synchronizer.on_hex_click),
                (CLICK, self._on_drone_radar_click),
                (MOUSE_ENTER, self._on_mouse_enter),
                (MOUSE_LEAVE, self._on_mouse_leave),
            ):
                self.surface.on(event_type, handler)
                stack.callback(self.surface.off, event_type, handler)
        except Exception:
            stack.close()
            raise

        self._stack = stack
        logger.info(f"Map view opened at {self.router.path}")
        if self.telemetry is not None:
            self.telemetry({"action": "map_load"})
        if self.surface.loaded:
            self.synchronizer.sync()
        return self

    def close(self) -> None:
        """Release the tile protocol and event subscriptions."""
        if self._stack is None:
            return
        stack, self._stack = self._stack, None
        stack.close()
        logger.info("Map view closed")

    def __enter__(self) -> "HexMapView":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    def map_style(self) -> dict:
        """MapLibre style; while open, base tiles resolve through the pmtiles protocol."""
        tiles_url = resolve_tile(PMTilesProtocol.tiles_template) if self.is_open else None
        return build_map_style(self.settings, tiles_url=tiles_url)

    def overlay_layers(self) -> list[dict]:
        """Map layers drawn over the base style, bottom to top."""
        layers = []
        if self.show_network_coverage:
            layers.append(network_coverage_layer(self.settings))
        for child in self.children:
            if hasattr(child, "layers"):
                layers.extend(child.layers(self))
        if self.selection is not None:
            layers.append(selected_hex_layer(self.selection, self.settings.theme))
        return layers

    def _on_load(self) -> None:
        self.synchronizer.sync()

    def _on_path_change(self, path: str) -> None:
        self.synchronizer.sync(path)

    def _on_drone_radar_click(self, event: MapMouseEvent) -> None:
        inspect_drone_radar_click(event)

    def _on_mouse_enter(self, event: MapMouseEvent) -> None:
        self.cursor = "pointer"

    def _on_mouse_leave(self, event: MapMouseEvent) -> None:
        self.cursor = ""
