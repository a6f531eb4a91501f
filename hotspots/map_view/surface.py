"""Rendering surface for the hex map: camera, mouse events and tile protocols."""

import logging
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Iterator, Protocol

import numpy as np

from hotspots.config import INITIAL_MAP_VIEW_STATE, MAP_CONTAINER_SIZE, MAX_MAP_ZOOM, MIN_MAP_ZOOM
from hotspots.map_view.geometry import BoundingBox

logger = logging.getLogger(__name__)

TILE_SIZE = 512  # MapLibre vector tile size in pixels
MAX_MERCATOR_LAT = 85.0511287798

HEXES_LAYER_ID = "hexes_layer"
DRONE_RADARS_LAYER_ID = "drone_radars"
INTERACTIVE_LAYER_IDS = (HEXES_LAYER_ID, DRONE_RADARS_LAYER_ID)

# Surface event names
LOAD = "load"
CLICK = "click"
MOUSE_ENTER = "mouseenter"
MOUSE_LEAVE = "mouseleave"


@dataclass(frozen=True)
class FeatureHit:
    """One rendered feature under the pointer."""

    layer_id: str
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MapMouseEvent:
    """Pointer event with the matched features, topmost first."""

    features: tuple[FeatureHit, ...] = ()
    lng_lat: tuple[float, float] | None = None


@dataclass(frozen=True)
class CameraTransition:
    """A single fly-to request."""

    center: tuple[float, float]  # (lat, lng)
    zoom: float


class MapSurface(Protocol):
    """What the map view needs from a rendering surface."""

    @property
    def loaded(self) -> bool: ...

    def get_zoom(self) -> float: ...

    def get_bounds(self) -> BoundingBox: ...

    def fly_to(self, center: tuple[float, float], zoom: float) -> None: ...


class PlotlyMapSurface:
    """
    Rendering surface backing a plotly map figure.

    Tracks the camera (center, zoom, pixel size) and derives the visible
    bounds with Web Mercator math, the way MapLibre does for 512 px tiles.
    Camera moves are fire-and-forget: fly_to() records the transition and
    jumps straight to the target.
    """

    def __init__(
        self,
        center: tuple[float, float] = (INITIAL_MAP_VIEW_STATE["latitude"], INITIAL_MAP_VIEW_STATE["longitude"]),
        zoom: float = INITIAL_MAP_VIEW_STATE["zoom"],
        size: tuple[int, int] = MAP_CONTAINER_SIZE,
        min_zoom: float = MIN_MAP_ZOOM,
        max_zoom: float = MAX_MAP_ZOOM,
        interactive_layer_ids: Iterable[str] = INTERACTIVE_LAYER_IDS,
    ) -> None:
        """
        Initialize the surface.

        Args:
            center: Initial camera center as (lat, lng)
            zoom: Initial zoom level
            size: Container (width, height) in pixels
            min_zoom: Lowest zoom the camera may reach
            max_zoom: Highest zoom the camera may reach
            interactive_layer_ids: Layers whose features are reported in mouse events
        """
        self.min_zoom = min_zoom
        self.max_zoom = max_zoom
        self.size = size
        self.interactive_layer_ids = tuple(interactive_layer_ids)
        self._center = (float(center[0]), float(center[1]))
        self._zoom = self._clamp_zoom(zoom)
        self._loaded = False
        self._hovering = False
        self._handlers: dict[str, list[Callable]] = defaultdict(list)
        self.transitions: list[CameraTransition] = []

    @property
    def loaded(self) -> bool:
        return self._loaded

    def get_zoom(self) -> float:
        return self._zoom

    def get_center(self) -> tuple[float, float]:
        return self._center

    def get_bounds(self) -> BoundingBox:
        """Visible area for the current camera and container size."""
        return compute_bounds(self._center, self._zoom, self.size)

    def fly_to(self, center: tuple[float, float], zoom: float) -> None:
        """Animate the camera to a new center and zoom."""
        transition = CameraTransition(center=(float(center[0]), float(center[1])), zoom=float(zoom))
        self.transitions.append(transition)
        self._center = transition.center
        self._zoom = self._clamp_zoom(transition.zoom)
        logger.info(f"Flying to ({transition.center[0]:.5f}, {transition.center[1]:.5f}) at zoom {self._zoom}")

    def on(self, event_type: str, handler: Callable) -> None:
        """Subscribe to a surface event (load, click, mouseenter, mouseleave)."""
        self._handlers[event_type].append(handler)

    def off(self, event_type: str, handler: Callable) -> None:
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)

    def load(self) -> None:
        """Mark the surface ready and notify load subscribers."""
        if self._loaded:
            return
        self._loaded = True
        logger.debug("Map surface loaded")
        self._fire(LOAD, None)

    def click(self, features: Iterable[FeatureHit], lng_lat: tuple[float, float] | None = None) -> None:
        """Dispatch a pointer click with the features under the pointer."""
        self._fire(CLICK, MapMouseEvent(features=self._interactive(features), lng_lat=lng_lat))

    def hover(self, features: Iterable[FeatureHit]) -> None:
        """Move the pointer over the given features, firing enter/leave on changes."""
        hits = self._interactive(features)
        if hits and not self._hovering:
            self._hovering = True
            self._fire(MOUSE_ENTER, MapMouseEvent(features=hits))
        elif not hits and self._hovering:
            self._hovering = False
            self._fire(MOUSE_LEAVE, MapMouseEvent())

    def _interactive(self, features: Iterable[FeatureHit]) -> tuple[FeatureHit, ...]:
        return tuple(hit for hit in features if hit.layer_id in self.interactive_layer_ids)

    def _fire(self, event_type: str, event: MapMouseEvent | None) -> None:
        """Run every handler; the first failure is re-raised once all have run."""
        error: Exception | None = None
        for handler in list(self._handlers[event_type]):
            try:
                if event is None:
                    handler()
                else:
                    handler(event)
            except Exception as e:
                logger.error(f"{event_type} handler {getattr(handler, '__name__', handler)} failed: {e}")
                if error is None:
                    error = e
        if error is not None:
            raise error

    def _clamp_zoom(self, zoom: float) -> float:
        return float(min(max(zoom, self.min_zoom), self.max_zoom))


def compute_bounds(
    center: tuple[float, float],
    zoom: float,
    size: tuple[int, int],
) -> BoundingBox:
    """
    Compute the visible bounding box of a Web Mercator viewport.

    Args:
        center: Camera center as (lat, lng)
        zoom: Zoom level (world is TILE_SIZE * 2**zoom pixels wide)
        size: Container (width, height) in pixels

    Returns:
        BoundingBox; west > east when the view crosses the antimeridian
    """
    width, height = size
    world = TILE_SIZE * 2.0 ** zoom

    lat = np.clip(center[0], -MAX_MERCATOR_LAT, MAX_MERCATOR_LAT)
    center_x = (center[1] + 180.0) / 360.0 * world
    center_y = (1.0 - np.log(np.tan(np.radians(lat)) + 1.0 / np.cos(np.radians(lat))) / np.pi) / 2.0 * world

    top = np.clip(center_y - height / 2.0, 0.0, world)
    bottom = np.clip(center_y + height / 2.0, 0.0, world)
    north = float(np.degrees(np.arctan(np.sinh(np.pi * (1.0 - 2.0 * top / world)))))
    south = float(np.degrees(np.arctan(np.sinh(np.pi * (1.0 - 2.0 * bottom / world)))))

    if width >= world:
        return BoundingBox(west=-180.0, south=south, east=180.0, north=north)

    west = (center_x - width / 2.0) / world * 360.0 - 180.0
    east = (center_x + width / 2.0) / world * 360.0 - 180.0
    return BoundingBox(west=_wrap_lng(west), south=south, east=_wrap_lng(east), north=north)


def _wrap_lng(lng: float) -> float:
    if -180.0 <= lng <= 180.0:
        return float(lng)
    return float(np.mod(lng + 180.0, 360.0) - 180.0)


class PMTilesProtocol:
    """Resolves pmtiles:// tile requests against the tile archive URL."""

    scheme = "pmtiles"
    tiles_template = "pmtiles://{z}/{x}/{y}"

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def tile(self, url: str) -> str:
        """
        Resolve a protocol URL such as "pmtiles://7/20/49" to an HTTP URL.

        The style template "pmtiles://{z}/{x}/{y}" resolves to the HTTP
        template the same way.

        Raises:
            ValueError: If the URL does not use this protocol or is not z/x/y
        """
        prefix = f"{self.scheme}://"
        if not url.startswith(prefix):
            raise ValueError(f"Not a {self.scheme} URL: {url}")

        parts = url[len(prefix):].strip("/").split("/")
        if len(parts) != 3 or not all(
            part.isdigit() or part == f"{{{name}}}" for part, name in zip(parts, "zxy")
        ):
            raise ValueError(f"Expected {prefix}z/x/y, got: {url}")

        z, x, y = parts
        return f"{self.base_url}/{z}/{x}/{y}.mvt"


# Process-wide protocol handlers, keyed by scheme
_PROTOCOLS: dict[str, Callable[[str], str]] = {}


def add_protocol(name: str, handler: Callable[[str], str]) -> None:
    """Register a tile protocol handler; each scheme can be registered once."""
    if name in _PROTOCOLS:
        raise ValueError(f"Protocol '{name}' is already registered")
    _PROTOCOLS[name] = handler
    logger.debug(f"Registered tile protocol {name}")


def remove_protocol(name: str) -> None:
    if _PROTOCOLS.pop(name, None) is not None:
        logger.debug(f"Removed tile protocol {name}")


def registered_protocols() -> tuple[str, ...]:
    return tuple(_PROTOCOLS)


def resolve_tile(url: str) -> str:
    """Resolve a tile URL through its registered protocol handler."""
    scheme = url.split("://", 1)[0]
    if scheme not in _PROTOCOLS:
        raise ValueError(f"No protocol registered for {url}")
    return _PROTOCOLS[scheme](url)


@contextmanager
def tile_protocol(protocol: PMTilesProtocol) -> Iterator[PMTilesProtocol]:
    """Register a protocol for the duration of the block."""
    add_protocol(protocol.scheme, protocol.tile)
    try:
        yield protocol
    finally:
        remove_protocol(protocol.scheme)
