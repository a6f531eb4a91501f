"""Hotspots Map View - hex selection kept in step with navigation and camera."""

from hotspots.map_view.navigation import Router
from hotspots.map_view.selection import Selection, SelectionHolder
from hotspots.map_view.surface import FeatureHit, MapMouseEvent, PlotlyMapSurface
from hotspots.map_view.synchronizer import LocationSynchronizer
from hotspots.map_view.view import HexMapView
from hotspots.map_view.viewport import ViewportDirector, ZOOM_BY_HEX_RESOLUTION

__all__ = [
    "Router",
    "Selection",
    "SelectionHolder",
    "FeatureHit",
    "MapMouseEvent",
    "PlotlyMapSurface",
    "LocationSynchronizer",
    "HexMapView",
    "ViewportDirector",
    "ZOOM_BY_HEX_RESOLUTION",
]
