"""Map style and overlay layer definitions."""

from hotspots.config import MapSettings
from hotspots.map_view.selection import Selection
from hotspots.map_view.surface import HEXES_LAYER_ID

BASE_SOURCE = "protomaps"

# Base map layers (MapLibre style format), drawn below every overlay
MAP_LAYERS_LIGHT = [
    {"id": "background", "type": "background", "paint": {"background-color": "#f4f4f2"}},
    {"id": "earth", "type": "fill", "source": BASE_SOURCE, "source-layer": "earth",
     "paint": {"fill-color": "#e8e8e3"}},
    {"id": "water", "type": "fill", "source": BASE_SOURCE, "source-layer": "water",
     "paint": {"fill-color": "#a8c8e0"}},
    {"id": "roads", "type": "line", "source": BASE_SOURCE, "source-layer": "roads",
     "paint": {"line-color": "#ffffff", "line-width": 1}},
    {"id": "boundaries", "type": "line", "source": BASE_SOURCE, "source-layer": "boundaries",
     "paint": {"line-color": "#9e9cab", "line-width": 0.8, "line-dasharray": [3, 2]}},
    {"id": "places", "type": "symbol", "source": BASE_SOURCE, "source-layer": "places",
     "layout": {"text-field": ["get", "name"], "text-font": ["NotoSans-Regular"], "text-size": 12},
     "paint": {"text-color": "#5c5c5c"}},
]

MAP_LAYERS_DARK = [
    {"id": "background", "type": "background", "paint": {"background-color": "#1f1f1f"}},
    {"id": "earth", "type": "fill", "source": BASE_SOURCE, "source-layer": "earth",
     "paint": {"fill-color": "#2b2b2b"}},
    {"id": "water", "type": "fill", "source": BASE_SOURCE, "source-layer": "water",
     "paint": {"fill-color": "#12212e"}},
    {"id": "roads", "type": "line", "source": BASE_SOURCE, "source-layer": "roads",
     "paint": {"line-color": "#3d3d3d", "line-width": 1}},
    {"id": "boundaries", "type": "line", "source": BASE_SOURCE, "source-layer": "boundaries",
     "paint": {"line-color": "#707070", "line-width": 0.8, "line-dasharray": [3, 2]}},
    {"id": "places", "type": "symbol", "source": BASE_SOURCE, "source-layer": "places",
     "layout": {"text-field": ["get", "name"], "text-font": ["NotoSans-Regular"], "text-size": 12},
     "paint": {"text-color": "#b0b0b0"}},
]

# Coverage networks rendered as hex tiles
NETWORK_LAYERS = {
    "iot": {"name": "IoT", "source_layer": "hexes", "color": "#009fff", "opacity": 0.35},
    "mobile": {"name": "Mobile", "source_layer": "hexes", "color": "#d05af4", "opacity": 0.35},
}

DRONE_STATUS_COLORS = {"active": "#00ff00", "inactive": "#ff0000"}
DRONE_DEFAULT_COLOR = "#cccccc"
DRONE_MIN_RADIUS = 5
DRONE_MAX_RADIUS = 20


def build_map_style(settings: MapSettings, tiles_url: str | None = None) -> dict:
    """
    Build the MapLibre style descriptor for the configured theme.

    Args:
        settings: Map settings (theme, tile archive and glyphs URLs)
        tiles_url: Tile URL template; defaults to settings.tiles_url
    """
    return {
        "version": 8,
        "sources": {
            BASE_SOURCE: {
                "type": "vector",
                "tiles": [tiles_url or settings.tiles_url],
            },
        },
        "glyphs": settings.glyphs_url,
        "layers": MAP_LAYERS_DARK if settings.theme == "dark" else MAP_LAYERS_LIGHT,
    }


def get_hex_outline_style(theme: str) -> dict:
    """Line style for the selected hex outline."""
    return {
        "line-color": "#ffffff" if theme == "dark" else "#000000",
        "line-width": 3,
    }


def drone_radar_color(status: str) -> str:
    return DRONE_STATUS_COLORS.get(status, DRONE_DEFAULT_COLOR)


def drone_radar_radius(concentration: float) -> float:
    """Interpolate marker radius linearly from concentration (0..1)."""
    clamped = min(max(concentration, 0.0), 1.0)
    return DRONE_MIN_RADIUS + (DRONE_MAX_RADIUS - DRONE_MIN_RADIUS) * clamped


def network_coverage_layer(settings: MapSettings, network: str = "iot") -> dict:
    """
    Plotly map layer for a network coverage hex tileset.

    The layer carries the selectable hex layer id.

    Raises:
        KeyError: If the network is unknown
    """
    network_layer = NETWORK_LAYERS[network]
    return {
        "name": HEXES_LAYER_ID,
        "sourcetype": "vector",
        "source": [f"{settings.pmtiles_url.rstrip('/')}/{network}/{{z}}/{{x}}/{{y}}.mvt"],
        "sourcelayer": network_layer["source_layer"],
        "type": "fill",
        "color": network_layer["color"],
        "opacity": network_layer["opacity"],
        "below": "traces",
    }


def selected_hex_layer(selection: Selection, theme: str) -> dict:
    """Plotly map layer drawing the outline of the selected hex."""
    style = get_hex_outline_style(theme)
    return {
        "name": "selected_hex",
        "sourcetype": "geojson",
        "source": {
            "type": "Feature",
            "properties": {"id": selection.hex_id},
            "geometry": selection.outline,
        },
        "type": "line",
        "color": style["line-color"],
        "line": {"width": style["line-width"]},
    }
