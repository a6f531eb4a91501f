"""H3 hex geometry helpers and viewport bounding boxes."""

from dataclasses import dataclass
from typing import Iterable

import h3

# GeoJSON MultiPolygon: polygons -> rings -> [lng, lat] positions
MultiPolygonCoords = list[list[list[list[float]]]]


class InvalidHexError(ValueError):
    """Raised when a string is not a valid H3 cell identifier."""


@dataclass(frozen=True)
class BoundingBox:
    """
    Geographic bounding box in degrees.

    When west > east the box crosses the antimeridian.
    """

    west: float
    south: float
    east: float
    north: float

    def contains(self, lat: float, lng: float) -> bool:
        """Check whether a (lat, lng) point lies inside the box (edges inclusive)."""
        if not self.south <= lat <= self.north:
            return False
        if self.west <= self.east:
            return self.west <= lng <= self.east
        return lng >= self.west or lng <= self.east


def _require_cell(hex_id: str) -> str:
    if not isinstance(hex_id, str) or not h3.is_valid_cell(hex_id):
        raise InvalidHexError(f"Invalid hex id: {hex_id!r}")
    return hex_id


def hex_center(hex_id: str) -> tuple[float, float]:
    """
    Get the center of a hex.

    Args:
        hex_id: H3 cell identifier (e.g., "882830829bfffff")

    Returns:
        Tuple of (lat, lng)

    Raises:
        InvalidHexError: If hex_id is not a valid cell
    """
    lat, lng = h3.cell_to_latlng(_require_cell(hex_id))
    return float(lat), float(lng)


def hex_resolution(hex_id: str) -> int:
    """Get the H3 resolution (0 = coarsest, 15 = finest) of a hex."""
    return int(h3.get_resolution(_require_cell(hex_id)))


def hex_boundary(hex_id: str) -> list[tuple[float, float]]:
    """Get the outline vertices of a single hex as (lat, lng) pairs."""
    return [(float(lat), float(lng)) for lat, lng in h3.cell_to_boundary(_require_cell(hex_id))]


def hexes_to_multipolygon(hex_ids: Iterable[str]) -> dict:
    """
    Union a set of hexes into one GeoJSON MultiPolygon.

    The result is always a MultiPolygon, even for a single hex, so the
    outline layer only ever deals with one geometry type. Rings are
    closed and positions are [lng, lat] as GeoJSON requires.

    Args:
        hex_ids: H3 cell identifiers

    Returns:
        GeoJSON geometry dict with type "MultiPolygon"

    Raises:
        InvalidHexError: If any identifier is not a valid cell
    """
    cells = sorted({_require_cell(hex_id) for hex_id in hex_ids})
    if not cells:
        return {"type": "MultiPolygon", "coordinates": []}

    geo = h3.cells_to_geo(cells, tight=False)
    coordinates = geo["coordinates"]
    if geo["type"] == "Polygon":
        coordinates = [coordinates]

    return {
        "type": "MultiPolygon",
        "coordinates": _to_lists(coordinates),
    }


def _to_lists(coordinates) -> MultiPolygonCoords:
    """Convert nested coordinate tuples into plain lists of floats."""
    return [
        [[[float(lng), float(lat)] for lng, lat in ring] for ring in polygon]
        for polygon in coordinates
    ]
