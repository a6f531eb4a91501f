"""
Shared pytest fixtures for hotspots map tests.

This module provides reusable fixtures that are automatically discovered
by pytest. Fixtures here are available to all test files.

Notes:
- SAMPLE_HEX is a real resolution 8 cell, so geometry comes from h3 itself
- mock_surface stands in for the rendering surface when only the camera
  calls matter; tests that need real camera math use PlotlyMapSurface
- Tile protocols are process-wide, so the registry is reset around each test
"""

import h3
import pytest
from unittest.mock import MagicMock

from hotspots.map_view import surface as surface_module
from hotspots.map_view.geometry import BoundingBox
from hotspots.map_view.navigation import Router

SAMPLE_HEX = "882830829bfffff"
SAMPLE_RESOLUTION = 8


@pytest.fixture(autouse=True)
def reset_tile_protocols():
    """Make sure no tile protocol leaks from one test into the next."""
    surface_module._PROTOCOLS.clear()
    yield
    surface_module._PROTOCOLS.clear()


@pytest.fixture
def sample_hex() -> str:
    return SAMPLE_HEX


@pytest.fixture
def sample_center() -> tuple[float, float]:
    """(lat, lng) center of SAMPLE_HEX as reported by h3."""
    lat, lng = h3.cell_to_latlng(SAMPLE_HEX)
    return lat, lng


@pytest.fixture
def neighbor_hex() -> str:
    """A hex adjacent to SAMPLE_HEX, same resolution."""
    return sorted(h3.grid_ring(SAMPLE_HEX, 1))[0]


@pytest.fixture
def bounds_around_sample(sample_center) -> BoundingBox:
    """Small box with SAMPLE_HEX's center inside it."""
    lat, lng = sample_center
    return BoundingBox(west=lng - 0.5, south=lat - 0.5, east=lng + 0.5, north=lat + 0.5)


@pytest.fixture
def far_away_bounds() -> BoundingBox:
    """Box over eastern Australia, nowhere near SAMPLE_HEX."""
    return BoundingBox(west=140.0, south=-40.0, east=160.0, north=-20.0)


@pytest.fixture
def mock_surface(far_away_bounds) -> MagicMock:
    """
    Create a loaded mock rendering surface.

    Starts at zoom 2 looking at far_away_bounds, so selecting SAMPLE_HEX
    always moves the camera unless a test changes these values.
    """
    surface = MagicMock()
    surface.loaded = True
    surface.get_zoom.return_value = 2.0
    surface.get_bounds.return_value = far_away_bounds
    return surface


@pytest.fixture
def router() -> Router:
    return Router()
