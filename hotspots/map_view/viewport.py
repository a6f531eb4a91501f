"""Camera decisions for a newly selected hex."""

import logging
from typing import Mapping

from hotspots.map_view.geometry import BoundingBox, hex_center, hex_resolution
from hotspots.map_view.surface import CameraTransition, MapSurface

logger = logging.getLogger(__name__)

# Target camera zoom for each H3 resolution (coarse cells -> low zoom)
ZOOM_BY_HEX_RESOLUTION: dict[int, float] = {
    0: 1,
    1: 2,
    2: 3,
    3: 5,
    4: 6,
    5: 7,
    6: 8,
    7: 10,
    8: 12,
    9: 13,
    10: 14,
    11: 15,
    12: 16,
    13: 17,
    14: 18,
    15: 18,
}

# The camera only moves when it is more than this many levels too far out
MAX_ZOOM_GAP = 3


class UnknownResolutionError(KeyError):
    """Raised when no target zoom is configured for a hex resolution."""


def zoom_for_resolution(
    resolution: int,
    zoom_by_resolution: Mapping[int, float] = ZOOM_BY_HEX_RESOLUTION,
) -> float:
    """
    Look up the target zoom for a hex resolution.

    Raises:
        UnknownResolutionError: If the table has no entry for the resolution
    """
    try:
        return float(zoom_by_resolution[resolution])
    except KeyError:
        raise UnknownResolutionError(f"No zoom configured for hex resolution {resolution}") from None


def should_fly_to(
    current_zoom: float,
    target_zoom: float,
    bounds: BoundingBox,
    center: tuple[float, float],
) -> bool:
    """
    Decide whether the camera has to move to show a hex.

    Moves when the camera is zoomed out by more than MAX_ZOOM_GAP levels,
    or when the hex center is off screen. A hex that is already reasonably
    visible leaves the camera alone.
    """
    if current_zoom < target_zoom - MAX_ZOOM_GAP:
        return True
    return not bounds.contains(*center)


class ViewportDirector:
    """Moves the camera of a map surface towards selected hexes."""

    def __init__(
        self,
        surface: MapSurface,
        zoom_by_resolution: Mapping[int, float] = ZOOM_BY_HEX_RESOLUTION,
    ) -> None:
        self.surface = surface
        self.zoom_by_resolution = zoom_by_resolution

    def target_for(self, hex_id: str) -> CameraTransition:
        """
        Camera target for a hex: its center at the zoom for its resolution.

        Raises:
            InvalidHexError: If hex_id is not a valid cell
            UnknownResolutionError: If the resolution has no zoom entry
        """
        center = hex_center(hex_id)
        target_zoom = zoom_for_resolution(hex_resolution(hex_id), self.zoom_by_resolution)
        return CameraTransition(center=center, zoom=target_zoom)

    def focus(self, hex_id: str, target: CameraTransition | None = None) -> CameraTransition | None:
        """
        Bring a hex into view if needed.

        Args:
            hex_id: H3 cell identifier of the new selection
            target: Precomputed target_for(hex_id), if the caller has one

        Returns:
            The requested transition, or None if the camera stays put

        Raises:
            InvalidHexError: If hex_id is not a valid cell
            UnknownResolutionError: If the resolution has no zoom entry
        """
        if target is None:
            target = self.target_for(hex_id)

        if not self.surface.loaded:
            logger.debug(f"Surface not loaded, not focusing hex {hex_id}")
            return None

        zoom = self.surface.get_zoom()
        if not should_fly_to(zoom, target.zoom, self.surface.get_bounds(), target.center):
            logger.debug(f"Hex {hex_id} already visible at zoom {zoom}, camera unchanged")
            return None

        self.surface.fly_to(center=target.center, zoom=target.zoom)
        return target
