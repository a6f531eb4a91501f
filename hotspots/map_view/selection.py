"""Selected hex state for the map view."""

import logging
from dataclasses import dataclass

from hotspots.map_view.geometry import hexes_to_multipolygon

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Selection:
    """The currently selected hex and its outline geometry."""

    hex_id: str
    outline: dict  # GeoJSON MultiPolygon


class SelectionHolder:
    """
    Owns the single selected hex of a map view.

    The outline is computed once per distinct hex and cached with a
    capacity of one entry, so re-selecting the last hex (for example
    after a round trip through the home page) reuses the same geometry.
    """

    def __init__(self) -> None:
        self._selection: Selection | None = None
        self._cached_hex_id: str | None = None
        self._cached_outline: dict | None = None

    @property
    def selection(self) -> Selection | None:
        return self._selection

    @property
    def hex_id(self) -> str | None:
        """Identifier of the selected hex, or None when nothing is selected."""
        return self._selection.hex_id if self._selection else None

    def set_selection(self, hex_id: str | None) -> Selection | None:
        """
        Select a hex, or clear the selection with None.

        No validation happens here: a malformed hex_id fails inside the
        outline computation and the previous selection is kept.

        Args:
            hex_id: H3 cell identifier, or None to deselect

        Returns:
            The new Selection, or None after deselect

        Raises:
            InvalidHexError: If hex_id is not a valid cell
        """
        if not hex_id:
            if self._selection is not None:
                logger.info(f"Cleared selection (was {self._selection.hex_id})")
            self._selection = None
            return None

        self._selection = Selection(hex_id=hex_id, outline=self._outline_for(hex_id))
        logger.info(f"Selected hex {hex_id}")
        return self._selection

    def _outline_for(self, hex_id: str) -> dict:
        if self._cached_hex_id == hex_id and self._cached_outline is not None:
            return self._cached_outline

        outline = hexes_to_multipolygon([hex_id])
        self._cached_hex_id = hex_id
        self._cached_outline = outline
        logger.debug(f"Computed outline for hex {hex_id}")
        return outline
