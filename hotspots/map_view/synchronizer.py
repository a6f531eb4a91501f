"""Keeps the selected hex in step with the current location path."""

import logging

from hotspots.map_view.navigation import (
    ROOT_PATH,
    Router,
    hex_id_from_segments,
    hex_path,
    is_root,
    path_segments,
)
from hotspots.map_view.selection import Selection, SelectionHolder
from hotspots.map_view.surface import DRONE_RADARS_LAYER_ID, HEXES_LAYER_ID, MapMouseEvent, MapSurface
from hotspots.map_view.viewport import ViewportDirector

logger = logging.getLogger(__name__)


class LocationSynchronizer:
    """
    Reconciles the selected hex with the router location.

    Path changes drive the selection: "/hex/<id>" selects <id> and "/"
    clears it. Clicks on the hex layer never select directly; they push
    a new path and the selection follows on the next path change.
    """

    def __init__(
        self,
        holder: SelectionHolder,
        router: Router,
        surface: MapSurface,
        director: ViewportDirector,
        hex_layer_id: str = HEXES_LAYER_ID,
    ) -> None:
        self.holder = holder
        self.router = router
        self.surface = surface
        self.director = director
        self.hex_layer_id = hex_layer_id

    def sync(self, path: str | None = None) -> Selection | None:
        """
        Derive the selection from a path and apply it if it changed.

        Args:
            path: Location path; defaults to the router's current path

        Returns:
            The selection after reconciling
        """
        if not self.surface.loaded:
            logger.debug("Surface not loaded yet, skipping selection sync")
            return self.holder.selection

        segments = path_segments(self.router.path if path is None else path)
        hex_id = hex_id_from_segments(segments)

        if hex_id is not None:
            if self.holder.hex_id != hex_id:
                # Resolve the camera target first so a hex without a zoom is never selected
                target = self.director.target_for(hex_id)
                self.holder.set_selection(hex_id)
                self.director.focus(hex_id, target)
        elif is_root(segments) and self.holder.selection is not None:
            self.holder.set_selection(None)

        return self.holder.selection

    def on_hex_click(self, event: MapMouseEvent) -> None:
        """
        Turn clicks on the hex layer into navigation.

        Clicking the selected hex goes home and drops the selection right
        away; clicking any other hex opens its detail path. Hits on other
        layers are ignored. Navigation is delivered once this handler
        returns, so every hit is judged against the same selection.
        """
        selected = self.holder.hex_id
        with self.router.deferred():
            for hit in event.features:
                hex_id = hit.properties.get("id")
                if hit.layer_id != self.hex_layer_id or not hex_id:
                    continue

                if hex_id == selected:
                    logger.info(f"Deselecting hex {hex_id}")
                    self.holder.set_selection(None)
                    self.router.push(ROOT_PATH)
                else:
                    self.router.push(hex_path(hex_id))


def inspect_drone_radar_click(event: MapMouseEvent, layer_id: str = DRONE_RADARS_LAYER_ID) -> list[dict]:
    """
    Log the properties of clicked drone radars.

    Read-only: never touches the selection or the router.

    Returns:
        Properties of every radar hit, in hit order
    """
    inspected = []
    for hit in event.features:
        if hit.layer_id != layer_id:
            continue
        props = hit.properties
        logger.info(
            f"Drone Radar ID: {props.get('id')}, Status: {props.get('status')}, "
            f"Concentration: {props.get('concentration')}"
        )
        inspected.append(dict(props))
    return inspected
