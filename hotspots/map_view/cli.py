"""Command-line interface for the hotspots hex map."""

import argparse
import logging
import sys

from hotspots.config import INITIAL_MAP_VIEW_STATE, MapSettings
from hotspots.logging_config import setup_logging
from hotspots.map_view.figure import create_figure, export_html, show_figure
from hotspots.map_view.markers import generate_mock_drones
from hotspots.map_view.navigation import ROOT_PATH, NavigationRejected, Router
from hotspots.map_view.surface import HEXES_LAYER_ID, FeatureHit, PlotlyMapSurface
from hotspots.map_view.view import HexMapView


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Hotspots Map - hex coverage map with selection and navigation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Open the map on the home page
  python -m hotspots.map_view

  # Open a hex detail page, starting zoomed out
  python -m hotspots.map_view /hex/882830829bfffff --zoom 2

  # Replay clicks on the hex layer (second click deselects)
  python -m hotspots.map_view --click 882830829bfffff 882830829bfffff

  # Dark theme with 50 drone radars, exported to HTML
  python -m hotspots.map_view /hex/882830829bfffff --theme dark --drones 50 --export map.html
        """,
    )

    parser.add_argument(
        "path",
        type=str,
        nargs="?",
        default=ROOT_PATH,
        help="Location path to open (e.g., /hex/<id>; default: /)",
    )
    parser.add_argument(
        "--theme",
        choices=["light", "dark"],
        default=None,
        help="Map theme (default: HOTSPOTS_THEME or light)",
    )
    parser.add_argument(
        "--zoom",
        type=float,
        default=INITIAL_MAP_VIEW_STATE["zoom"],
        help="Initial camera zoom",
    )
    parser.add_argument(
        "--center",
        type=float,
        nargs=2,
        metavar=("LAT", "LNG"),
        default=None,
        help="Initial camera center",
    )
    parser.add_argument(
        "--click",
        type=str,
        nargs="+",
        metavar="HEX",
        default=[],
        help="Hex ids to click on the hex layer, in order",
    )
    parser.add_argument(
        "--drones",
        type=int,
        default=0,
        help="Number of mock drone radars to draw",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for mock drone radars",
    )
    parser.add_argument(
        "--export",
        type=str,
        metavar="FILE",
        help="Export to HTML file instead of opening browser",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the hex map CLI."""
    args = build_parser().parse_args(argv)

    setup_logging()
    if args.verbose:
        logging.getLogger("hotspots.map_view").setLevel(logging.DEBUG)

    logger = logging.getLogger(__name__)

    try:
        settings = MapSettings.from_env()
        if args.theme:
            settings = MapSettings(
                pmtiles_url=settings.pmtiles_url,
                glyphs_url=settings.glyphs_url,
                theme=args.theme,
            )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    center = tuple(args.center) if args.center else (
        INITIAL_MAP_VIEW_STATE["latitude"],
        INITIAL_MAP_VIEW_STATE["longitude"],
    )
    surface = PlotlyMapSurface(center=center, zoom=args.zoom)
    drones = generate_mock_drones(args.drones, seed=args.seed) if args.drones else []
    router = Router(args.path)

    with HexMapView(router, surface=surface, settings=settings, drones=drones) as view:
        try:
            surface.load()
            for hex_id in args.click:
                logger.info(f"Clicking hex {hex_id}")
                surface.click([FeatureHit(HEXES_LAYER_ID, {"id": hex_id})])
        except (ValueError, KeyError, NavigationRejected) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        selected = view.selection.hex_id if view.selection else "none"
        print(f"Path: {router.path}")
        print(f"Selected hex: {selected}")
        fig = create_figure(view)

    if args.export:
        logger.info(f"Exporting to {args.export}")
        export_html(fig, args.export)
        print(f"Exported to {args.export}")
    else:
        logger.info("Opening in browser")
        show_figure(fig)
    return 0


if __name__ == "__main__":
    sys.exit(main())
