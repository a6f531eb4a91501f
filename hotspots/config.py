"""Map settings read from the environment (.env supported)."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Configuration defaults
DEFAULT_PMTILES_URL = "https://tiles.example.invalid/hotspots"
DEFAULT_GLYPHS_URL = "https://cdn.protomaps.com/fonts/pbf/{fontstack}/{range}.pbf"
DEFAULT_THEME = "light"
THEMES = ("light", "dark")

INITIAL_MAP_VIEW_STATE = {
    "latitude": 38.0,
    "longitude": -100.0,
    "zoom": 2.0,
}
MIN_MAP_ZOOM = 0.0
MAX_MAP_ZOOM = 18.0
MAP_CONTAINER_SIZE = (1200, 800)  # width, height in pixels


@dataclass(frozen=True)
class MapSettings:
    """Runtime settings for the hotspots map."""

    pmtiles_url: str = DEFAULT_PMTILES_URL
    glyphs_url: str = DEFAULT_GLYPHS_URL
    theme: str = DEFAULT_THEME

    def __post_init__(self) -> None:
        if self.theme not in THEMES:
            raise ValueError(f"Unknown theme '{self.theme}' (expected one of {', '.join(THEMES)})")

    @property
    def tiles_url(self) -> str:
        """Vector tile URL template for the base map source."""
        return f"{self.pmtiles_url.rstrip('/')}/{{z}}/{{x}}/{{y}}.mvt"

    @classmethod
    def from_env(cls) -> "MapSettings":
        """
        Build settings from environment variables.

        Reads HOTSPOTS_PMTILES_URL, HOTSPOTS_GLYPHS_URL and HOTSPOTS_THEME,
        loading a .env file first if one is present.

        Raises:
            ValueError: If HOTSPOTS_THEME is not a known theme
        """
        load_dotenv()
        settings = cls(
            pmtiles_url=os.getenv("HOTSPOTS_PMTILES_URL", DEFAULT_PMTILES_URL),
            glyphs_url=os.getenv("HOTSPOTS_GLYPHS_URL", DEFAULT_GLYPHS_URL),
            theme=os.getenv("HOTSPOTS_THEME", DEFAULT_THEME).strip().lower(),
        )
        logger.debug(f"Loaded map settings: {settings}")
        return settings
