"""Mock drone radar markers for the map."""

import logging
from dataclasses import dataclass

import h3
import numpy as np

logger = logging.getLogger(__name__)

DRONE_STATUSES = ("active", "inactive")
DEFAULT_DRONE_COUNT = 100
MARKER_HEX_RESOLUTION = 8


@dataclass
class DroneRadar:
    """A drone concentration radar."""

    id: str
    lat: float
    lng: float
    status: str  # "active" or "inactive"
    concentration: float  # 0 to 1
    hex_id: str | None = None  # H3 cell containing the radar
    name: str | None = None


def generate_mock_drones(
    num_drones: int = DEFAULT_DRONE_COUNT,
    seed: int | None = None,
    resolution: int = MARKER_HEX_RESOLUTION,
) -> list[DroneRadar]:
    """
    Generate randomly placed drone radars.

    Args:
        num_drones: Number of radars to create
        seed: Seed for reproducible output
        resolution: H3 resolution of each radar's hex_id

    Returns:
        List of DroneRadar with ids "drone-1" .. "drone-<n>"
    """
    rng = np.random.default_rng(seed)
    lats = rng.uniform(-90.0, 90.0, num_drones)
    lngs = rng.uniform(-180.0, 180.0, num_drones)
    active = rng.random(num_drones) > 0.5
    concentrations = np.round(rng.random(num_drones), 2)

    drones = [
        DroneRadar(
            id=f"drone-{i + 1}",
            lat=float(lats[i]),
            lng=float(lngs[i]),
            status=DRONE_STATUSES[0] if active[i] else DRONE_STATUSES[1],
            concentration=float(concentrations[i]),
            hex_id=h3.latlng_to_cell(float(lats[i]), float(lngs[i]), resolution),
        )
        for i in range(num_drones)
    ]
    logger.debug(f"Generated {len(drones)} mock drone radars")
    return drones
