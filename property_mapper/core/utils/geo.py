"""
Geographic lookup tables and coordinate checks.

Usage:
    from property_mapper.core.utils.geo import DEFAULT_LATITUDE_FLOORS, is_valid_coordinate

    is_valid_coordinate(42.31, -83.48)  # True
    is_valid_coordinate(float("nan"), -83.48)  # False
"""

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class LatitudeFloor:
    """Minimum plausible latitude for a region."""

    name: str
    abbreviation: str
    min_latitude: float


# Canton, MI is around latitude 42; Canton, MS (what "Canton, MI" often
# resolves to) is around 32.
DEFAULT_LATITUDE_FLOORS: Mapping[str, LatitudeFloor] = MappingProxyType({
    "Michigan": LatitudeFloor(name="Michigan", abbreviation="MI", min_latitude=41.0),
})


def is_valid_coordinate(lat: Optional[float], lon: Optional[float]) -> bool:
    """
    Check that a latitude/longitude pair is finite and on the globe.

    Args:
        lat: Latitude in decimal degrees
        lon: Longitude in decimal degrees

    Returns:
        True if both values are finite numbers within range
    """
    if lat is None or lon is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0
