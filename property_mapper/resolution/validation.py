"""
Plausibility checks for geocoding results.

Nominatim sometimes answers "Canton, MI" with Canton, Mississippi, and even
expanded queries occasionally land on the wrong town of the same name. A
result whose latitude sits below the floor of the region named in the query
is treated as a miss.
"""
import logging
from typing import Mapping, Optional, Union

from property_mapper.core.utils.address import implies_region
from property_mapper.core.utils.geo import DEFAULT_LATITUDE_FLOORS, LatitudeFloor
from property_mapper.geocoding.base import GeocodingResult

logger = logging.getLogger(__name__)


class PlausibilityValidator:
    """
    Rejects coordinates inconsistent with the region a hint string names.

    Usage:
        validator = PlausibilityValidator()
        validator.is_suspicious(result, "Canton, Michigan")
    """

    def __init__(self, floors: Mapping[str, LatitudeFloor] = DEFAULT_LATITUDE_FLOORS):
        self.floors = floors

    def region_for(self, hint: Optional[str]) -> Optional[LatitudeFloor]:
        """The first table region named by hint, by full name or abbreviation."""
        if not hint:
            return None

        for floor in self.floors.values():
            if implies_region(hint, floor.name, floor.abbreviation):
                return floor
        return None

    def fails_floor(self, latitude: float, hint: Optional[str]) -> bool:
        """True if hint implies a region and latitude is below its floor."""
        floor = self.region_for(hint)
        if floor is None:
            return False
        return latitude < floor.min_latitude

    def is_suspicious(
        self,
        result: Union[GeocodingResult, float],
        region_hint: Optional[str]
    ) -> bool:
        """
        Decide whether a provider result should be rejected.

        Args:
            result: GeocodingResult, or a bare latitude
            region_hint: Query or address text that may name a region

        Returns:
            True if the hint names a region in the table and the latitude
            falls below that region's floor
        """
        latitude = result.latitude if isinstance(result, GeocodingResult) else float(result)
        suspicious = self.fails_floor(latitude, region_hint)
        if suspicious:
            logger.debug(f"Latitude {latitude} below floor for \"{region_hint}\"")
        return suspicious
