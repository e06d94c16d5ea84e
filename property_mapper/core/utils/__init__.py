"""
Shared utility functions for the property mapper.

Modules:
- address: Address cleanup, pattern detection and region abbreviations
- geo: Region latitude floors and coordinate checks

Usage:
    from property_mapper.core.utils import expand_region_abbreviation, find_address_in_text

    # Expand a trailing state code
    query = expand_region_abbreviation("Canton, MI")  # "Canton, Michigan"

    # Pull an address out of a listing description
    location = find_address_in_text("Now leasing at 123 Main St, Canton, MI!")
"""

from property_mapper.core.utils.address import (
    ADDRESS_NOT_FOUND,
    STATE_NAMES,
    clean_address,
    has_location,
    find_address_in_text,
    expand_region_abbreviation,
    ends_with_region,
    implies_region,
)
from property_mapper.core.utils.geo import (
    LatitudeFloor,
    DEFAULT_LATITUDE_FLOORS,
    is_valid_coordinate,
)

__all__ = [
    # Address utilities
    "ADDRESS_NOT_FOUND",
    "STATE_NAMES",
    "clean_address",
    "has_location",
    "find_address_in_text",
    "expand_region_abbreviation",
    "ends_with_region",
    "implies_region",
    # Geo utilities
    "LatitudeFloor",
    "DEFAULT_LATITUDE_FLOORS",
    "is_valid_coordinate",
]
