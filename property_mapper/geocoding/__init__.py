"""
Geocoding module for property listings.

Wraps the Nominatim (OpenStreetMap) service behind a small interface:
- forward_geocode(): free-text query to coordinates
- reverse_geocode(): coordinates to postal code

Both calls pace themselves and return None instead of raising.

Usage:
    from property_mapper.geocoding import NominatimGeocoder

    geocoder = NominatimGeocoder()
    result = await geocoder.forward_geocode("Canton, Michigan")
"""

from property_mapper.geocoding.base import (
    GeocodingResult,
    GeocodingError,
    BaseGeocoder,
    RequestPacer,
)
from property_mapper.geocoding.providers.nominatim import NominatimGeocoder

__all__ = [
    # Base classes
    "GeocodingResult",
    "GeocodingError",
    "BaseGeocoder",
    "RequestPacer",
    # Providers
    "NominatimGeocoder",
]
