"""
Geocoding provider implementations.
"""

from property_mapper.geocoding.providers.nominatim import NominatimGeocoder

__all__ = ["NominatimGeocoder"]
