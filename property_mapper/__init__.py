"""
Property mapper: scrape real-estate listings, geocode them with
OpenStreetMap Nominatim, and enrich them with postal codes.
"""

__version__ = "1.2.0"
