"""
Nominatim (OpenStreetMap) Geocoder provider.

Free geocoding using OpenStreetMap data.
https://nominatim.org/
"""

import logging
from typing import Any, Dict, Optional

import requests

from property_mapper.core import settings
from property_mapper.core.config import MIN_GEOCODER_DELAY
from property_mapper.core.utils.geo import is_valid_coordinate
from property_mapper.geocoding.base import (
    BaseGeocoder,
    GeocodingError,
    GeocodingResult,
    RequestPacer,
)

logger = logging.getLogger(__name__)


class NominatimGeocoder(BaseGeocoder):
    """
    Nominatim (OpenStreetMap) Geocoder.

    Pros:
    - Free
    - Good global coverage
    - Reverse lookups return postal codes

    Cons:
    - Strict rate limiting (1 request/second)
    - Ambiguous state abbreviations ("Canton, MI" vs. Mississippi)
    - Requires a descriptive user agent

    Search and reverse lookups are paced independently, each waiting at least
    `rate_limit_delay` seconds after this client's previous call to the same
    endpoint.

    Usage:
        geocoder = NominatimGeocoder()
        result = await geocoder.forward_geocode("Canton, Michigan")
        postcode = await geocoder.reverse_geocode(result.latitude, result.longitude)
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        search_url: Optional[str] = None,
        reverse_url: Optional[str] = None,
        delay: Optional[float] = None,
        session: Optional[requests.Session] = None,
        search_pacer: Optional[RequestPacer] = None,
        reverse_pacer: Optional[RequestPacer] = None,
    ):
        """
        Initialize Nominatim Geocoder.

        Args:
            user_agent: User agent string (required by Nominatim TOS)
            search_url: Forward geocoding endpoint
            reverse_url: Reverse geocoding endpoint
            delay: Seconds between calls to the same endpoint (min 1.0)
            session: HTTP session to reuse
            search_pacer: Pacer for forward calls (built from delay if omitted)
            reverse_pacer: Pacer for reverse calls (built from delay if omitted)
        """
        self.user_agent = user_agent or settings.NOMINATIM_USER_AGENT
        self.search_url = search_url or settings.NOMINATIM_SEARCH_URL
        self.reverse_url = reverse_url or settings.NOMINATIM_REVERSE_URL
        self._delay = max(
            delay if delay is not None else settings.NOMINATIM_GEOCODER_DELAY,
            MIN_GEOCODER_DELAY,
        )
        self.session = session or requests.Session()
        self._search_pacer = search_pacer or RequestPacer(self._delay)
        self._reverse_pacer = reverse_pacer or RequestPacer(self._delay)

    @property
    def provider_name(self) -> str:
        return "nominatim"

    @property
    def rate_limit_delay(self) -> float:
        return self._delay

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept-Language": "en",
        }

    def _get_json(self, url: str, params: Dict[str, Any], subject: str) -> Any:
        """GET a Nominatim endpoint and decode the JSON body."""
        try:
            response = self.session.get(
                url,
                params=params,
                headers=self.headers,
                timeout=settings.REQUEST_TIMEOUT,
            )
        except requests.Timeout as e:
            raise GeocodingError("timeout", self.provider_name, subject) from e
        except requests.RequestException as e:
            raise GeocodingError(f"request failed: {e}", self.provider_name, subject) from e

        if response.status_code != 200:
            raise GeocodingError(
                f"HTTP {response.status_code}", self.provider_name, subject
            )

        try:
            return response.json()
        except ValueError as e:
            raise GeocodingError(f"invalid JSON: {e}", self.provider_name, subject) from e

    async def forward_geocode(self, query: str) -> Optional[GeocodingResult]:
        """
        Geocode a query using Nominatim search.

        Args:
            query: Free-text address or place

        Returns:
            GeocodingResult for the first candidate, None otherwise
        """
        if not query:
            return None

        await self._search_pacer.wait()

        params = {
            "q": query,
            "format": "json",
            "limit": 1,
        }

        try:
            data = self._get_json(self.search_url, params, query)
        except GeocodingError as e:
            logger.warning(f"Geocoding failed for \"{query}\": {e}")
            return None

        if not data or not isinstance(data, list):
            logger.debug(f"Nominatim: No results for \"{query}\"")
            return None

        # Get first result
        result = data[0]
        try:
            lat = float(result["lat"])
            lon = float(result["lon"])
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Nominatim: Unparseable result for \"{query}\": {e}")
            return None

        if not is_valid_coordinate(lat, lon):
            logger.warning(f"Nominatim: Invalid coordinates for \"{query}\": {lat}, {lon}")
            return None

        return GeocodingResult(
            latitude=lat,
            longitude=lon,
            query=query,
            matched_address=result.get("display_name", ""),
            provider=self.provider_name,
            match_type=result.get("type", ""),
            raw_response=result,
        )

    async def reverse_geocode(self, lat: float, lon: float) -> Optional[str]:
        """
        Look up the postal code for a coordinate using Nominatim reverse.

        Returns:
            Postal code, or None if the response has no address.postcode
        """
        if lat is None or lon is None:
            return None

        await self._reverse_pacer.wait()

        params = {
            "lat": lat,
            "lon": lon,
            "format": "json",
        }
        subject = f"{lat}, {lon}"

        try:
            data = self._get_json(self.reverse_url, params, subject)
        except GeocodingError as e:
            logger.warning(f"Error reverse geocoding {subject}: {e}")
            return None

        if not isinstance(data, dict):
            return None

        address = data.get("address")
        if not isinstance(address, dict):
            logger.debug(f"Nominatim: No address for {subject}")
            return None

        postcode = address.get("postcode")
        return str(postcode) if postcode else None
