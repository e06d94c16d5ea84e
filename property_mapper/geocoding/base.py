"""
Base classes and interfaces for geocoding providers.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional


@dataclass
class GeocodingResult:
    """Standard forward-geocoding result from any provider."""

    latitude: float
    longitude: float
    query: str = ""
    matched_address: str = ""
    provider: str = ""
    match_type: str = ""  # e.g., "house", "city"
    raw_response: Optional[Dict[str, Any]] = None


class GeocodingError(Exception):
    """Exception raised when a geocoding request fails."""

    def __init__(self, message: str, provider: str = "", address: str = ""):
        self.message = message
        self.provider = provider
        self.address = address
        super().__init__(f"[{provider}] {message}" if provider else message)


class RequestPacer:
    """
    Enforces a minimum interval between consecutive calls to one service.

    The first call goes out immediately; every later call waits until
    `interval` seconds have passed since the previous one started.

    Usage:
        pacer = RequestPacer(1.0)
        await pacer.wait()
        requests.get(...)
    """

    def __init__(
        self,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._last_call: Optional[float] = None

    async def wait(self) -> float:
        """Sleep until the next call is allowed. Returns seconds waited."""
        waited = 0.0
        if self._last_call is not None:
            remaining = self.interval - (self._clock() - self._last_call)
            if remaining > 0:
                await self._sleep(remaining)
                waited = remaining
        self._last_call = self._clock()
        return waited


class BaseGeocoder(ABC):
    """
    Abstract base class for geocoding providers.

    Subclasses must implement:
    - forward_geocode(): Resolve a free-text query to coordinates
    - reverse_geocode(): Resolve coordinates to a postal code
    - provider_name: Name of the provider

    Both calls must swallow provider and network errors and return None,
    and must pace themselves.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Name of the geocoding provider."""
        pass

    @property
    def rate_limit_delay(self) -> float:
        """Delay between requests in seconds."""
        return 1.0

    @abstractmethod
    async def forward_geocode(self, query: str) -> Optional[GeocodingResult]:
        """
        Geocode a single free-text query.

        Args:
            query: Address or place query, sent as-is

        Returns:
            GeocodingResult for the first match, None if not found or on error
        """
        pass

    @abstractmethod
    async def reverse_geocode(self, lat: float, lon: float) -> Optional[str]:
        """
        Look up the postal code at a coordinate.

        Args:
            lat: Latitude in decimal degrees
            lon: Longitude in decimal degrees

        Returns:
            Postal code string, None if unavailable or on error
        """
        pass
