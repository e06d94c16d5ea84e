"""
Base scraper class with common functionality.
"""
import asyncio
import logging
from typing import Optional

import requests
from bs4 import BeautifulSoup

from property_mapper.core import settings

# Mimic a real browser; the listing site answers 403 otherwise
HEADERS = {
    "User-Agent": settings.USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Cache-Control": "max-age=0",
}


class FetchError(Exception):
    """Raised when a page cannot be retrieved."""

    def __init__(self, message: str, url: str = ""):
        self.message = message
        self.url = url
        super().__init__(f"{message} ({url})" if url else message)


class BaseScraper:
    """Base class for HTTP scrapers with session management and retries."""

    def __init__(self, session: Optional[requests.Session] = None):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.session = session or requests.Session()
        self.session.headers.update(HEADERS)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.session.close()

    def _get(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=settings.REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise FetchError(str(e), url) from e

        if response.status_code != 200:
            raise FetchError(f"HTTP error! status: {response.status_code}", url)
        return response.text

    async def fetch_text(self, url: str) -> Optional[str]:
        """Fetch a page with retry logic. Returns None if every attempt fails."""
        for attempt in range(settings.MAX_RETRIES):
            try:
                self.logger.debug(f"Fetching: {url}")
                return self._get(url)
            except FetchError as e:
                self.logger.warning(f"Fetch attempt {attempt + 1} failed: {e}")
                if attempt < settings.MAX_RETRIES - 1:
                    await asyncio.sleep(2 ** attempt)  # Exponential backoff

        self.logger.error(f"Error fetching {url} after {settings.MAX_RETRIES} attempts")
        return None

    async def fetch_soup(self, url: str) -> Optional[BeautifulSoup]:
        html = await self.fetch_text(url)
        if html is None:
            return None
        return BeautifulSoup(html, "lxml")

    async def delay(self, seconds: Optional[float] = None):
        """Add delay between requests to be respectful to the server."""
        await asyncio.sleep(seconds if seconds is not None else settings.REQUEST_DELAY)
