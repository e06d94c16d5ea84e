"""
Scraper for property listings on the portfolio site.

Finds listing links on the index page, then pulls title, image, description
and location text out of each listing page's meta tags and body.
"""
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from property_mapper.core import settings
from property_mapper.core.utils.address import (
    ADDRESS_NOT_FOUND,
    clean_address,
    find_address_in_text,
)
from property_mapper.models import PropertyRecord
from property_mapper.scrapers.base_scraper import BaseScraper

LOCATION_HEADING = re.compile(r"^\s*Location:?\s*$", re.IGNORECASE)


def extract_listing_links(soup: BeautifulSoup, pattern: Optional[str] = None) -> List[str]:
    """Listing URLs on an index page, deduplicated in page order."""
    link_pattern = re.compile(pattern or settings.LISTING_LINK_PATTERN)

    links = []
    seen = set()
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not link_pattern.match(href) or href in seen:
            continue
        seen.add(href)
        links.append(href)
    return links


def _meta_content(soup: BeautifulSoup, prop: str) -> Optional[str]:
    tag = soup.find("meta", attrs={"property": prop})
    if tag is None:
        return None
    content = (tag.get("content") or "").strip()
    return content or None


def extract_title(soup: BeautifulSoup) -> Optional[str]:
    title = _meta_content(soup, "og:title")
    if not title and soup.title and soup.title.string:
        title = soup.title.string.strip()
    if not title:
        return None

    for suffix in settings.TITLE_SUFFIXES:
        title = title.replace(suffix, "")
    return title.strip() or None


def extract_location(soup: BeautifulSoup) -> Optional[str]:
    """Text of the <p> following an <h4>Location:</h4> heading."""
    heading = soup.find("h4", string=LOCATION_HEADING)
    if heading is None:
        return None

    paragraph = heading.find_next_sibling("p")
    if paragraph is None:
        return None

    text = paragraph.get_text(" ", strip=True)
    return text or None


def extract_listing(html: str, url: str) -> PropertyRecord:
    """
    Build a record from one listing page.

    Missing fields come back as None. The location falls back to an address
    found in the description; the display address falls back to the
    ADDRESS_NOT_FOUND sentinel.
    """
    soup = BeautifulSoup(html, "lxml")

    description = _meta_content(soup, "og:description")

    location = extract_location(soup)
    if not location:
        location = find_address_in_text(description)

    return PropertyRecord(
        title=extract_title(soup),
        url=url,
        image=_meta_content(soup, "og:image"),
        description=description,
        address=clean_address(location) or ADDRESS_NOT_FOUND,
        location_field=location,
    )


class ListingScraper(BaseScraper):
    """
    Scrapes every listing linked from the portfolio index page.

    Usage:
        with ListingScraper() as scraper:
            records = await scraper.scrape()
    """

    def __init__(self, base_url: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.base_url = base_url or settings.SOURCE_BASE_URL

    async def discover_links(self) -> List[str]:
        soup = await self.fetch_soup(self.base_url)
        if soup is None:
            return []

        links = extract_listing_links(soup)
        self.logger.info(f"Found {len(links)} property links.")
        return links

    async def scrape(self, limit: Optional[int] = None) -> List[PropertyRecord]:
        """
        Scrape listing pages in order.

        Pages that cannot be fetched are logged and skipped.
        """
        links = await self.discover_links()
        if limit is not None:
            links = links[:limit]

        records = []
        for i, url in enumerate(links):
            self.logger.info(f"[{i + 1}/{len(links)}] scraping {url}...")

            html = await self.fetch_text(url)
            if html is not None:
                record = extract_listing(html, url)
                self.logger.debug(f"  title={record.title!r} location={record.location_field!r}")
                records.append(record)

            # Polite delay
            if i < len(links) - 1:
                await self.delay()

        self.logger.info(f"Scraped {len(records)}/{len(links)} listings")
        return records
