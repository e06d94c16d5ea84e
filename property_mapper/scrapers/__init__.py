# Property listing scrapers
from .base_scraper import BaseScraper, FetchError
from .listing_scraper import ListingScraper, extract_listing, extract_listing_links

__all__ = [
    'BaseScraper',
    'FetchError',
    'ListingScraper',
    'extract_listing',
    'extract_listing_links',
]
