"""
Pass runner for the property mapper.

Each pass loads the collection, runs one stage over it, and writes the whole
collection back:

1. scrape:  extract listings, merge new URLs, initial geocode
2. resolve: corrective geocode for missing or suspicious coordinates
3. postal:  reverse geocode postal codes
"""
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from property_mapper.core import settings
from property_mapper.geocoding.base import BaseGeocoder
from property_mapper.geocoding.providers.nominatim import NominatimGeocoder
from property_mapper.models import PropertyRecord
from property_mapper.resolution.orchestrator import ResolutionOrchestrator, ResolutionSummary
from property_mapper.resolution.postal import PostalEnrichmentStage, PostalSummary
from property_mapper.scrapers.listing_scraper import ListingScraper
from property_mapper.storage import load_properties, merge_properties, save_properties

logger = logging.getLogger(__name__)

PASSES = ("scrape", "resolve", "postal")


class PropertyPipeline:
    """
    Main orchestrator for the property mapping pipeline.

    Passes run strictly one after another; within a pass, records are
    processed one at a time.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        geocoder: Optional[BaseGeocoder] = None,
        scraper: Optional[ListingScraper] = None,
        dry_run: bool = False,
        limit: Optional[int] = None,
    ):
        self.path = Path(path) if path else settings.PROPERTIES_FILE
        self.geocoder = geocoder or NominatimGeocoder()
        self.scraper = scraper
        self.dry_run = dry_run
        self.limit = limit
        self.orchestrator = ResolutionOrchestrator(self.geocoder)
        self.postal_stage = PostalEnrichmentStage(self.geocoder, self.orchestrator.validator)
        self._unsaved: Optional[List[PropertyRecord]] = None

    def _load(self, missing_ok: bool = False) -> List[PropertyRecord]:
        # Dry runs hand the previous pass's records to the next one
        if self._unsaved is not None:
            return self._unsaved
        return load_properties(self.path, missing_ok=missing_ok)

    def _save(self, records: Sequence[PropertyRecord]) -> None:
        if self.dry_run:
            logger.info(f"Dry run - {len(records)} properties not saved")
            self._unsaved = list(records)
            return
        save_properties(records, self.path)

    async def run_scrape(self) -> ResolutionSummary:
        """Scrape listings, merge them into the collection, geocode new ones."""
        existing = self._load(missing_ok=True)

        scraper = self.scraper or ListingScraper()
        with scraper:
            scraped = await scraper.scrape(limit=self.limit)

        known = {record.url for record in existing}
        records = merge_properties(existing, scraped)
        new_records = [record for record in records if record.url not in known]
        logger.info(
            f"{len(new_records)} new properties "
            f"({len(scraped)} scraped, {len(existing)} already known)"
        )

        # Known records are left to the resolve pass
        summary = await self.orchestrator.resolve_all(new_records)
        self._save(records)
        log_resolution_summary("SCRAPE", summary)
        return summary

    async def run_resolve(self) -> ResolutionSummary:
        """Re-geocode records with missing or suspicious coordinates."""
        records = self._load()
        summary = await self.orchestrator.resolve_all(records, limit=self.limit)
        self._save(records)
        log_resolution_summary("RESOLVE", summary)
        return summary

    async def run_postal(self) -> PostalSummary:
        """Add postal codes to geocoded records that lack one."""
        records = self._load()
        logger.info(f"Processing {len(records)} properties...")
        summary = await self.postal_stage.enrich_all(records, limit=self.limit)
        self._save(records)
        log_postal_summary(summary)
        return summary

    async def run(self, passes: Sequence[str] = PASSES) -> List[object]:
        """Run the named passes in pipeline order."""
        unknown = set(passes) - set(PASSES)
        if unknown:
            raise ValueError(f"Unknown pass: {sorted(unknown)}. Choose from: {list(PASSES)}")

        runners = {
            "scrape": self.run_scrape,
            "resolve": self.run_resolve,
            "postal": self.run_postal,
        }
        return [await runners[name]() for name in PASSES if name in passes]


def log_resolution_summary(stage: str, summary: ResolutionSummary) -> None:
    logger.info("=" * 60)
    logger.info(f"{stage} COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Properties examined: {summary.examined}")
    logger.info(f"Already resolved:    {summary.skipped}")
    logger.info(f"Resolved:            {summary.resolved}")
    logger.info(f"Failed:              {summary.failed}")
    for failure in summary.failures:
        logger.info(f"  - {failure}")


def log_postal_summary(summary: PostalSummary) -> None:
    logger.info("=" * 60)
    logger.info("POSTAL ENRICHMENT COMPLETE")
    logger.info("=" * 60)
    logger.info(f"Properties examined: {summary.examined}")
    logger.info(f"Updated {summary.updated} properties with zip codes.")
    logger.info(f"No zip found:        {summary.missed}")
    logger.info(f"Skipped:             {summary.skipped}")
