"""
Postal code enrichment for records with accepted coordinates.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from property_mapper.geocoding.base import BaseGeocoder
from property_mapper.models import PropertyRecord
from property_mapper.resolution.validation import PlausibilityValidator

logger = logging.getLogger(__name__)


@dataclass
class PostalSummary:
    """Counts for one postal enrichment pass."""
    examined: int = 0
    updated: int = 0
    missed: int = 0
    skipped: int = 0


class PostalEnrichmentStage:
    """
    Adds postal codes with one reverse lookup per eligible record.

    Records that already have a postal code, or have no coordinates, are
    skipped, so running the stage again changes nothing. Coordinates that
    fail the latitude floor of the region the address names are not
    accepted yet and are skipped too; a later resolve pass may replace them.
    """

    def __init__(
        self,
        geocoder: BaseGeocoder,
        validator: Optional[PlausibilityValidator] = None,
    ):
        self.geocoder = geocoder
        self.validator = validator or PlausibilityValidator()

    def is_eligible(self, record: PropertyRecord) -> bool:
        if not record.has_coordinates or record.postal_code:
            return False
        if self.validator.fails_floor(record.lat, record.address):
            logger.info(f"Skipping {record.label}: suspicious coordinate {record.lat}")
            return False
        return True

    async def enrich(self, record: PropertyRecord) -> Optional[str]:
        """Look up and apply the postal code for one record."""
        logger.info(f"Fetching zip for {record.label}...")
        postal_code = await self.geocoder.reverse_geocode(record.lat, record.lon)

        if not postal_code:
            logger.info("  -> No zip found.")
            return None

        record.apply_postal_code(postal_code)
        logger.info(f"  -> Found: {postal_code}")
        return postal_code

    async def enrich_all(
        self,
        records: Sequence[PropertyRecord],
        limit: Optional[int] = None
    ) -> PostalSummary:
        summary = PostalSummary()

        for record in records:
            summary.examined += 1
            if not self.is_eligible(record):
                summary.skipped += 1
                continue
            if limit is not None and summary.updated + summary.missed >= limit:
                summary.skipped += 1
                continue

            if await self.enrich(record):
                summary.updated += 1
            else:
                summary.missed += 1

        return summary
