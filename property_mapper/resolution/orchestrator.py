"""
Resolution of property records to coordinates.

Each record goes through UNRESOLVED -> ATTEMPTING -> RESOLVED | FAILED.
Records that already hold plausible coordinates are SKIPPED. Candidate
queries are tried one at a time; the geocoder paces itself, so this module
never sleeps.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from property_mapper.geocoding.base import BaseGeocoder, GeocodingResult
from property_mapper.models import PropertyRecord
from property_mapper.resolution.queries import QueryStrategyBuilder
from property_mapper.resolution.validation import PlausibilityValidator

logger = logging.getLogger(__name__)


class ResolutionState(str, Enum):
    """Where a record is in the resolution state machine."""
    UNRESOLVED = "unresolved"
    ATTEMPTING = "attempting"
    RESOLVED = "resolved"
    FAILED = "failed"
    SKIPPED = "skipped"


class AttemptOutcome(str, Enum):
    """Result of sending one candidate query."""
    ACCEPTED = "accepted"
    NO_MATCH = "no_match"
    SUSPICIOUS = "suspicious"


@dataclass
class Attempt:
    """One query sent for a record and what came back."""
    query: str
    outcome: AttemptOutcome
    result: Optional[GeocodingResult] = None


@dataclass
class ResolutionReport:
    """Outcome of resolving one record."""
    record: PropertyRecord
    state: ResolutionState
    attempts: List[Attempt] = field(default_factory=list)

    @property
    def accepted(self) -> Optional[GeocodingResult]:
        for attempt in self.attempts:
            if attempt.outcome == AttemptOutcome.ACCEPTED:
                return attempt.result
        return None


@dataclass
class ResolutionSummary:
    """Counts for one resolution pass."""
    examined: int = 0
    skipped: int = 0
    resolved: int = 0
    failed: int = 0
    failures: List[str] = field(default_factory=list)

    def add(self, report: ResolutionReport) -> None:
        self.examined += 1
        if report.state == ResolutionState.SKIPPED:
            self.skipped += 1
        elif report.state == ResolutionState.RESOLVED:
            self.resolved += 1
        elif report.state == ResolutionState.FAILED:
            self.failed += 1
            self.failures.append(f"{report.record.label} ({report.record.url})")


class ResolutionOrchestrator:
    """
    Drives candidate queries through the geocoder for each record.

    A record is attempted when it has no coordinates, or when its stored
    latitude fails the plausibility floor of the region its address names.
    The first non-suspicious result wins. If every candidate fails, the
    record keeps the coordinates it had on entry.

    Usage:
        orchestrator = ResolutionOrchestrator(NominatimGeocoder())
        summary = await orchestrator.resolve_all(records)
    """

    def __init__(
        self,
        geocoder: BaseGeocoder,
        builder: Optional[QueryStrategyBuilder] = None,
        validator: Optional[PlausibilityValidator] = None,
    ):
        self.geocoder = geocoder
        self.builder = builder or QueryStrategyBuilder()
        self.validator = validator or PlausibilityValidator()

    def region_hint_for(self, record: PropertyRecord) -> Optional[str]:
        """Stored text that may name the record's region."""
        for text in (record.address, record.location_field, self.builder.location_for(record)):
            if self.validator.region_for(text):
                return text
        return None

    def is_suspicious_on_record(self, record: PropertyRecord) -> bool:
        """True if stored coordinates contradict the region the address names."""
        if not record.has_coordinates:
            return False
        return self.validator.fails_floor(record.lat, record.address)

    def needs_resolution(self, record: PropertyRecord) -> bool:
        """Entry condition: no coordinates, or suspicious ones."""
        return not record.has_coordinates or self.is_suspicious_on_record(record)

    async def resolve(self, record: PropertyRecord) -> ResolutionReport:
        """Resolve one record in place."""
        report = ResolutionReport(record=record, state=ResolutionState.UNRESOLVED)

        if not self.needs_resolution(record):
            report.state = ResolutionState.SKIPPED
            return report

        if record.has_coordinates:
            logger.info(f"Fixing suspicious coordinate for {record.label} ({record.lat})")

        report.state = ResolutionState.ATTEMPTING
        fallback_hint = self.region_hint_for(record)
        tried = set()

        for query in self.builder.queries(record):
            if query in tried:
                continue
            tried.add(query)

            logger.info(f"Geocoding: \"{query}\"")
            result = await self.geocoder.forward_geocode(query)

            if result is None:
                report.attempts.append(Attempt(query, AttemptOutcome.NO_MATCH))
                continue

            hint = query if self.validator.region_for(query) else fallback_hint
            if self.validator.is_suspicious(result, hint):
                logger.info(f"  -> Ignored suspicious result for {query}: {result.latitude}")
                report.attempts.append(Attempt(query, AttemptOutcome.SUSPICIOUS, result))
                continue

            record.set_coordinates(result.latitude, result.longitude)
            report.attempts.append(Attempt(query, AttemptOutcome.ACCEPTED, result))
            report.state = ResolutionState.RESOLVED
            logger.info(f"  -> Resolved: {record.label} at {result.latitude}, {result.longitude}")
            return report

        report.state = ResolutionState.FAILED
        logger.warning(
            f"  -> FAILED to resolve {record.label} ({record.url}) "
            f"after {len(report.attempts)} queries"
        )
        return report

    async def resolve_all(
        self,
        records: Sequence[PropertyRecord],
        limit: Optional[int] = None
    ) -> ResolutionSummary:
        """
        Resolve records sequentially.

        Args:
            records: Collection to update in place
            limit: Stop after this many records have been attempted

        Returns:
            ResolutionSummary with per-state counts
        """
        summary = ResolutionSummary()
        attempted = 0

        for record in records:
            if limit is not None and attempted >= limit:
                break

            report = await self.resolve(record)
            summary.add(report)
            if report.state != ResolutionState.SKIPPED:
                attempted += 1

        return summary
