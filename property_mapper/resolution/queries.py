"""
Candidate query generation for forward geocoding.

Listings rarely carry a clean address. The builder turns whatever a record
has (title, scraped location, description) into an ordered list of queries,
most specific first, ending with a coarse title-only fallback.
"""
import logging
from typing import Callable, List, Mapping, Optional

from property_mapper.core import settings
from property_mapper.core.utils.address import (
    STATE_NAMES,
    clean_address,
    ends_with_region,
    expand_region_abbreviation,
    find_address_in_text,
    has_location,
)
from property_mapper.models import PropertyRecord

logger = logging.getLogger(__name__)

# text -> location found in it, or None
AddressDetector = Callable[[Optional[str]], Optional[str]]

# "The Meadows at Canton" -> "Canton"
PLACE_SEPARATOR = " at "


class QueryStrategyBuilder:
    """
    Builds ordered geocoding queries for a property record.

    Order:
    1. title + location, then location alone (explicit location)
    2. the same from an address found in the description, if no location
    3. "<place>, USA" for titles like "X at <place>"
    4. ", USA" variants of 1-2 that name no region yet, then "<title>, USA"
       as last resort

    Usage:
        builder = QueryStrategyBuilder()
        for candidate in builder.candidates(record):
            query = builder.prepare(candidate)
    """

    def __init__(
        self,
        state_names: Mapping[str, str] = STATE_NAMES,
        address_detector: AddressDetector = find_address_in_text,
        country_suffix: Optional[str] = None,
    ):
        self.state_names = state_names
        self.address_detector = address_detector
        self.country_suffix = country_suffix or settings.COUNTRY_SUFFIX

    def explicit_location(self, record: PropertyRecord) -> Optional[str]:
        """Location scraped from the page, or the stored display address."""
        location = clean_address(record.location_field)
        if location:
            return location
        if has_location(record.address):
            return clean_address(record.address)
        return None

    def location_for(self, record: PropertyRecord) -> Optional[str]:
        """Best location string: explicit first, then the description."""
        return self.explicit_location(record) or self.address_detector(record.description)

    def with_country(self, query: str) -> str:
        """Append the country suffix unless query already ends in a region."""
        suffix = f", {self.country_suffix}"
        if query.endswith(suffix) or ends_with_region(query, self.state_names):
            return query
        return f"{query}{suffix}"

    def place_from_title(self, title: Optional[str]) -> Optional[str]:
        if not title or PLACE_SEPARATOR not in title:
            return None
        place = title.split(PLACE_SEPARATOR)[-1].strip(" ,")
        return place or None

    def candidates(self, record: PropertyRecord) -> List[str]:
        """
        Ordered, duplicate-free candidate queries for a record.

        The strings are returned as built; prepare() applies region expansion.
        """
        title = (record.title or "").strip() or None
        location = self.location_for(record)

        specific = []
        if location:
            if title:
                specific.append(f"{title}, {location}")
            specific.append(location)

        queries = list(specific)

        place = self.place_from_title(title)
        if place:
            queries.append(self.with_country(place))

        queries.extend(self.with_country(query) for query in specific)

        if title:
            queries.append(self.with_country(title))

        return _dedupe(queries)

    def prepare(self, query: str) -> str:
        """Expand a trailing region abbreviation before querying."""
        return expand_region_abbreviation(query, self.state_names)

    def queries(self, record: PropertyRecord) -> List[str]:
        """Candidates as they will be sent, expanded and deduplicated."""
        queries = _dedupe(self.prepare(query) for query in self.candidates(record))
        logger.debug(f"{len(queries)} candidate queries for {record.label}: {queries}")
        return queries


def _dedupe(queries) -> List[str]:
    seen = set()
    result = []
    for query in queries:
        if not query or query in seen:
            continue
        seen.add(query)
        result.append(query)
    return result
