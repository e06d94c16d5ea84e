"""
Address cleanup and parsing utilities.

This module consolidates address handling used by the listing scraper and the
geocoding query builder so both sides agree on what a "location" looks like.

Usage:
    from property_mapper.core.utils.address import (
        clean_address, expand_region_abbreviation, find_address_in_text,
    )

    clean_address("123 Main St&#160;, Canton, MI")     # "123 Main St, Canton, MI"
    expand_region_abbreviation("Canton, MI")           # "Canton, Michigan"
    find_address_in_text("Visit us at 123 Main St, Canton, MI today")
    # "123 Main St, Canton, MI"
"""

import re
from types import MappingProxyType
from typing import Mapping, Optional

# Reserved display address for listings without any location text
ADDRESS_NOT_FOUND = "Address Not Found"

# State abbreviations expanded before querying; the provider confuses
# "MI" with Mississippi without it
STATE_NAMES: Mapping[str, str] = MappingProxyType({
    "MI": "Michigan",
    "IN": "Indiana",
    "OH": "Ohio",
    "FL": "Florida",
    "MA": "Massachusetts",
    "MD": "Maryland",
    "USA": "USA",
})

# <number> <words>, <words>, <XX>
ADDRESS_PATTERN = re.compile(r"\d+\s+[\w\s]+,\s+[\w\s]+,\s+[A-Z]{2}\b")

# Trailing " XX" region code
TRAILING_REGION_PATTERN = re.compile(r" ([A-Z]{2,3})$")

# Last comma-separated part, minus a trailing postal code: "..., MI 48187" -> "MI"
REGION_SUFFIX_PATTERN = re.compile(r",\s*([A-Za-z][A-Za-z .]*?)(?:\s+\d{5}(?:-\d{4})?)?\s*$")

HTML_ENTITY_PATTERN = re.compile(r"&#\d+;")

# Zero-width characters the site uses between address parts
ZERO_WIDTH_PATTERN = re.compile("[\u200b\u200c\u200d\ufeff]")


def clean_address(address: Optional[str]) -> Optional[str]:
    """
    Clean a scraped location string for display.

    Removes numeric HTML entities, collapses whitespace and strips stray
    separators. Returns None when nothing usable is left, so the caller can
    fall back to ADDRESS_NOT_FOUND.

    Example:
        >>> clean_address("  Canton,&#8203; MI ")
        "Canton, MI"
    """
    if not address:
        return None

    addr = HTML_ENTITY_PATTERN.sub("", address)
    addr = ZERO_WIDTH_PATTERN.sub("", addr)
    addr = " ".join(addr.split())
    addr = re.sub(r"\s+,", ",", addr)
    addr = addr.strip(" ,;")

    if not addr or addr == ADDRESS_NOT_FOUND:
        return None
    return addr


def has_location(address: Optional[str]) -> bool:
    """True if address holds real location text rather than the sentinel."""
    return bool(address) and address != ADDRESS_NOT_FOUND


def find_address_in_text(text: Optional[str]) -> Optional[str]:
    """
    Find the first street-address-like fragment in free text.

    This is a coarse heuristic (digits, words, comma, words, comma, two
    capital letters). Anything with the same signature can replace it in
    QueryStrategyBuilder.

    Example:
        >>> find_address_in_text("Located at 123 Main St, Canton, MI 48187.")
        "123 Main St, Canton, MI"
        >>> find_address_in_text("A lovely community") is None
        True
    """
    if not text:
        return None

    match = ADDRESS_PATTERN.search(text)
    if not match:
        return None
    return match.group(0).strip()


def expand_region_abbreviation(
    query: str,
    state_names: Mapping[str, str] = STATE_NAMES
) -> str:
    """
    Expand a trailing region abbreviation to its full name.

    Only a code at the very end of the string, preceded by a space, is
    expanded. Unmapped codes pass through unchanged.

    Example:
        >>> expand_region_abbreviation("Canton, MI")
        "Canton, Michigan"
        >>> expand_region_abbreviation("MI Apartments, Canton")
        "MI Apartments, Canton"
    """
    if not query:
        return query

    match = TRAILING_REGION_PATTERN.search(query)
    if not match:
        return query

    full_name = state_names.get(match.group(1))
    if full_name is None:
        return query

    return query[:match.start(1)] + full_name


def implies_region(text: Optional[str], name: str, abbreviation: str) -> bool:
    """
    Check whether text names a region, by full name or abbreviation.

    The full name matches as a whole word (case-insensitive); the abbreviation
    only as a comma-separated token such as ", MI" so that words like "MIDWAY"
    do not count.

    Example:
        >>> implies_region("Canton, Michigan", "Michigan", "MI")
        True
        >>> implies_region("123 Main St, Canton, MI 48187", "Michigan", "MI")
        True
        >>> implies_region("Midway Terrace, Ohio", "Michigan", "MI")
        False
    """
    if not text:
        return False

    if re.search(rf"\b{re.escape(name)}\b", text, re.IGNORECASE):
        return True

    return re.search(rf",\s*{re.escape(abbreviation)}\b", text) is not None


def ends_with_region(text: Optional[str], state_names: Mapping[str, str] = STATE_NAMES) -> bool:
    """
    Check whether text already ends in a comma-separated region.

    The last part counts when it is a mapped code ("MI") or a full region
    name ("Michigan", case-insensitive), optionally followed by a postal code.

    Example:
        >>> ends_with_region("123 Main St, Canton, MI 48187")
        True
        >>> ends_with_region("The Meadows at Canton")
        False
    """
    if not text:
        return False

    match = REGION_SUFFIX_PATTERN.search(text)
    if not match:
        return False

    token = match.group(1).strip()
    if token in state_names:
        return True
    return token.lower() in {name.lower() for name in state_names.values()}
