#!/usr/bin/env python3
"""
Command-line interface for the geocoding module.

Usage:
    python -m property_mapper.geocoding.cli --address "Canton, MI"
    python -m property_mapper.geocoding.cli --address "Canton, MI" --raw
    python -m property_mapper.geocoding.cli --reverse 42.3086 -83.4822
"""

import argparse
import asyncio
import logging

from property_mapper.geocoding import NominatimGeocoder
from property_mapper.resolution.queries import QueryStrategyBuilder
from property_mapper.resolution.validation import PlausibilityValidator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler("geocoding.log"),
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)


async def test_single_address(
    address: str,
    raw: bool = False,
    verbose: bool = False
) -> None:
    """Test geocoding a single query."""
    query = address if raw else QueryStrategyBuilder().prepare(address)

    print(f"\nGeocoding: {query}")
    print("-" * 50)

    result = await NominatimGeocoder().forward_geocode(query)

    if result:
        suspicious = PlausibilityValidator().is_suspicious(result, query)
        print(f"✓ Success!")
        print(f"  Latitude:   {result.latitude:.6f}")
        print(f"  Longitude:  {result.longitude:.6f}")
        print(f"  Matched:    {result.matched_address}")
        print(f"  Match Type: {result.match_type}")
        print(f"  Suspicious: {'yes' if suspicious else 'no'}")
        if verbose and result.raw_response:
            print(f"  Raw Response: {result.raw_response}")
    else:
        print(f"✗ No match found")


async def test_reverse(lat: float, lon: float) -> None:
    """Test a reverse lookup for a postal code."""
    print(f"\nReverse geocoding: {lat}, {lon}")
    print("-" * 50)

    postcode = await NominatimGeocoder().reverse_geocode(lat, lon)
    if postcode:
        print(f"✓ Postal code: {postcode}")
    else:
        print(f"✗ No postal code found")


def main():
    parser = argparse.ArgumentParser(
        description="Geocoding CLI for property listings"
    )

    parser.add_argument(
        "--address", "-a",
        type=str,
        help="Geocode a single query"
    )
    parser.add_argument(
        "--raw",
        action="store_true",
        help="Send the query without expanding a trailing state code"
    )
    parser.add_argument(
        "--reverse", "-r",
        type=float,
        nargs=2,
        metavar=("LAT", "LON"),
        help="Look up the postal code at a coordinate"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )

    args = parser.parse_args()

    if args.address:
        asyncio.run(test_single_address(args.address, args.raw, args.verbose))
    elif args.reverse:
        asyncio.run(test_reverse(*args.reverse))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
