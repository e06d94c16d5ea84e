#!/usr/bin/env python3
"""
Property Mapper

Scrapes property listings from the portfolio site, geocodes each listing with
OpenStreetMap Nominatim, and adds postal codes. Every pass reads the JSON
collection, updates it, and writes it back whole.

Usage:
    python main.py                    # Run all passes (scrape, resolve, postal)
    python main.py --scrape           # Only scrape listings and geocode new ones
    python main.py --resolve          # Only fix missing/suspicious coordinates
    python main.py --postal           # Only add postal codes
    python main.py --resolve --postal # Re-run the enrichment passes
    python main.py --file out.json    # Use a different collection file
    python main.py --dry-run          # Run without saving

Features:
    - Multiple query strategies per listing, most specific first
    - Rejects coordinates that land in the wrong state
    - Safe to re-run: resolved records and postal codes are kept
    - Rate limiting to respect the Nominatim usage policy
"""
import argparse
import asyncio
import logging
import sys
from datetime import datetime

from property_mapper.core import settings
from property_mapper.pipeline import PASSES, PropertyPipeline
from property_mapper.storage import PersistedStateCorrupt

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        logging.FileHandler('pipeline.log')
    ]
)
logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Scrape, geocode and postal-enrich property listings'
    )

    parser.add_argument('--scrape', action='store_true',
                        help='Scrape listings and geocode new ones')
    parser.add_argument('--resolve', action='store_true',
                        help='Re-geocode missing or suspicious coordinates')
    parser.add_argument('--postal', action='store_true',
                        help='Add postal codes via reverse geocoding')
    parser.add_argument('--file', type=str, default=None,
                        help=f'Collection file (default: {settings.PROPERTIES_FILE})')
    parser.add_argument('--limit', type=int, default=None,
                        help='Limit number of items to process (for testing)')
    parser.add_argument('--dry-run', action='store_true',
                        help="Don't write the collection file")
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Verbose output')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    passes = [name for name in PASSES if getattr(args, name)] or list(PASSES)

    pipeline = PropertyPipeline(
        path=args.file,
        dry_run=args.dry_run,
        limit=args.limit,
    )

    logger.info("=" * 60)
    logger.info(f"Starting property mapper: {', '.join(passes)}")
    logger.info("=" * 60)
    start_time = datetime.now()

    try:
        asyncio.run(pipeline.run(passes))
    except PersistedStateCorrupt as e:
        logger.error(f"Cannot read property collection: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("\nInterrupted by user. The current pass was not saved.")
        return 130

    logger.info(f"Pipeline completed in {datetime.now() - start_time}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
