"""
JSON persistence for the property record collection.

The collection is read whole at the start of a pass and written whole at the
end. Writes go to a temporary file that replaces the target, so a crash in the
middle of a save leaves the previous collection intact.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Sequence, Union

from pydantic import ValidationError

from property_mapper.models import PropertyRecord

logger = logging.getLogger(__name__)


class PersistedStateCorrupt(Exception):
    """Raised when the persisted collection cannot be parsed."""

    def __init__(self, message: str, path: Union[str, Path] = ""):
        self.message = message
        self.path = str(path)
        super().__init__(f"{self.path}: {message}" if self.path else message)


def load_properties(path: Union[str, Path], missing_ok: bool = False) -> List[PropertyRecord]:
    """
    Load the record collection from a JSON file.

    Args:
        path: JSON file holding a list of records
        missing_ok: Return an empty list if the file does not exist

    Returns:
        List of PropertyRecord in file order

    Raises:
        PersistedStateCorrupt: File missing (unless missing_ok), not valid
            JSON, not a list, or holding an invalid record
    """
    path = Path(path)

    if not path.exists():
        if missing_ok:
            logger.info(f"No collection at {path}, starting empty")
            return []
        raise PersistedStateCorrupt("file not found", path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise PersistedStateCorrupt(f"unreadable collection: {e}", path) from e

    if not isinstance(data, list):
        raise PersistedStateCorrupt(
            f"expected a list of records, got {type(data).__name__}", path
        )

    records = []
    for index, item in enumerate(data):
        try:
            records.append(PropertyRecord.model_validate(item))
        except ValidationError as e:
            raise PersistedStateCorrupt(f"invalid record at index {index}: {e}", path) from e

    logger.info(f"Loaded {len(records)} properties from {path}")
    return records


def save_properties(records: Sequence[PropertyRecord], path: Union[str, Path]) -> None:
    """Write the whole collection to path, replacing the previous file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = json.dumps(
        [record.to_json_dict() for record in records],
        indent=2,
        ensure_ascii=False,
    )

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    logger.info(f"Saved {len(records)} properties to {path}")


def merge_properties(
    existing: Sequence[PropertyRecord],
    scraped: Sequence[PropertyRecord]
) -> List[PropertyRecord]:
    """
    Merge freshly scraped records into an existing collection.

    Records already present (by URL) are kept untouched so their geocoding
    and postal enrichment survive a re-scrape. New URLs are appended in
    scrape order.
    """
    merged = list(existing)
    known = {record.url for record in existing}

    for record in scraped:
        if record.url in known:
            continue
        known.add(record.url)
        merged.append(record)

    return merged
