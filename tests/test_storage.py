import json

import pytest

from property_mapper.models import PropertyRecord
from property_mapper.storage import (
    PersistedStateCorrupt,
    load_properties,
    merge_properties,
    save_properties,
)

from conftest import make_record


def test_save_writes_nulls_and_persisted_keys(tmp_path):
    path = tmp_path / "properties.json"
    save_properties([make_record()], path)

    data = json.loads(path.read_text())

    assert data == [{
        "title": "The Meadows at Canton",
        "url": "https://gshrealestate.com/portfolio/the-meadows/",
        "image": None,
        "description": None,
        "address": "Address Not Found",
        "location_field": None,
        "lat": None,
        "lon": None,
        "zip_code": None,
    }]


def test_saved_collection_loads_back(tmp_path):
    path = tmp_path / "nested" / "properties.json"
    records = [
        make_record(url="https://example.com/1", address="Canton, MI 48187",
                    lat=42.31, lon=-83.48, postal_code="48187"),
        make_record(url="https://example.com/2"),
    ]

    save_properties(records, path)
    loaded = load_properties(path)

    assert [r.to_json_dict() for r in loaded] == [r.to_json_dict() for r in records]
    assert loaded[0].postal_code == "48187"
    assert not list(path.parent.glob(".properties.json.*"))


def test_load_reads_original_key_names(tmp_path):
    path = tmp_path / "properties.json"
    path.write_text(json.dumps([{
        "title": "Oak Park",
        "url": "https://example.com/oak",
        "image": None,
        "description": None,
        "address": "Novi, MI 48375",
        "location_field": "Novi, MI",
        "lat": 42.48,
        "lon": -83.47,
        "zip_code": "48375",
    }]))

    record = load_properties(path)[0]

    assert record.postal_code == "48375"
    assert record.coordinates == (42.48, -83.47)


def test_missing_file(tmp_path):
    path = tmp_path / "missing.json"

    assert load_properties(path, missing_ok=True) == []
    with pytest.raises(PersistedStateCorrupt):
        load_properties(path)


@pytest.mark.parametrize("content", [
    "{not json",
    json.dumps({"url": "https://example.com"}),
    json.dumps([{"title": "no url"}]),
    json.dumps([{"url": "https://example.com", "lat": 42.0, "lon": None}]),
])
def test_corrupt_collection_is_fatal(tmp_path, content):
    path = tmp_path / "properties.json"
    path.write_text(content)

    with pytest.raises(PersistedStateCorrupt):
        load_properties(path)


def test_merge_keeps_existing_records_and_appends_new():
    existing = [make_record(url="https://example.com/1", lat=42.3, lon=-83.4, postal_code="48187")]
    scraped = [
        make_record(url="https://example.com/1"),
        make_record(url="https://example.com/2"),
        make_record(url="https://example.com/2"),
    ]

    merged = merge_properties(existing, scraped)

    assert [r.url for r in merged] == ["https://example.com/1", "https://example.com/2"]
    assert merged[0].postal_code == "48187"
    assert merged[0].coordinates == (42.3, -83.4)


def test_record_rejects_partial_coordinates():
    with pytest.raises(ValueError):
        PropertyRecord(url="https://example.com", lat=42.0)


def test_apply_postal_code_is_monotonic():
    record = make_record(address="Canton, MI")

    record.apply_postal_code("48187")
    record.apply_postal_code("48188")

    assert record.postal_code == "48187"
    assert record.address == "Canton, MI 48187"


def test_apply_postal_code_keeps_sentinel_address():
    record = make_record(lat=42.31, lon=-83.48)
    record.apply_postal_code("48187")

    assert record.postal_code == "48187"
    assert record.address == "Address Not Found"
