import asyncio
import json

import pytest

import main as cli
from property_mapper.pipeline import PropertyPipeline
from property_mapper.storage import PersistedStateCorrupt, load_properties, save_properties

from conftest import FakeGeocoder, make_record


class FakeScraper:
    def __init__(self, records):
        self.records = records
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

    async def scrape(self, limit=None):
        return list(self.records)


def test_full_run_scrapes_resolves_and_adds_postal_codes(tmp_path):
    path = tmp_path / "properties.json"
    geocoder = FakeGeocoder(
        forward={"The Meadows at Canton, 123 Main St, Canton, Michigan": (42.31, -83.48)},
        reverse={(42.31, -83.48): "48187"},
    )
    scraper = FakeScraper([
        make_record(
            description="123 Main St, Canton, MI",
            address="123 Main St, Canton, MI",
            location_field="123 Main St, Canton, MI",
        ),
    ])

    pipeline = PropertyPipeline(path=path, geocoder=geocoder, scraper=scraper)
    asyncio.run(pipeline.run())

    saved = json.loads(path.read_text())
    assert saved[0]["lat"] == 42.31
    assert saved[0]["lon"] == -83.48
    assert saved[0]["zip_code"] == "48187"
    assert saved[0]["address"] == "123 Main St, Canton, MI 48187"
    assert scraper.closed


def test_rescrape_keeps_existing_enrichment(tmp_path):
    path = tmp_path / "properties.json"
    save_properties([
        make_record(url="https://example.com/1", address="Canton, MI 48187",
                    lat=42.31, lon=-83.48, postal_code="48187"),
    ], path)
    geocoder = FakeGeocoder()
    scraper = FakeScraper([
        make_record(url="https://example.com/1", address="Canton, MI"),
        make_record(url="https://example.com/2", title="Sunset Ridge"),
    ])

    pipeline = PropertyPipeline(path=path, geocoder=geocoder, scraper=scraper)
    summary = asyncio.run(pipeline.run_scrape())

    records = load_properties(path)
    assert [r.url for r in records] == ["https://example.com/1", "https://example.com/2"]
    assert records[0].address == "Canton, MI 48187"
    assert summary.examined == 1
    assert summary.failed == 1
    assert geocoder.forward_calls == ["Sunset Ridge, USA"]


def test_resolve_pass_fixes_suspicious_record(tmp_path):
    path = tmp_path / "properties.json"
    save_properties([
        make_record(address="Canton, MI", location_field="Canton, MI", lat=32.0, lon=-90.0),
    ], path)
    geocoder = FakeGeocoder(forward={"Canton, Michigan": (42.31, -83.48)})

    pipeline = PropertyPipeline(path=path, geocoder=geocoder)
    summary = asyncio.run(pipeline.run_resolve())

    assert summary.resolved == 1
    assert load_properties(path)[0].coordinates == (42.31, -83.48)


def test_scrape_leaves_known_unresolved_records_to_resolve_pass(tmp_path):
    path = tmp_path / "properties.json"
    save_properties([make_record(url="https://example.com/1", title="Nowhere Flats")], path)
    geocoder = FakeGeocoder()
    scraper = FakeScraper([make_record(url="https://example.com/1", title="Nowhere Flats")])

    pipeline = PropertyPipeline(path=path, geocoder=geocoder, scraper=scraper)
    asyncio.run(pipeline.run(["scrape", "resolve"]))

    assert geocoder.forward_calls == ["Nowhere Flats, USA"]


def test_postal_code_waits_for_accepted_coordinates(tmp_path):
    path = tmp_path / "properties.json"
    save_properties([
        make_record(address="Canton, MI", location_field="Canton, MI", lat=32.0, lon=-90.0),
    ], path)

    first = FakeGeocoder(reverse={(32.0, -90.0): "39046"})
    asyncio.run(PropertyPipeline(path=path, geocoder=first).run(["resolve", "postal"]))

    record = load_properties(path)[0]
    assert record.coordinates == (32.0, -90.0)
    assert record.postal_code is None
    assert first.reverse_calls == []

    second = FakeGeocoder(
        forward={"Canton, Michigan": (42.31, -83.48)},
        reverse={(32.0, -90.0): "39046", (42.31, -83.48): "48187"},
    )
    asyncio.run(PropertyPipeline(path=path, geocoder=second).run(["resolve", "postal"]))

    record = load_properties(path)[0]
    assert record.coordinates == (42.31, -83.48)
    assert record.postal_code == "48187"
    assert record.address == "Canton, MI 48187"


def test_dry_run_does_not_write(tmp_path):
    path = tmp_path / "properties.json"
    save_properties([make_record(address="Canton, MI", lat=42.31, lon=-83.48)], path)
    before = path.read_text()
    geocoder = FakeGeocoder(reverse={(42.31, -83.48): "48187"})

    pipeline = PropertyPipeline(path=path, geocoder=geocoder, dry_run=True)
    asyncio.run(pipeline.run(["resolve", "postal"]))

    assert path.read_text() == before


def test_corrupt_collection_aborts_before_network(tmp_path):
    path = tmp_path / "properties.json"
    path.write_text("[{broken")
    geocoder = FakeGeocoder()

    pipeline = PropertyPipeline(path=path, geocoder=geocoder)
    with pytest.raises(PersistedStateCorrupt):
        asyncio.run(pipeline.run(["resolve", "postal"]))

    assert geocoder.forward_calls == []
    assert geocoder.reverse_calls == []


def test_unknown_pass_rejected(tmp_path):
    pipeline = PropertyPipeline(path=tmp_path / "p.json", geocoder=FakeGeocoder())
    with pytest.raises(ValueError):
        asyncio.run(pipeline.run(["geocode"]))


def test_cli_exit_status_on_corrupt_collection(tmp_path):
    path = tmp_path / "properties.json"
    path.write_text("not json")

    assert cli.main(["--resolve", "--file", str(path)]) == 1


def test_cli_per_property_failures_do_not_change_exit_status(tmp_path, monkeypatch):
    path = tmp_path / "properties.json"
    save_properties([make_record(title="Nowhere Flats")], path)

    monkeypatch.setattr(
        "property_mapper.pipeline.NominatimGeocoder",
        lambda: FakeGeocoder(),
    )

    assert cli.main(["--resolve", "--file", str(path)]) == 0
    assert load_properties(path)[0].coordinates is None
