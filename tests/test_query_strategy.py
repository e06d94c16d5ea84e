from property_mapper.resolution.queries import QueryStrategyBuilder

from conftest import make_record


def test_title_and_location_combined_first():
    builder = QueryStrategyBuilder()
    record = make_record(
        title="Lakeside Villas",
        location_field="Canton, MI",
        address="Canton, MI",
    )

    candidates = builder.candidates(record)

    assert candidates[0] == "Lakeside Villas, Canton, MI"
    assert candidates[1] == "Canton, MI"


def test_location_alone_without_title():
    builder = QueryStrategyBuilder()
    record = make_record(title=None, location_field="Canton, MI", address="Canton, MI")

    assert builder.candidates(record) == ["Canton, MI"]


def test_description_address_used_when_no_location():
    builder = QueryStrategyBuilder()
    record = make_record(description="123 Main St, Canton, MI")

    assert builder.candidates(record) == [
        "The Meadows at Canton, 123 Main St, Canton, MI",
        "123 Main St, Canton, MI",
        "Canton, USA",
        "The Meadows at Canton, USA",
    ]


def test_stored_address_used_when_location_field_missing():
    builder = QueryStrategyBuilder()
    record = make_record(title="Oak Park", address="Novi, MI 48375", location_field=None)

    assert builder.candidates(record)[0] == "Oak Park, Novi, MI 48375"


def test_title_place_fallback_without_any_location():
    builder = QueryStrategyBuilder()
    record = make_record(title="The Meadows at Canton", description="Great amenities.")

    assert builder.candidates(record) == [
        "Canton, USA",
        "The Meadows at Canton, USA",
    ]


def test_title_only_fallback():
    builder = QueryStrategyBuilder()
    record = make_record(title="Sunset Ridge")

    assert builder.candidates(record) == ["Sunset Ridge, USA"]


def test_no_title_and_no_location_yields_nothing():
    builder = QueryStrategyBuilder()
    record = make_record(title=None)

    assert builder.candidates(record) == []


def test_candidates_have_no_duplicates_or_empties():
    builder = QueryStrategyBuilder()
    record = make_record(title="Canton, USA", location_field="Canton, USA")

    candidates = builder.candidates(record)

    assert len(candidates) == len(set(candidates))
    assert all(candidates)
    assert candidates[-1] == "Canton, USA"


def test_sentinel_location_field_is_ignored():
    builder = QueryStrategyBuilder()
    record = make_record(title="Sunset Ridge", location_field="Address Not Found")

    assert builder.candidates(record) == ["Sunset Ridge, USA"]


def test_queries_expand_trailing_state_code():
    builder = QueryStrategyBuilder()
    record = make_record(description="123 Main St, Canton, MI")

    queries = builder.queries(record)

    assert queries[0] == "The Meadows at Canton, 123 Main St, Canton, Michigan"
    assert queries[1] == "123 Main St, Canton, Michigan"
    assert not any(query.endswith("MI, USA") for query in queries)


def test_custom_address_detector():
    builder = QueryStrategyBuilder(address_detector=lambda text: "Plymouth, MI" if text else None)
    record = make_record(title="Hillside", description="anything")

    assert builder.candidates(record)[:2] == ["Hillside, Plymouth, MI", "Plymouth, MI"]


def test_custom_country_suffix():
    builder = QueryStrategyBuilder(country_suffix="United States")
    record = make_record(title="Sunset Ridge")

    assert builder.candidates(record) == ["Sunset Ridge, United States"]


def test_country_variant_added_only_without_region():
    builder = QueryStrategyBuilder()

    assert builder.with_country("Lakeside Villas, Canton") == "Lakeside Villas, Canton, USA"
    assert builder.with_country("123 Main St, Canton, MI") == "123 Main St, Canton, MI"
    assert builder.with_country("Canton, MI 48187") == "Canton, MI 48187"
    assert builder.with_country("Canton, Michigan") == "Canton, Michigan"


def test_location_without_region_gets_country_variant():
    builder = QueryStrategyBuilder()
    record = make_record(title="Hillside", location_field="Plymouth Township")

    assert builder.candidates(record) == [
        "Hillside, Plymouth Township",
        "Plymouth Township",
        "Hillside, Plymouth Township, USA",
        "Plymouth Township, USA",
        "Hillside, USA",
    ]
