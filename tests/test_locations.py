from jobintel.services.locations import (
    ParsedLocation,
    classify_market,
    is_primary_market_match,
    normalize_country,
    parse_location,
)


def test_parse_location_splits_city_and_country() -> None:
    assert parse_location("Tel Aviv, Israel") == ParsedLocation(city="Tel Aviv", country="Israel")


def test_parse_location_resolves_known_city_without_country() -> None:
    assert parse_location("Bangalore") == ParsedLocation(city="Bangalore", country="India")


def test_parse_location_treats_two_letter_suffix_as_us_state() -> None:
    assert parse_location("New York, NY") == ParsedLocation(city="New York", country="United States")


def test_parse_location_strips_remote_prefix() -> None:
    assert parse_location("Remote – New York, NY") == ParsedLocation(city="New York", country="United States")
    assert parse_location("Remote - Berlin, Germany") == ParsedLocation(city="Berlin", country="Germany")


def test_parse_location_strips_parenthetical_work_model_suffix() -> None:
    assert parse_location("Berlin (Hybrid)") == ParsedLocation(city="Berlin", country="Germany")
    assert parse_location("London, UK (Remote friendly)") == ParsedLocation(city="London", country="United Kingdom")


def test_parse_location_returns_nulls_for_remote_only_and_empty_input() -> None:
    assert parse_location("Remote") == ParsedLocation(city=None, country=None)
    assert parse_location("   ") == ParsedLocation(city=None, country=None)
    assert parse_location(None) == ParsedLocation(city=None, country=None)
    assert parse_location(42) == ParsedLocation(city=None, country=None)


def test_parse_location_single_token_country_and_short_city() -> None:
    assert parse_location("Germany") == ParsedLocation(city=None, country="Germany")
    assert parse_location("usa") == ParsedLocation(city=None, country="United States")
    assert parse_location("Foo") == ParsedLocation(city="Foo", country=None)
    assert parse_location("new caledonia") == ParsedLocation(city=None, country="New Caledonia")


def test_parse_location_multi_part_uses_last_part_as_country() -> None:
    assert parse_location("San Francisco, CA, USA") == ParsedLocation(city="San Francisco, CA", country="United States")
    assert parse_location("Lyon / France") == ParsedLocation(city="Lyon", country="France")
    assert parse_location("London, UK") == ParsedLocation(city="London", country="United Kingdom")


def test_parse_location_keeps_hyphenated_city_names_whole() -> None:
    assert parse_location("Tel-Aviv") == ParsedLocation(city="Tel Aviv", country="Israel")


def test_parse_location_falls_back_to_first_part_city_lookup() -> None:
    assert parse_location("Bangalore, ka") == ParsedLocation(city="Bangalore", country="India")
    assert parse_location("Springfield, zz") == ParsedLocation(city="Springfield", country=None)


def test_normalize_country_uses_aliases_then_title_case() -> None:
    assert normalize_country("U.S.") == "United States"
    assert normalize_country("uk") == "United Kingdom"
    assert normalize_country("  new   zealand ") == "New Zealand"
    assert normalize_country("costa rica") == "Costa Rica"
    assert normalize_country("") is None
    assert normalize_country(None) is None


def test_is_primary_market_match_compares_normalized_countries() -> None:
    assert is_primary_market_match("USA", "United States") is True
    assert is_primary_market_match("israel", "IL") is True
    assert is_primary_market_match("Germany", "United States") is False
    assert is_primary_market_match(None, "United States") is False
    assert is_primary_market_match("Germany", "") is False


def test_classify_market_is_unknown_when_either_side_is_missing() -> None:
    assert classify_market("Israel", "Israel") is True
    assert classify_market("Israel", "India") is False
    assert classify_market(None, "Israel") is None
    assert classify_market("Israel", None) is None


def test_parse_location_splits_on_bare_hyphen_when_no_other_separator() -> None:
    assert parse_location("Berlin-Germany") == ParsedLocation(city="Berlin", country="Germany")
    assert parse_location("Seattle-WA") == ParsedLocation(city="Seattle", country="United States")
    assert parse_location("Winston-Salem, NC") == ParsedLocation(city="Winston-Salem", country="United States")
