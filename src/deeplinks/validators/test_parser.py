"""
Deep link parser validators.

Covers:
- Rule priority: place detail, atlas, journey category, main tab, default
- Place id extraction (last segment, empty-segment normalization, empty id)
- Query pass-through without type conversion
- Totality: no input makes the parser raise
- Percent-encoded paths resolve like their decoded form
- RouteIntent immutability, hashing and idempotent parsing
"""
from urllib.parse import urlparse, urlsplit

import pytest

from deeplinks.utils.routing.catalog import JOURNEY_CATEGORIES, RouteCatalog, RouteName
from deeplinks.utils.routing.parser import (
    DeepLinkParser,
    JourneyCategoryRule,
    RouteIntent,
    parse_deep_link,
    route_name_for_journey_path,
)


# ---------------------------------------------------------------------------
# Place detail
# ---------------------------------------------------------------------------


@pytest.mark.parser
def test_place_detail_link(parser):
    """
    Given: A link to /place/abc123
    When: Parsing it
    Then: place_detail with id abc123 and no query
    """
    intent = parser.parse("/place/abc123")

    assert intent == RouteIntent(
        route_name=RouteName.PLACE_DETAIL,
        path_params={"id": "abc123"},
        query_params={},
    )
    assert not intent.is_fallback


@pytest.mark.parser
def test_place_detail_takes_last_segment(parser):
    intent = parser.parse("https://app.local/place/region/kerala/p_9")

    assert intent.route_name is RouteName.PLACE_DETAIL
    assert dict(intent.path_params) == {"id": "p_9"}


@pytest.mark.parser
def test_place_detail_ignores_empty_segments(parser):
    intent = parser.parse("https://app.local/place//abc123//")

    assert dict(intent.path_params) == {"id": "abc123"}


@pytest.mark.parser
@pytest.mark.parametrize("uri", [
    "/place",
    "/place/",
    "https://app.local/place",
    "https://app.local/place///",
])
def test_place_detail_without_id_yields_empty_id(parser, uri):
    """
    Given: A place link with nothing after the prefix
    When: Parsing it
    Then: place_detail with an empty id (accepted, not an error), flagged
          through has_missing_params
    """
    intent = parser.parse(uri)

    assert intent.route_name is RouteName.PLACE_DETAIL
    assert intent.path_params["id"] == ""
    assert intent.has_missing_params
    assert not intent.is_fallback


@pytest.mark.parser
def test_place_prefix_is_a_plain_string_prefix(parser):
    """
    Given: A path that merely starts with the characters "/place"
    When: Parsing it
    Then: The place rule still claims it; the id is whatever follows the
          first segment
    """
    intent = parser.parse("/places/abc")

    assert intent.route_name is RouteName.PLACE_DETAIL
    assert intent.path_params["id"] == "abc"


@pytest.mark.parser
def test_place_detail_keeps_query(parser):
    intent = parser.parse("https://app.local/place/p_1?ref=share&utm=wa")

    assert dict(intent.query_params) == {"ref": "share", "utm": "wa"}


@pytest.mark.parser
def test_place_id_is_percent_decoded(parser):
    intent = parser.parse("https://app.local/place/a%20b%2Fc")

    assert intent.path_params["id"] == "a b/c"


@pytest.mark.parser
@pytest.mark.parametrize("uri, expected", [
    ("https://app.local/atl%61s", RouteName.ATLAS),
    ("https://app.local/journey/fl%69ghts", RouteName.FLIGHT_SEARCH),
    ("https://app.local/navee%2Dai", RouteName.NAVEE_AI),
])
def test_encoded_paths_match_their_decoded_route(parser, uri, expected):
    """
    Given: A link whose path has percent-encoded unreserved characters
    When: Parsing it
    Then: It resolves like the decoded path, not to the fallback
    """
    intent = parser.parse(uri)

    assert intent.route_name == expected
    assert not intent.is_fallback


@pytest.mark.parser
def test_encoded_place_prefix_keeps_encoded_slash_in_id(parser):
    intent = parser.parse("https://app.local/pl%61ce/x%2Fy")

    assert intent.route_name == RouteName.PLACE_DETAIL
    assert intent.path_params["id"] == "x/y"


# ---------------------------------------------------------------------------
# Atlas, journey categories, main tabs
# ---------------------------------------------------------------------------


@pytest.mark.parser
def test_atlas_link_with_query(parser):
    intent = parser.parse("/atlas?trending=true")

    assert intent == RouteIntent(
        route_name=RouteName.ATLAS,
        path_params={},
        query_params={"trending": "true"},
    )
    assert not intent.is_fallback


@pytest.mark.parser
def test_atlas_requires_exact_path(parser):
    """
    Given: /atlas with a trailing slash or extra segment
    When: Parsing it
    Then: The atlas rule does not match; the default route is used
    """
    for uri in ("/atlas/", "/atlas/map"):
        intent = parser.parse(uri)
        assert intent.route_name is RouteName.ATLAS
        assert intent.is_fallback, uri


@pytest.mark.parser
def test_atlas_path_resolves_by_exact_rule(parser):
    intent = parser.parse("https://app.local/atlas")

    assert intent.route_name is RouteName.ATLAS
    assert dict(intent.path_params) == {}
    assert not intent.is_fallback


@pytest.mark.parser
@pytest.mark.parametrize("path, expected", [
    ("/journey/flights", RouteName.FLIGHT_SEARCH),
    ("/journey/trains", RouteName.TRAIN_SEARCH),
    ("/journey/buses", RouteName.BUS_SEARCH),
    ("/journey/cabs", RouteName.CAB_SEARCH),
    ("/journey/hotels", RouteName.HOTEL_SEARCH),
    ("/journey/restaurants", RouteName.RESTAURANT_SEARCH),
    ("/journey/activities", RouteName.ACTIVITY_SEARCH),
    ("/journey/places", RouteName.PLACE_SEARCH),
])
def test_journey_category_links(parser, path, expected):
    intent = parser.parse(f"https://app.local{path}?from=BLR&to=DEL")

    assert intent.route_name is expected
    assert dict(intent.path_params) == {}
    assert dict(intent.query_params) == {"from": "BLR", "to": "DEL"}


@pytest.mark.parser
@pytest.mark.parametrize("path", [
    "/journey/flights/results",
    "/journey/my-bookings",
    "/journey/flights/",
])
def test_journey_subpaths_fall_back(parser, path):
    intent = parser.parse(path)

    assert intent.route_name is RouteName.ATLAS
    assert intent.is_fallback


@pytest.mark.parser
def test_journey_path_helper_keeps_generic_fallback(catalog):
    """
    Given: The journey path -> route lookup
    When: Asked for a path outside the eight categories
    Then: It answers with the generic journey route
    """
    assert route_name_for_journey_path("/journey/cabs") is RouteName.CAB_SEARCH
    assert route_name_for_journey_path("/journey/ferries") is RouteName.JOURNEY
    assert JourneyCategoryRule(catalog).route_name_for_path("/journey") is RouteName.JOURNEY


@pytest.mark.parser
@pytest.mark.parametrize("path, expected", [
    ("/home", RouteName.HOME),
    ("/trails", RouteName.TRAILS),
    ("/journey", RouteName.JOURNEY),
    ("/navee-ai", RouteName.NAVEE_AI),
])
def test_main_tab_links(parser, path, expected):
    intent = parser.parse(f"{path}?tab=1")

    assert intent.route_name is expected
    assert dict(intent.path_params) == {}
    assert dict(intent.query_params) == {"tab": "1"}
    assert not intent.is_fallback


# ---------------------------------------------------------------------------
# Default route
# ---------------------------------------------------------------------------


@pytest.mark.parser
def test_unknown_path_falls_back_to_atlas(parser):
    """
    Given: A link to a path no rule knows
    When: Parsing it
    Then: atlas with no path params and the link's query passed through
    """
    intent = parser.parse("https://app.local/totally/unknown/path?x=1&y=two")

    assert intent.route_name is RouteName.ATLAS
    assert dict(intent.path_params) == {}
    assert dict(intent.query_params) == {"x": "1", "y": "two"}
    assert intent.is_fallback


@pytest.mark.parser
@pytest.mark.parametrize("uri", [
    "https://app.local",
    "https://app.local/",
    "/settings",
    "/home/history",
    "naveeka://place/abc",
])
def test_other_paths_fall_back(parser, uri):
    intent = parser.parse(uri)

    assert intent.route_name is RouteName.ATLAS
    assert intent.is_fallback


@pytest.mark.parser
@pytest.mark.parametrize("uri", [
    "",
    "   ",
    "::::",
    "http://[invalid",
    "https://app.local/place/%zz",
    "?only=query",
    "#fragment",
    None,
    42,
    b"/place/abc",
])
def test_parser_never_raises(parser, uri):
    intent = parser.parse(uri)

    assert isinstance(intent, RouteIntent)
    assert isinstance(intent.route_name, RouteName)


@pytest.mark.parser
def test_unsplittable_input_uses_default_without_params(parser):
    intent = parser.parse("http://[invalid")

    assert intent.route_name is RouteName.ATLAS
    assert intent.is_fallback
    assert dict(intent.path_params) == {}
    assert dict(intent.query_params) == {}


@pytest.mark.parser
def test_query_only_link_keeps_its_query(parser):
    intent = parser.parse("?only=query")

    assert intent.is_fallback
    assert dict(intent.query_params) == {"only": "query"}


# ---------------------------------------------------------------------------
# Query parameters
# ---------------------------------------------------------------------------


@pytest.mark.parser
def test_query_values_stay_strings(parser):
    """
    Given: Query values that look like numbers and booleans
    When: Parsing the link
    Then: They are returned as the original strings
    """
    intent = parser.parse("/atlas?radius=5.0&nearby=true&zoom=11&empty=")

    assert dict(intent.query_params) == {
        "radius": "5.0",
        "nearby": "true",
        "zoom": "11",
        "empty": "",
    }


@pytest.mark.parser
def test_query_values_are_decoded(parser):
    intent = parser.parse("/atlas?q=goa%20beach&region=north+goa&tag=%26")

    assert dict(intent.query_params) == {"q": "goa beach", "region": "north goa", "tag": "&"}


@pytest.mark.parser
def test_repeated_query_key_keeps_last_value(parser):
    intent = parser.parse("/atlas?category=Nature&category=Heritage")

    assert dict(intent.query_params) == {"category": "Heritage"}


# ---------------------------------------------------------------------------
# Inputs, immutability, custom catalogs
# ---------------------------------------------------------------------------


@pytest.mark.parser
def test_accepts_split_and_parse_results(parser):
    uri = "https://app.local/place/p_5?ref=qr"
    expected = parser.parse(uri)

    assert parser.parse(urlsplit(uri)) == expected
    assert parser.parse(urlparse(uri)) == expected


@pytest.mark.parser
def test_parsing_is_idempotent(parser):
    uri = "https://app.local/journey/hotels?guests=2"

    assert parser.parse(uri) == parser.parse(uri)
    assert parser.parse(uri) == DeepLinkParser().parse(uri)


@pytest.mark.parser
def test_intent_is_immutable(parser):
    intent = parser.parse("/place/p_1?x=1")

    with pytest.raises(TypeError):
        intent.query_params["x"] = "2"
    with pytest.raises(TypeError):
        intent.path_params["id"] = "other"
    with pytest.raises(AttributeError):
        intent.route_name = RouteName.HOME


@pytest.mark.parser
def test_intent_to_dict_and_str(parser):
    intent = parser.parse("/place/p_1?x=1")

    assert intent.to_dict() == {
        "route_name": "place_detail",
        "path_params": {"id": "p_1"},
        "query_params": {"x": "1"},
        "is_fallback": False,
    }
    assert "place_detail" in str(intent)


@pytest.mark.parser
def test_intent_is_hashable(parser):
    """
    Given: Two parses of the same link and one of another link
    When: Hashing them and collecting them in a set
    Then: Equal intents hash equally and duplicates collapse
    """
    first = parser.parse("/place/p_1?x=1")
    again = parser.parse("/place/p_1?x=1")
    other = parser.parse("/atlas")

    assert hash(first) == hash(again)
    assert {first, again, other} == {first, other}


@pytest.mark.parser
def test_custom_catalog_paths_drive_matching(catalog_data):
    """
    Given: A catalog that moves flights to /j/fly and places to /spot/:id
    When: Parsing links
    Then: The new paths match and the old ones fall back
    """
    catalog_data["routes"]["flight_search"] = "/j/fly"
    catalog_data["routes"]["place_detail"] = "/spot/:id"
    parser = DeepLinkParser(RouteCatalog.from_dict(catalog_data))

    assert parser.parse("/j/fly").route_name is RouteName.FLIGHT_SEARCH
    assert parser.parse("/spot/s_1").path_params["id"] == "s_1"
    assert parser.parse("/journey/flights").is_fallback
    assert parser.parse("/place/p_1").is_fallback


@pytest.mark.parser
def test_place_rule_is_checked_first(catalog_data):
    """
    Given: A catalog whose atlas path also starts with the place prefix
    When: Parsing the atlas path
    Then: The place rule wins, since it is tried first
    """
    catalog_data["routes"]["atlas"] = "/place-map"
    parser = DeepLinkParser(RouteCatalog.from_dict(catalog_data))

    assert parser.parse("/place-map").route_name is RouteName.PLACE_DETAIL


@pytest.mark.parser
def test_every_journey_category_is_reachable(parser, catalog):
    names = {parser.parse(catalog.path(name)).route_name for name in JOURNEY_CATEGORIES}

    assert names == set(JOURNEY_CATEGORIES)


@pytest.mark.parser
def test_module_helper_uses_bundled_catalog():
    assert parse_deep_link("/trails").route_name is RouteName.TRAILS
