"""
Route catalog, link builders and deep link parser.

Usage:
    from deeplinks.utils.routing import DeepLinkBuilder, DeepLinkParser, RouteName

    uri = DeepLinkBuilder().place_detail("p_123")
    intent = DeepLinkParser().parse(uri)
    assert intent.route_name is RouteName.PLACE_DETAIL
"""
from deeplinks.utils.routing.builder import (
    DeepLinkBuilder,
    build_atlas_uri,
    build_journey_category_uri,
    build_place_detail_uri,
)
from deeplinks.utils.routing.catalog import (
    JOURNEY_CATEGORIES,
    MAIN_TABS,
    CatalogError,
    RouteCatalog,
    RouteName,
    default_catalog,
    load_catalog,
)
from deeplinks.utils.routing.parser import (
    DeepLinkParser,
    RouteIntent,
    parse_deep_link,
    route_name_for_journey_path,
)

__all__ = [
    "CatalogError",
    "DeepLinkBuilder",
    "DeepLinkParser",
    "JOURNEY_CATEGORIES",
    "MAIN_TABS",
    "RouteCatalog",
    "RouteIntent",
    "RouteName",
    "build_atlas_uri",
    "build_journey_category_uri",
    "build_place_detail_uri",
    "default_catalog",
    "load_catalog",
    "parse_deep_link",
    "route_name_for_journey_path",
]
