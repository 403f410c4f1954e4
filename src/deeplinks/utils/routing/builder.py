"""
Deep Link Builders
==================
Construct shareable URIs for logical destinations of the app.

Every builder fills a path template from the route catalog and attaches a
query string assembled only from the parameters that were supplied (None
values never appear as ``key=None``). Booleans are written as
``"true"``/``"false"``, numbers with ``str()``.

Scheme and host default to the catalog's defaults (``https`` /
``app.local``) and can be overridden per builder or per call.

Usage:
    from deeplinks.utils.routing.builder import DeepLinkBuilder

    builder = DeepLinkBuilder()
    builder.atlas(query="beach", radius_km=5.0)
    # https://app.local/atlas?q=beach&radius=5.0

    builder.place_detail("p_123")
    # https://app.local/place/p_123

    builder.journey_category("/journey/flights", {"from": "BLR", "to": "DEL"})
    # https://app.local/journey/flights?from=BLR&to=DEL
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union
from urllib.parse import quote, urlencode, urlunsplit

from deeplinks.utils.routing.catalog import (
    JOURNEY_CATEGORIES,
    RouteCatalog,
    RouteName,
    default_catalog,
)

logger = logging.getLogger(__name__)


def _to_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _query_string(pairs: List[Tuple[str, Any]]) -> str:
    """Encode (key, value) pairs, dropping those whose value is None."""
    present = [(k, _to_query_value(v)) for k, v in pairs if v is not None]
    return urlencode(present, quote_via=quote)


class DeepLinkBuilder:
    """
    Builds URIs from the route catalog.

    Args:
        catalog: Route catalog to read templates from (default: bundled catalog)
        scheme: Default scheme, overriding the catalog default
        host: Default host, overriding the catalog default
    """

    def __init__(
        self,
        catalog: Optional[RouteCatalog] = None,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
    ):
        self.catalog = catalog or default_catalog()
        self.scheme = scheme or self.catalog.scheme
        self.host = host or self.catalog.host

    def _uri(
        self,
        path: str,
        query: str = "",
        scheme: Optional[str] = None,
        host: Optional[str] = None,
    ) -> str:
        uri = urlunsplit((scheme or self.scheme, host or self.host, path, query, ""))
        logger.debug("Built deep link %s", uri)
        return uri

    def atlas(
        self,
        query: Optional[str] = None,
        region: Optional[str] = None,
        nearby: Optional[bool] = None,
        trending: Optional[bool] = None,
        emotion: Optional[str] = None,
        category: Optional[str] = None,
        sort: Optional[str] = None,
        radius_km: Optional[float] = None,
        open_now: Optional[bool] = None,
        price: Optional[str] = None,
        rating: Optional[str] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        zoom: Optional[float] = None,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
    ) -> str:
        """
        Atlas link with optional search and filters.

        Example:
            builder.atlas(nearby=True, lat=12.97, lng=77.59)
            -> "https://app.local/atlas?nearby=true&lat=12.97&lng=77.59"
        """
        p = self.catalog.param
        query_string = _query_string([
            (p("q"), query),
            (p("region"), region),
            (p("nearby"), nearby),
            (p("trending"), trending),
            (p("emotion"), emotion),
            (p("category"), category),
            (p("sort"), sort),
            (p("radius"), radius_km),
            (p("open_now"), open_now),
            (p("price"), price),
            (p("rating"), rating),
            (p("lat"), lat),
            (p("lng"), lng),
            (p("zoom"), zoom),
        ])
        return self._uri(self.catalog.path(RouteName.ATLAS), query_string, scheme, host)

    def place_detail(
        self,
        id: str,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
    ) -> str:
        """
        Place detail link: /place/<id>.

        The id is not checked; an empty id yields a trailing slash.
        """
        path = self.catalog.fill(RouteName.PLACE_DETAIL, **{self.catalog.param("id"): id})
        return self._uri(path, "", scheme, host)

    def journey_category(
        self,
        category_path: str,
        query: Optional[Mapping[str, str]] = None,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
    ) -> str:
        """
        Journey search category link, e.g. /journey/flights?from=BLR&to=DEL.

        An empty or missing query mapping produces a link without a query
        component.
        """
        query_string = _query_string(list(query.items())) if query else ""
        return self._uri(category_path, query_string, scheme, host)

    def journey_search(
        self,
        category: RouteName,
        origin: Optional[str] = None,
        destination: Optional[str] = None,
        date: Optional[str] = None,
        guests: Optional[int] = None,
        budget: Optional[Union[int, float, str]] = None,
        query: Optional[str] = None,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
    ) -> str:
        """Category search link using the catalog's journey query keys."""
        category = RouteName(category)
        if category not in JOURNEY_CATEGORIES:
            raise ValueError(f"Not a journey category: {category.value}")

        p = self.catalog.param
        query_string = _query_string([
            (p("q"), query),
            (p("from"), origin),
            (p("to"), destination),
            (p("date"), date),
            (p("guests"), guests),
            (p("budget"), budget),
        ])
        return self._uri(self.catalog.path(category), query_string, scheme, host)

    def route(
        self,
        name: RouteName,
        query: Optional[Mapping[str, Any]] = None,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
        **path_values: str,
    ) -> str:
        """Link to any catalog route; path parameters are passed as keywords."""
        path = self.catalog.fill(name, **path_values)
        query_string = _query_string(list(query.items())) if query else ""
        return self._uri(path, query_string, scheme, host)


def build_atlas_uri(**options: Any) -> str:
    """Atlas link using the bundled catalog."""
    return DeepLinkBuilder().atlas(**options)


def build_place_detail_uri(id: str, scheme: Optional[str] = None, host: Optional[str] = None) -> str:
    """Place detail link using the bundled catalog."""
    return DeepLinkBuilder().place_detail(id, scheme=scheme, host=host)


def build_journey_category_uri(
    category_path: str,
    query: Optional[Dict[str, str]] = None,
    scheme: Optional[str] = None,
    host: Optional[str] = None,
) -> str:
    """Journey category link using the bundled catalog."""
    return DeepLinkBuilder().journey_category(category_path, query, scheme=scheme, host=host)
