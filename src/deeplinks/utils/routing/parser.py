"""
Deep Link Parser
================
Maps an inbound URI to a RouteIntent: a route name plus path and query
parameters the navigation layer can act on.

Rules are tried in a fixed order and the first match wins:

1. PlaceDetailRule  - path starts with the place detail prefix (/place)
2. AtlasRule        - path equals the atlas path exactly
3. JourneyCategoryRule - path equals one of the eight category search paths
4. MainTabRule      - path equals home, trails, journey or navee-ai
5. DefaultRule      - anything else resolves to atlas (is_fallback=True)

Paths are compared after percent-decoding, so /atl%61s is /atlas; the
place id is split out of the raw path first so an encoded "/" stays in
the id. The parser never raises. Query parameters are passed through as decoded
strings; they are never converted to numbers or booleans.

Usage:
    from deeplinks.utils.routing.parser import DeepLinkParser

    parser = DeepLinkParser()
    intent = parser.parse("https://app.local/place/abc123")
    intent.route_name        # RouteName.PLACE_DETAIL
    intent.path_params       # {"id": "abc123"}
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union
from urllib.parse import ParseResult, SplitResult, parse_qsl, unquote, urlsplit

from deeplinks.utils.routing.catalog import (
    JOURNEY_CATEGORIES,
    MAIN_TABS,
    RouteCatalog,
    RouteName,
    default_catalog,
)

logger = logging.getLogger(__name__)

UriLike = Union[str, SplitResult, ParseResult]


@dataclass(frozen=True)
class RouteIntent:
    """
    Result of parsing an inbound deep link.

    Attributes:
        route_name: Logical route to navigate to
        path_params: Values taken from path segments (e.g. {"id": "p_123"})
        query_params: Decoded query string, passed through verbatim
        is_fallback: True when no rule matched and the default route was used
    """
    route_name: RouteName
    path_params: Mapping[str, str] = field(default_factory=dict)
    query_params: Mapping[str, str] = field(default_factory=dict)
    is_fallback: bool = False

    def __post_init__(self):
        object.__setattr__(self, "path_params", MappingProxyType(dict(self.path_params)))
        object.__setattr__(self, "query_params", MappingProxyType(dict(self.query_params)))

    def __hash__(self):
        return hash((
            self.route_name,
            frozenset(self.path_params.items()),
            frozenset(self.query_params.items()),
            self.is_fallback,
        ))

    @property
    def has_missing_params(self) -> bool:
        """True if some path parameter resolved to an empty string."""
        return any(value == "" for value in self.path_params.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "route_name": self.route_name.value,
            "path_params": dict(self.path_params),
            "query_params": dict(self.query_params),
            "is_fallback": self.is_fallback,
        }

    def __str__(self) -> str:
        return (
            f"RouteIntent(route={self.route_name.value}, "
            f"path={dict(self.path_params)}, query={dict(self.query_params)})"
        )


def _segments(path: str) -> List[str]:
    return [s for s in path.split("/") if s]


class BaseRule(ABC):
    """A single match rule of the parser."""

    name = "base"

    def __init__(self, catalog: RouteCatalog):
        self.catalog = catalog

    @abstractmethod
    def matches(self, path: str) -> bool:
        """Check if this rule handles the given path."""
        pass

    @abstractmethod
    def resolve(self, path: str, query: Mapping[str, str]) -> RouteIntent:
        """Build the intent for a path this rule matches."""
        pass


class PlaceDetailRule(BaseRule):
    """
    /place/:id -> place_detail.

    Matches on a plain string prefix. The id is the last non-empty segment
    after the prefix, however many segments come before it; a link with
    nothing after the prefix resolves with an empty id.
    """

    name = "place_detail"

    def __init__(self, catalog: RouteCatalog):
        super().__init__(catalog)
        self.prefix = catalog.prefix(RouteName.PLACE_DETAIL)
        self.id_key = catalog.param("id")

    def matches(self, path: str) -> bool:
        return unquote(path).startswith(self.prefix)

    def resolve(self, path: str, query: Mapping[str, str]) -> RouteIntent:
        rest = _segments(path)[len(_segments(self.prefix)):]
        place_id = unquote(rest[-1]) if rest else ""
        return RouteIntent(
            route_name=RouteName.PLACE_DETAIL,
            path_params={self.id_key: place_id},
            query_params=query,
        )


class AtlasRule(BaseRule):
    """/atlas (exact) -> atlas."""

    name = "atlas"

    def matches(self, path: str) -> bool:
        return unquote(path) == self.catalog.path(RouteName.ATLAS)

    def resolve(self, path: str, query: Mapping[str, str]) -> RouteIntent:
        return RouteIntent(route_name=RouteName.ATLAS, query_params=query)


class JourneyCategoryRule(BaseRule):
    """/journey/<category> (exact, eight categories) -> <category>_search."""

    name = "journey_category"

    def __init__(self, catalog: RouteCatalog):
        super().__init__(catalog)
        self.paths = {catalog.path(name): name for name in JOURNEY_CATEGORIES}

    def matches(self, path: str) -> bool:
        return unquote(path) in self.paths

    def route_name_for_path(self, path: str) -> RouteName:
        """
        Category route for a journey path.

        Unlisted paths map to the generic journey tab. matches() already
        guards resolve(), so this only applies to direct callers.
        """
        return self.paths.get(unquote(path), RouteName.JOURNEY)

    def resolve(self, path: str, query: Mapping[str, str]) -> RouteIntent:
        return RouteIntent(route_name=self.route_name_for_path(path), query_params=query)


class MainTabRule(BaseRule):
    """/home, /trails, /journey, /navee-ai (exact) -> the tab."""

    name = "main_tab"

    def __init__(self, catalog: RouteCatalog):
        super().__init__(catalog)
        self.paths = {catalog.path(name): name for name in MAIN_TABS}

    def matches(self, path: str) -> bool:
        return unquote(path) in self.paths

    def resolve(self, path: str, query: Mapping[str, str]) -> RouteIntent:
        return RouteIntent(route_name=self.paths[unquote(path)], query_params=query)


class DefaultRule(BaseRule):
    """Anything else -> atlas, so a link never dead-ends."""

    name = "default"

    def matches(self, path: str) -> bool:
        return True

    def resolve(self, path: str, query: Mapping[str, str]) -> RouteIntent:
        return RouteIntent(route_name=RouteName.ATLAS, query_params=query, is_fallback=True)


class DeepLinkParser:
    """
    Resolves inbound URIs against a route catalog.

    Args:
        catalog: Route catalog (default: bundled catalog)
    """

    def __init__(self, catalog: Optional[RouteCatalog] = None):
        self.catalog = catalog or default_catalog()
        self.rules: List[BaseRule] = [
            PlaceDetailRule(self.catalog),
            AtlasRule(self.catalog),
            JourneyCategoryRule(self.catalog),
            MainTabRule(self.catalog),
        ]
        self.default_rule = DefaultRule(self.catalog)

    @staticmethod
    def _split(uri: UriLike) -> Optional[SplitResult]:
        if isinstance(uri, SplitResult):
            return uri
        if isinstance(uri, ParseResult):
            return urlsplit(uri.geturl())
        if isinstance(uri, str):
            try:
                return urlsplit(uri.strip())
            except ValueError:
                return None
        return None

    def parse(self, uri: UriLike) -> RouteIntent:
        """
        Resolve a URI to a RouteIntent.

        Accepts a URI string or a urllib.parse split/parse result. Input the
        URI library cannot split resolves to the default route with no
        parameters.
        """
        parts = self._split(uri)
        if parts is None:
            logger.debug("Unparseable deep link %r, using default route", uri)
            return self.default_rule.resolve("", {})

        path = parts.path
        query = dict(parse_qsl(parts.query, keep_blank_values=True))

        for rule in self.rules:
            if rule.matches(path):
                intent = rule.resolve(path, query)
                logger.debug("Deep link %s matched %s -> %s", path, rule.name, intent)
                return intent

        logger.debug("Deep link %s matched no rule, using default route", path)
        return self.default_rule.resolve(path, query)


def route_name_for_journey_path(path: str, catalog: Optional[RouteCatalog] = None) -> RouteName:
    """Category route for a journey path, or the generic journey route."""
    return JourneyCategoryRule(catalog or default_catalog()).route_name_for_path(path)


def parse_deep_link(uri: UriLike) -> RouteIntent:
    """Parse a URI using the bundled catalog."""
    return DeepLinkParser().parse(uri)
