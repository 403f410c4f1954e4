"""
Deep Link CLI Command
=====================
Provides CLI interface for building and parsing deep links.

Commands:
- parse: Resolve a URI to its route intent
- build: Build a shareable link (atlas, place, journey, route)
- routes: List the route catalog
- check: Validate a route catalog file

Usage:
    deeplinks parse "https://app.local/place/abc123"
    deeplinks parse "https://app.local/atlas?trending=true" --format json
    deeplinks build atlas --query beach --radius 5
    deeplinks build place abc123
    deeplinks build journey flight_search --param from=BLR --param to=DEL
    deeplinks routes --format json
    deeplinks check --catalog .deeplinks/routes.yaml
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from deeplinks.utils.config import get_link_config
from deeplinks.utils.routing.builder import DeepLinkBuilder
from deeplinks.utils.routing.catalog import (
    CatalogError,
    RouteCatalog,
    RouteName,
    load_catalog,
)
from deeplinks.utils.routing.parser import DeepLinkParser

logger = logging.getLogger(__name__)


def parse_params(pairs: Optional[List[str]]) -> Dict[str, str]:
    """
    Turn ["key=value", ...] into a dict.

    Raises:
        ValueError: If an entry has no '='
    """
    params: Dict[str, str] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"Expected KEY=VALUE, got '{pair}'")
        key, value = pair.split("=", 1)
        params[key] = value
    return params


class LinkCommand:
    """
    CLI command handler for deep link operations.

    Settings come from the nearest .deeplinks/config.yaml (see get_link_config);
    explicit catalog/scheme/host arguments take precedence.
    """

    def __init__(
        self,
        start: Optional[Path] = None,
        catalog_path: Optional[Path] = None,
        scheme: Optional[str] = None,
        host: Optional[str] = None,
    ):
        self.settings = get_link_config(start)
        self.catalog_path = catalog_path or self.settings.catalog_path
        self.scheme = scheme or self.settings.scheme
        self.host = host or self.settings.host
        self._catalog: Optional[RouteCatalog] = None

    @property
    def catalog(self) -> RouteCatalog:
        if self._catalog is None:
            if self.catalog_path is not None:
                self._catalog = load_catalog(self.catalog_path)
            else:
                self._catalog = self.settings.load_catalog()
        return self._catalog

    def _builder(self) -> DeepLinkBuilder:
        return DeepLinkBuilder(self.catalog, scheme=self.scheme, host=self.host)

    def _emit_link(self, build) -> int:
        try:
            print(build())
            return 0
        except (CatalogError, ValueError) as e:
            print(f"Error building link: {e}", file=sys.stderr)
            return 1

    def parse(self, uri: str, format: str = "text") -> int:
        """
        Resolve a URI and print the route intent.

        Returns:
            Exit code (0 for success)
        """
        try:
            intent = DeepLinkParser(self.catalog).parse(uri)
        except CatalogError as e:
            print(f"Error loading catalog: {e}", file=sys.stderr)
            return 1

        if format == "json":
            print(json.dumps(intent.to_dict(), indent=2))
            return 0

        print(f"route:  {intent.route_name.value}")
        if intent.path_params:
            print("path:")
            for key, value in intent.path_params.items():
                print(f"  {key} = {value!r}")
        if intent.query_params:
            print("query:")
            for key, value in intent.query_params.items():
                print(f"  {key} = {value!r}")
        if intent.is_fallback:
            print("note:   no route matched, using default")
        if intent.has_missing_params:
            print("note:   empty path parameter")
        return 0

    def build_atlas(self, **options: Any) -> int:
        """Build and print an atlas link."""
        return self._emit_link(lambda: self._builder().atlas(**options))

    def build_place(self, place_id: str) -> int:
        """Build and print a place detail link."""
        return self._emit_link(lambda: self._builder().place_detail(place_id))

    def build_journey(self, category: str, params: Optional[List[str]] = None) -> int:
        """
        Build and print a journey category link.

        Args:
            category: Route name (flight_search) or path (/journey/flights)
            params: Query parameters as KEY=VALUE strings
        """
        def build():
            if category.startswith("/"):
                path = category
            else:
                path = self.catalog.path(RouteName(category))
            return self._builder().journey_category(path, parse_params(params))

        return self._emit_link(build)

    def build_route(self, name: str, params: Optional[List[str]] = None) -> int:
        """Build and print a link to any catalog route."""
        def build():
            route_name = RouteName(name)
            query = parse_params(params)
            path_values = {
                key: query.pop(key, "") for key in self.catalog.path_params(route_name)
            }
            return self._builder().route(route_name, query, **path_values)

        return self._emit_link(build)

    def routes(self, format: str = "yaml") -> int:
        """Print the route catalog."""
        try:
            data = self.catalog.to_dict()
        except CatalogError as e:
            print(f"Error loading catalog: {e}", file=sys.stderr)
            return 1

        if format == "json":
            print(json.dumps(data, indent=2))
        else:
            print(yaml.dump(data, default_flow_style=False, sort_keys=False))
        return 0

    def check(self) -> int:
        """
        Validate the configured route catalog.

        Returns:
            Exit code (0 if valid, 1 if invalid)
        """
        try:
            catalog = self.catalog
        except CatalogError as e:
            print(str(e), file=sys.stderr)
            return 1

        source = self.catalog_path or "bundled catalog"
        print(f"Route catalog OK: {source} ({len(catalog.routes)} routes)")
        return 0
