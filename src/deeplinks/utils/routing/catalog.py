"""
Route Catalog
=============
Static table of logical route names, their path templates and the
parameter keys used on the wire.

Route names form a closed set (RouteName). A catalog maps each name it
knows to a path template; path parameters are written as ``:name``
segments, e.g. ``/place/:id``.

The default catalog ships with the package as ``routes.yaml``. Custom
catalogs can be loaded from YAML and are validated with jsonschema before
use, so builders and the parser can rely on every route they need being
present.

Usage:
    from deeplinks.utils.routing.catalog import RouteName, default_catalog, load_catalog

    catalog = default_catalog()
    catalog.path(RouteName.PLACE_DETAIL)                # "/place/:id"
    catalog.prefix(RouteName.PLACE_DETAIL)              # "/place"
    catalog.fill(RouteName.PLACE_DETAIL, id="p_123")    # "/place/p_123"

    custom = load_catalog(Path(".deeplinks/routes.yaml"))
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import quote

import jsonschema
import yaml

logger = logging.getLogger(__name__)

DEFAULT_SCHEME = "https"
DEFAULT_HOST = "app.local"

DEFAULT_CATALOG_PATH = Path(__file__).parent / "routes.yaml"


class CatalogError(Exception):
    """Raised when a route catalog cannot be loaded or a route is unknown."""


class RouteName(str, Enum):
    """Logical navigation targets of the app."""

    # Auth & splash
    SPLASH = "splash"
    LOGIN = "login"
    REGISTER = "register"

    # Main tabs
    HOME = "home"
    TRAILS = "trails"
    ATLAS = "atlas"
    JOURNEY = "journey"
    NAVEE_AI = "navee_ai"

    # Home quick actions
    BOOKING = "booking"
    HISTORY = "history"
    FAVORITES = "favorites"
    FOLLOWING = "following"
    PLANNING = "planning"
    TRIP_GROUP = "trip_group"
    MESSAGES = "messages"

    # Journey booking flows
    FLIGHT_SEARCH = "flight_search"
    FLIGHT_RESULTS = "flight_results"
    FLIGHT_BOOKING = "flight_booking"
    TRAIN_SEARCH = "train_search"
    TRAIN_RESULTS = "train_results"
    TRAIN_BOOKING = "train_booking"
    BUS_SEARCH = "bus_search"
    BUS_RESULTS = "bus_results"
    BUS_BOOKING = "bus_booking"
    CAB_SEARCH = "cab_search"
    CAB_OPTIONS = "cab_options"
    CAB_BOOKING = "cab_booking"
    HOTEL_SEARCH = "hotel_search"
    HOTEL_RESULTS = "hotel_results"
    HOTEL_BOOKING = "hotel_booking"
    RESTAURANT_SEARCH = "restaurant_search"
    RESTAURANT_RESULTS = "restaurant_results"
    RESTAURANT_BOOKING = "restaurant_booking"
    ACTIVITY_SEARCH = "activity_search"
    ACTIVITY_RESULTS = "activity_results"
    ACTIVITY_BOOKING = "activity_booking"
    PLACE_SEARCH = "place_search"
    PLACE_RESULTS = "place_results"
    PLACE_BOOKING = "place_booking"
    MY_BOOKINGS = "my_bookings"

    # Universal screens
    PLACE_DETAIL = "place_detail"
    SETTINGS = "settings"
    PROFILE = "profile"
    CHECKOUT = "checkout"

    def __str__(self) -> str:
        return self.value


# Category search screens reachable from a journey link, in match order
JOURNEY_CATEGORIES: Tuple[RouteName, ...] = (
    RouteName.FLIGHT_SEARCH,
    RouteName.TRAIN_SEARCH,
    RouteName.BUS_SEARCH,
    RouteName.CAB_SEARCH,
    RouteName.HOTEL_SEARCH,
    RouteName.RESTAURANT_SEARCH,
    RouteName.ACTIVITY_SEARCH,
    RouteName.PLACE_SEARCH,
)

MAIN_TABS: Tuple[RouteName, ...] = (
    RouteName.HOME,
    RouteName.TRAILS,
    RouteName.JOURNEY,
    RouteName.NAVEE_AI,
)

# Routes the parser and builders depend on; a catalog without them is rejected
REQUIRED_ROUTES: Tuple[RouteName, ...] = (
    RouteName.PLACE_DETAIL,
    RouteName.ATLAS,
    *JOURNEY_CATEGORIES,
    *MAIN_TABS,
)

CATALOG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["routes"],
    "additionalProperties": False,
    "properties": {
        "defaults": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "scheme": {"type": "string", "pattern": r"^[a-zA-Z][a-zA-Z0-9+.-]*$"},
                "host": {"type": "string"},
            },
        },
        "routes": {
            "type": "object",
            "required": [name.value for name in REQUIRED_ROUTES],
            "propertyNames": {"enum": [name.value for name in RouteName]},
            "additionalProperties": {"type": "string", "pattern": r"^/"},
        },
        "params": {
            "type": "object",
            "additionalProperties": {"type": "string", "minLength": 1},
        },
    },
}


def _segments(path: str) -> list:
    """Split a path into its non-empty segments."""
    return [s for s in path.split("/") if s]


@dataclass(frozen=True)
class RouteCatalog:
    """
    Immutable route table.

    Attributes:
        routes: Route name -> path template
        params: Logical parameter key -> wire key
        scheme: Default scheme for built links
        host: Default host for built links
    """
    routes: Mapping[RouteName, str]
    params: Mapping[str, str] = field(default_factory=dict)
    scheme: str = DEFAULT_SCHEME
    host: str = DEFAULT_HOST

    def __post_init__(self):
        object.__setattr__(self, "routes", MappingProxyType(dict(self.routes)))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @classmethod
    def from_dict(cls, data: Any, source: str = "<dict>") -> "RouteCatalog":
        """
        Build a catalog from a parsed YAML/JSON mapping.

        Raises:
            CatalogError: If the mapping does not match CATALOG_SCHEMA
        """
        validator = jsonschema.Draft7Validator(CATALOG_SCHEMA)
        errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
        if errors:
            details = "\n".join(
                f"  {'/'.join(str(p) for p in e.absolute_path) or '<root>'}: {e.message}"
                for e in errors
            )
            raise CatalogError(f"Invalid route catalog {source}:\n{details}")

        defaults = data.get("defaults") or {}
        return cls(
            routes={RouteName(name): path for name, path in data["routes"].items()},
            params=data.get("params") or {},
            scheme=defaults.get("scheme", DEFAULT_SCHEME),
            host=defaults.get("host", DEFAULT_HOST),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping in the same shape as routes.yaml."""
        return {
            "defaults": {"scheme": self.scheme, "host": self.host},
            "routes": {name.value: path for name, path in self.routes.items()},
            "params": dict(self.params),
        }

    def has_route(self, name: RouteName) -> bool:
        try:
            return RouteName(name) in self.routes
        except ValueError:
            return False

    def path(self, name: RouteName) -> str:
        """Return the path template for a route."""
        try:
            return self.routes[RouteName(name)]
        except (KeyError, ValueError):
            raise CatalogError(f"Unknown route: {name}")

    def prefix(self, name: RouteName) -> str:
        """Static part of a template, up to its first path parameter."""
        static = []
        for segment in _segments(self.path(name)):
            if segment.startswith(":"):
                break
            static.append(segment)
        return "/" + "/".join(static)

    def path_params(self, name: RouteName) -> list:
        """Names of the path parameters declared by a template."""
        return [s[1:] for s in _segments(self.path(name)) if s.startswith(":")]

    def fill(self, name: RouteName, **values: str) -> str:
        """
        Substitute ``:param`` segments with percent-encoded values.

        Missing values are filled with an empty string; emptiness is not
        checked here.

        Example:
            catalog.fill(RouteName.PLACE_DETAIL, id="p 1") -> "/place/p%201"
        """
        template = self.path(name)
        parts = []
        for segment in template.split("/"):
            if segment.startswith(":"):
                parts.append(quote(str(values.get(segment[1:], "")), safe=""))
            else:
                parts.append(segment)
        return "/".join(parts)

    def param(self, key: str) -> str:
        """Wire key for a logical parameter key."""
        return self.params.get(key, key)

    def find_by_path(self, path: str) -> Optional[RouteName]:
        """Route whose template equals the given path exactly, if any."""
        for name, template in self.routes.items():
            if template == path:
                return name
        return None


def load_catalog(path: Path) -> RouteCatalog:
    """
    Load and validate a route catalog from a YAML file.

    Args:
        path: Path to the catalog YAML

    Returns:
        Validated RouteCatalog

    Raises:
        CatalogError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"Route catalog not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError(f"Cannot read route catalog {path}: {e}") from e
    except yaml.YAMLError as e:
        raise CatalogError(f"Cannot parse route catalog {path}: {e}") from e

    catalog = RouteCatalog.from_dict(data, source=str(path))
    logger.info("Loaded route catalog %s (%d routes)", path, len(catalog.routes))
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> RouteCatalog:
    """Catalog bundled with the package (loaded once)."""
    return load_catalog(DEFAULT_CATALOG_PATH)
