"""
Deep link configuration loader.

Loads settings from the nearest .deeplinks/config.yaml at or above the
working directory: the scheme and host used for built links, and an
optional path to a custom route catalog.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from deeplinks.utils.routing.catalog import (
    RouteCatalog,
    default_catalog,
    load_catalog,
)

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".deeplinks"
CONFIG_FILE_NAME = "config.yaml"


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """
    Nearest .deeplinks/config.yaml in start (default: cwd) or its parents.

    Returns None when no directory on the way up has one; callers then run
    with the bundled catalog and catalog defaults.
    """
    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_DIR_NAME / CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate
    return None


def load_config(config_path: Optional[Path]) -> Dict[str, Any]:
    """
    Load a config.yaml file.

    Returns:
        Parsed configuration dict, or empty dict if there is no file or it
        cannot be read

    Example config:
        links:
          scheme: naveeka
          host: open
          catalog: .deeplinks/routes.yaml
    """
    if config_path is None or not config_path.exists():
        return {}

    try:
        with open(config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return {}

    return config if isinstance(config, dict) else {}


@dataclass(frozen=True)
class LinkSettings:
    """Effective link settings for a project."""

    scheme: Optional[str] = None
    host: Optional[str] = None
    catalog_path: Optional[Path] = None

    def load_catalog(self) -> RouteCatalog:
        """Custom catalog if one is configured, else the bundled one."""
        if self.catalog_path is not None:
            return load_catalog(self.catalog_path)
        return default_catalog()


def get_link_config(start: Optional[Path] = None) -> LinkSettings:
    """
    Link settings from the nearest config file.

    A relative `links.catalog` is resolved against the project root, the
    directory holding .deeplinks/. Scheme and host stay None when unset so
    the catalog's own defaults apply.
    """
    config_path = find_config_file(start)
    links = load_config(config_path).get("links") or {}
    if not isinstance(links, dict):
        logger.warning("Ignoring 'links' section of %s: expected a mapping", config_path)
        links = {}

    catalog_path = None
    if links.get("catalog"):
        catalog_path = Path(links["catalog"])
        if not catalog_path.is_absolute():
            catalog_path = config_path.parent.parent / catalog_path

    return LinkSettings(
        scheme=links.get("scheme"),
        host=links.get("host"),
        catalog_path=catalog_path,
    )
