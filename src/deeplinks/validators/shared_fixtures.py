"""
Fixtures shared across deep link validators.

Provides the bundled catalog, builders and parsers over it, and helpers
for writing custom catalogs and project configs into tmp_path.
"""
import copy
from pathlib import Path

import pytest
import yaml

from deeplinks.utils.config import CONFIG_DIR_NAME
from deeplinks.utils.routing.builder import DeepLinkBuilder
from deeplinks.utils.routing.catalog import RouteCatalog, default_catalog
from deeplinks.utils.routing.parser import DeepLinkParser


@pytest.fixture(scope="session")
def catalog() -> RouteCatalog:
    """Bundled route catalog (loaded once per session)."""
    return default_catalog()


@pytest.fixture
def builder(catalog) -> DeepLinkBuilder:
    return DeepLinkBuilder(catalog)


@pytest.fixture
def parser(catalog) -> DeepLinkParser:
    return DeepLinkParser(catalog)


@pytest.fixture
def catalog_data(catalog) -> dict:
    """Editable copy of the bundled catalog in routes.yaml shape."""
    return copy.deepcopy(catalog.to_dict())


@pytest.fixture
def write_catalog(tmp_path):
    """Write a catalog mapping (or raw text) to a YAML file and return its path."""
    def _write(data, name: str = "routes.yaml") -> Path:
        path = tmp_path / name
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def project_dir(tmp_path, monkeypatch) -> Path:
    """Empty project with a .deeplinks/ directory, used as cwd."""
    (tmp_path / CONFIG_DIR_NAME).mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_config(project_dir):
    """Write .deeplinks/config.yaml (mapping or raw text) in project_dir."""
    def _write(data) -> Path:
        path = project_dir / CONFIG_DIR_NAME / "config.yaml"
        if isinstance(data, str):
            path.write_text(data, encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write
