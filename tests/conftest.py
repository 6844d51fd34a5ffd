"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from installdeps.core.config.loader import DEFAULT_CATALOG, load_catalog
from installdeps.core.models.catalog import Catalog


@pytest.fixture
def catalog() -> Catalog:
    """The built-in catalog."""
    return load_catalog(DEFAULT_CATALOG)


@pytest.fixture
def catalog_file() -> Path:
    return DEFAULT_CATALOG


@pytest.fixture(autouse=True)
def _no_user_catalog(monkeypatch):
    """Tests never pick up a catalog from the developer's environment."""
    monkeypatch.delenv("INSTALLDEPS_CATALOG", raising=False)
    monkeypatch.delenv("TRAVIS", raising=False)
