"""
Catalog loader — reads catalog.yml into the Catalog model.

The built-in catalog ships inside the package. A user catalog can
replace it, chosen by ``--catalog`` or the INSTALLDEPS_CATALOG env var.
It reads YAML, validates against the Pydantic schema, and returns a
typed Catalog.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import ValidationError

from installdeps.core.models.catalog import Catalog

logger = logging.getLogger(__name__)

DEFAULT_CATALOG = Path(__file__).resolve().parent.parent / "data" / "catalog.yml"

CATALOG_ENV = "INSTALLDEPS_CATALOG"


class CatalogError(Exception):
    """Raised when the catalog is missing or invalid."""


def resolve_catalog_path(explicit: Path | None = None) -> Path:
    """Pick the catalog file: explicit path > env var > built-in."""
    if explicit is not None:
        return explicit
    from_env = os.environ.get(CATALOG_ENV)
    if from_env:
        return Path(from_env)
    return DEFAULT_CATALOG


def load_catalog(path: Path | None = None) -> Catalog:
    """Load and validate a catalog.

    Args:
        path: Explicit catalog file. If None, see ``resolve_catalog_path``.

    Returns:
        Validated Catalog model.

    Raises:
        CatalogError: If the file is missing or invalid.
    """
    path = resolve_catalog_path(path)

    if not path.is_file():
        raise CatalogError(f"Catalog file not found: {path}")

    logger.debug("Loading catalog from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise CatalogError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        catalog = Catalog.model_validate(data)
    except ValidationError as e:
        raise CatalogError(f"Invalid catalog {path}: {e}") from e

    logger.info("Loaded catalog for '%s' from %s", catalog.project, path)
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    """The built-in catalog, parsed once per process."""
    return load_catalog(DEFAULT_CATALOG)
