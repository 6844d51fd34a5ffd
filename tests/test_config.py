"""
Tests for catalog loading — catalog.yml parsing and validation.
"""

from pathlib import Path

import pytest
import yaml

from installdeps.core.config.loader import (
    CATALOG_ENV,
    DEFAULT_CATALOG,
    CatalogError,
    default_catalog,
    load_catalog,
    resolve_catalog_path,
)


def _write_catalog(tmp_path: Path, mutate) -> Path:
    """Copy the built-in catalog, apply ``mutate`` to its data, write it out."""
    data = yaml.safe_load(DEFAULT_CATALOG.read_text(encoding="utf-8"))
    mutate(data)
    path = tmp_path / "catalog.yml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestBuiltinCatalog:
    def test_loads(self, catalog):
        assert catalog.project == "cpp-ethereum"
        assert set(catalog.managers) == {"brew", "pacman", "apt", "dnf"}

    def test_macos_releases(self, catalog):
        assert [r.version for r in catalog.macos.releases] == ["10.9", "10.10", "10.11", "10.12"]

    def test_six_ubuntu_releases(self, catalog):
        assert len(catalog.ubuntu.releases) == 6

    def test_only_trusty_and_xenial_add_sources(self, catalog):
        with_sources = [r.codenames[0] for r in catalog.ubuntu.releases if r.sources]
        assert with_sources == ["trusty", "xenial"]

    def test_brew_is_unprivileged(self, catalog):
        assert catalog.manager("brew").privileged is False
        assert catalog.manager("apt").privileged is True

    def test_remediation_lookup(self, catalog):
        assert catalog.remediation("brew") == ("See http://brew.sh.",)
        assert catalog.remediation("nope") == ()

    def test_default_catalog_cached(self):
        assert default_catalog() is default_catalog()


class TestLoadCatalog:
    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(CatalogError, match="not found"):
            load_catalog(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "catalog.yml"
        path.write_text("managers: [unclosed\n")
        with pytest.raises(CatalogError, match="Invalid YAML"):
            load_catalog(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "catalog.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(CatalogError, match="Expected a YAML mapping"):
            load_catalog(path)

    def test_missing_section(self, tmp_path: Path):
        path = _write_catalog(tmp_path, lambda d: d.pop("ubuntu"))
        with pytest.raises(CatalogError, match="Invalid catalog"):
            load_catalog(path)

    def test_unknown_manager(self, tmp_path: Path):
        def mutate(d):
            d["fedora"]["manager"] = "yum"

        path = _write_catalog(tmp_path, mutate)
        with pytest.raises(CatalogError, match="unknown manager 'yum'"):
            load_catalog(path)

    def test_override_packages(self, tmp_path: Path):
        def mutate(d):
            d["debian"]["packages"] = ["only-this"]

        catalog = load_catalog(_write_catalog(tmp_path, mutate))
        assert catalog.debian.packages == ["only-this"]


class TestResolveCatalogPath:
    def test_explicit_wins(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(CATALOG_ENV, str(tmp_path / "env.yml"))
        assert resolve_catalog_path(tmp_path / "cli.yml") == tmp_path / "cli.yml"

    def test_env_var(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv(CATALOG_ENV, str(tmp_path / "env.yml"))
        assert resolve_catalog_path() == tmp_path / "env.yml"

    def test_builtin_default(self):
        assert resolve_catalog_path() == DEFAULT_CATALOG

    def test_env_var_used_by_loader(self, tmp_path: Path, monkeypatch):
        def mutate(d):
            d["project"] = "from-env"

        monkeypatch.setenv(CATALOG_ENV, str(_write_catalog(tmp_path, mutate)))
        assert load_catalog().project == "from-env"
