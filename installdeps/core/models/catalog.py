"""
Catalog model — the inert data behind every install action.

Package lists, manager command lines, the macOS and Ubuntu release
tables and remediation text. Loaded from catalog.yml; the dispatcher
owns the decision logic, the catalog owns the data.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class ManagerSpec(BaseModel):
    """Command lines for one native package manager."""

    install: list[str]
    refresh: list[str] = Field(default_factory=list)
    remove: list[str] = Field(default_factory=list)
    privileged: bool = True   # false for managers that refuse root (brew)


class PlatformSpec(BaseModel):
    """Packages for one distro, and optionally its own install line."""

    label: str = ""
    manager: str
    packages: list[str] = Field(default_factory=list)
    install: list[str] = Field(default_factory=list)  # overrides ManagerSpec.install


class MacOSRelease(BaseModel):
    version: str          # major.minor, e.g. "10.11"
    label: str
    notes: list[str] = Field(default_factory=list)


class MacOSSpec(PlatformSpec):
    releases: list[MacOSRelease] = Field(default_factory=list)

    def release(self, version: str | None) -> MacOSRelease | None:
        for rel in self.releases:
            if rel.version == version:
                return rel
        return None


class UbuntuRelease(BaseModel):
    """One row of the codename table.

    Several codenames can share a row: LinuxMint releases map onto
    the Ubuntu release they are built from.
    """

    codenames: list[str]
    label: str
    sources: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)


class UbuntuSpec(PlatformSpec):
    sources_file: str = "/etc/apt/sources.list"
    conflicts: list[str] = Field(default_factory=list)   # removed on CI hosts
    releases: list[UbuntuRelease] = Field(default_factory=list)

    def release(self, codename: str | None) -> UbuntuRelease | None:
        for rel in self.releases:
            if codename in rel.codenames:
                return rel
        return None


class Catalog(BaseModel):
    """Root of catalog.yml."""

    project: str = "cpp-ethereum"
    elevation_prefix: list[str] = Field(default_factory=lambda: ["sudo"])

    managers: dict[str, ManagerSpec]
    macos: MacOSSpec
    arch: PlatformSpec
    debian: PlatformSpec
    fedora: PlatformSpec
    ubuntu: UbuntuSpec

    help: dict[str, list[str]] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_managers(self) -> Catalog:
        for name in ("macos", "arch", "debian", "fedora", "ubuntu"):
            spec: PlatformSpec = getattr(self, name)
            if spec.manager not in self.managers:
                raise ValueError(
                    f"platform '{name}' uses unknown manager '{spec.manager}'"
                )
        return self

    def manager(self, name: str) -> ManagerSpec:
        return self.managers[name]

    def remediation(self, key: str) -> tuple[str, ...]:
        return tuple(self.help.get(key, ()))
