"""
Dispatch service — resolve a PlatformSignal to one InstallAction.

Pure logic — no side effects, no host access. The decision procedure
is an ordered chain; the first arm that matches wins, and anything
that falls through every arm is ``Unsupported``:

    Darwin   → supported macOS release + Homebrew present
    FreeBSD  → unsupported (not implemented)
    Linux    → marker file  → Arch
               os-release   → Debian* / Fedora*
               lsb_release  → Alpine, openSUSE* (not implemented)
                              Fedora
                              Ubuntu / LinuxMint → codename table
    other    → unrecognized

Matching is exact (or prefix, for os-release NAME) against literal
values. Unknown variants of a known distro are never guessed.
"""

from __future__ import annotations

import logging

from installdeps.core.config.loader import default_catalog
from installdeps.core.models.action import Step
from installdeps.core.models.catalog import Catalog, PlatformSpec
from installdeps.core.models.install import (
    ErrorKind,
    InstallAction,
    Supported,
    Unsupported,
)
from installdeps.core.models.platform import PlatformSignal

logger = logging.getLogger(__name__)


def dispatch(signal: PlatformSignal, catalog: Catalog | None = None) -> InstallAction:
    """Resolve the signal to exactly one install action.

    Args:
        signal: Detected platform signal.
        catalog: Package data (default: the built-in catalog).

    Returns:
        ``Supported`` or ``Unsupported``. Elevation is not applied here;
        see ``elevation.apply_elevation``.
    """
    catalog = catalog or default_catalog()
    kernel = signal.kernel_name

    if kernel is None:
        action: InstallAction = _unsupported(
            catalog,
            ErrorKind.MISSING_PREREQUISITE_TOOL,
            "Unable to identify the operating system kernel.",
            "uname",
        )
    elif kernel == "Darwin":
        action = _dispatch_macos(signal, catalog)
    elif kernel == "FreeBSD":
        action = _unsupported(
            catalog,
            ErrorKind.UNSUPPORTED_PLATFORM,
            "install-deps doesn't have FreeBSD support yet.",
            "freebsd",
        )
    elif kernel == "Linux":
        action = _dispatch_linux(signal, catalog)
    else:
        action = _unsupported(
            catalog,
            ErrorKind.UNRECOGNIZED_PLATFORM,
            f"Unsupported or unidentified operating system ({kernel}).",
            "os",
        )

    if isinstance(action, Unsupported):
        logger.info("Dispatch → unsupported [%s]: %s", action.kind, action.reason)
    else:
        logger.info("Dispatch → %s via %s", action.platform, action.manager)
    return action


# ── macOS ───────────────────────────────────────────────────────────


def _dispatch_macos(signal: PlatformSignal, catalog: Catalog) -> InstallAction:
    version = signal.major_minor()
    release = catalog.macos.release(version)
    if release is None:
        return _unsupported(
            catalog,
            ErrorKind.UNSUPPORTED_VERSION,
            f"Unsupported macOS version ({version or 'unknown'}).",
            "macos_version",
        )

    # Checked after the version: a missing manager is a separate error
    if not signal.has_tool(catalog.macos.manager):
        return _unsupported(
            catalog,
            ErrorKind.MISSING_PREREQUISITE_TOOL,
            f"{catalog.project} requires a Homebrew install.",
            "brew",
        )

    return _supported(
        catalog,
        catalog.macos,
        label=release.label,
        notes=release.notes,
    )


# ── Linux ───────────────────────────────────────────────────────────


def _dispatch_linux(signal: PlatformSignal, catalog: Catalog) -> InstallAction:
    source = signal.distro_source
    distro = signal.distro_id or ""

    if source == "marker":
        return _supported(catalog, catalog.arch)

    if source == "os-release":
        if distro.startswith("Debian"):
            return _supported(catalog, catalog.debian)
        if distro.startswith("Fedora"):
            return _supported(catalog, catalog.fedora)
        return _unknown_linux(catalog, distro)

    if source == "lsb_release":
        if distro == "Alpine":
            return _unsupported(
                catalog,
                ErrorKind.UNSUPPORTED_PLATFORM,
                "install-deps doesn't have Alpine Linux support yet.",
                "alpine",
            )
        if distro.startswith("openSUSE"):
            return _unsupported(
                catalog,
                ErrorKind.UNSUPPORTED_PLATFORM,
                "install-deps doesn't have openSUSE support yet.",
                "opensuse",
            )
        if distro == "Fedora":
            return _supported(catalog, catalog.fedora)
        if distro in ("Ubuntu", "LinuxMint"):
            return _dispatch_ubuntu(signal, catalog)

    return _unknown_linux(catalog, distro)


def _dispatch_ubuntu(signal: PlatformSignal, catalog: Catalog) -> InstallAction:
    spec = catalog.ubuntu
    codename = signal.distro_codename
    release = spec.release(codename)
    if release is None:
        return _unsupported(
            catalog,
            ErrorKind.UNSUPPORTED_VERSION,
            f"Unknown or unsupported Ubuntu version ({codename or 'unknown'}).",
            "ubuntu_version",
        )

    manager = catalog.manager(spec.manager)
    extra: list[Step] = []

    for i, line in enumerate(release.sources):
        extra.append(Step(
            id=f"{spec.manager}:append_source:{i}",
            kind="append_source",
            argv=("tee", "-a", spec.sources_file),
            stdin=line + "\n",
            privileged=manager.privileged,
            description=f"Add package source to {spec.sources_file}",
        ))

    # CI images ship packages that conflict with the ones we install
    if signal.has_flag("TRAVIS") and manager.remove:
        for pkg in spec.conflicts:
            extra.append(Step(
                id=f"{spec.manager}:remove_package:{pkg}",
                kind="remove_package",
                argv=tuple(manager.remove) + (pkg,),
                privileged=manager.privileged,
                description=f"Remove conflicting package {pkg}",
            ))

    return _supported(
        catalog,
        spec,
        label=release.label,
        notes=release.notes,
        extra_steps=extra,
    )


def _unknown_linux(catalog: Catalog, distro: str) -> Unsupported:
    suffix = f" ({distro})" if distro else ""
    return _unsupported(
        catalog,
        ErrorKind.UNRECOGNIZED_PLATFORM,
        f"Unsupported or unidentified Linux distro{suffix}.",
        "linux",
    )


# ── Builders ────────────────────────────────────────────────────────


def _supported(
    catalog: Catalog,
    spec: PlatformSpec,
    *,
    label: str = "",
    notes: list[str] | None = None,
    extra_steps: list[Step] | None = None,
) -> Supported:
    """Assemble the refresh + install steps for a platform spec."""
    manager = catalog.manager(spec.manager)
    packages = tuple(spec.packages)

    refresh = None
    if manager.refresh:
        refresh = Step(
            id=f"{spec.manager}:refresh_index",
            kind="refresh_index",
            argv=tuple(manager.refresh),
            privileged=manager.privileged,
            description="Refresh package index",
        )

    install_argv = tuple(spec.install or manager.install) + packages
    install = Step(
        id=f"{spec.manager}:install",
        kind="install",
        argv=install_argv,
        privileged=manager.privileged,
        description=f"Install {len(packages)} packages",
    )

    return Supported(
        platform=label or spec.label,
        manager=spec.manager,
        packages=packages,
        extra_steps=tuple(extra_steps or ()),
        refresh_step=refresh,
        install_step=install,
        notes=tuple(notes or ()),
    )


def _unsupported(
    catalog: Catalog,
    kind: ErrorKind,
    reason: str,
    help_key: str,
) -> Unsupported:
    return Unsupported(
        kind=kind,
        reason=reason,
        remediation=catalog.remediation(help_key),
    )
