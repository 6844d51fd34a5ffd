"""
Install use case — detect, dispatch, elevate, execute.

    detect() → dispatch() → apply_elevation() → execute_action()

``resolve_plan`` stops after elevation (used by ``plan``);
``execute_plan`` runs an already-resolved plan, so a caller can report
the platform before anything executes; ``run_install`` does both.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from installdeps.adapters.registry import AdapterRegistry, default_registry
from installdeps.core.config.loader import CatalogError, load_catalog
from installdeps.core.engine.executor import ExecutionReport, execute_action
from installdeps.core.models.install import InstallAction, Supported, Unsupported
from installdeps.core.models.platform import PlatformSignal
from installdeps.core.services.detection import HostProbe, detect, detect_privileged
from installdeps.core.services.dispatch import dispatch
from installdeps.core.services.elevation import apply_elevation

logger = logging.getLogger(__name__)


@dataclass
class PlanResult:
    """The detected signal and the action it resolved to."""

    signal: PlatformSignal | None = None
    action: InstallAction | None = None
    is_root: bool = False
    project: str = ""
    error: str | None = None

    @property
    def unsupported(self) -> Unsupported | None:
        return self.action if isinstance(self.action, Unsupported) else None

    @property
    def exit_code(self) -> int:
        if self.error or self.unsupported:
            return 1
        return 0

    def to_dict(self) -> dict:
        result: dict = {}
        if self.error:
            result["error"] = self.error
            return result
        result["project"] = self.project
        result["is_root"] = self.is_root
        if self.signal:
            result["signal"] = self.signal.to_dict()
        if self.action:
            result["action"] = self.action.to_dict()
        return result


@dataclass
class InstallResult(PlanResult):
    """A plan plus the receipts of running it."""

    report: ExecutionReport | None = None
    dry_run: bool = False
    mock: bool = False

    @property
    def exit_code(self) -> int:
        if super().exit_code:
            return 1
        if self.report and not self.report.all_ok:
            return 1
        return 0

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.error:
            return result
        result["dry_run"] = self.dry_run
        result["mock"] = self.mock
        if self.report:
            result["report"] = self.report.to_dict()
        result["exit_code"] = self.exit_code
        return result


def resolve_plan(
    catalog_path: Path | None = None,
    probe: HostProbe | None = None,
    is_root: bool | None = None,
) -> PlanResult:
    """Detect the platform and resolve it to an elevation-wrapped action.

    Args:
        catalog_path: User catalog (default: env var, then built-in).
        probe: Host query implementation (default: the real host).
        is_root: Override the principal check (default: euid == 0).
    """
    try:
        catalog = load_catalog(catalog_path)
    except CatalogError as e:
        return PlanResult(error=str(e))

    signal = detect(probe)
    root = detect_privileged() if is_root is None else is_root
    action = apply_elevation(dispatch(signal, catalog), root, catalog.elevation_prefix)

    return PlanResult(
        signal=signal,
        action=action,
        is_root=root,
        project=catalog.project,
    )


def execute_plan(
    plan: PlanResult,
    dry_run: bool = False,
    mock_mode: bool = False,
    registry: AdapterRegistry | None = None,
    on_progress: Any = None,
) -> InstallResult:
    """Execute a resolved plan.

    Unsupported platforms and catalog errors never reach the executor;
    every supported plan comes back with a report.

    Args:
        plan: Output of ``resolve_plan``.
        dry_run: Produce skip receipts instead of running anything.
        mock_mode: Route every step to the mock adapter.
        registry: Adapter registry (default: command adapter).
        on_progress: Per-step callback, see ``execute_action``.
    """
    result = InstallResult(
        signal=plan.signal,
        action=plan.action,
        is_root=plan.is_root,
        project=plan.project,
        error=plan.error,
        dry_run=dry_run,
        mock=mock_mode,
    )

    if not isinstance(plan.action, Supported):
        return result

    registry = registry or default_registry(mock_mode=mock_mode)
    result.report = execute_action(
        plan.action, registry, dry_run=dry_run, on_progress=on_progress,
    )

    logger.info(
        "Install on %s finished: %s (%d/%d steps ok)",
        plan.action.platform,
        result.report.status,
        result.report.succeeded,
        result.report.total,
    )
    return result


def run_install(
    catalog_path: Path | None = None,
    dry_run: bool = False,
    mock_mode: bool = False,
    probe: HostProbe | None = None,
    is_root: bool | None = None,
    registry: AdapterRegistry | None = None,
    on_progress: Any = None,
) -> InstallResult:
    """Full run: resolve the plan and execute it."""
    plan = resolve_plan(catalog_path=catalog_path, probe=probe, is_root=is_root)
    return execute_plan(
        plan,
        dry_run=dry_run,
        mock_mode=mock_mode,
        registry=registry,
        on_progress=on_progress,
    )
