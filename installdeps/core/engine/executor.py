"""
Engine executor — run a supported install action step by step.

Flow:
    action → steps (pre-steps, index refresh, install) → execute → receipts

Steps run strictly in order. The first failed step halts the run;
the steps after it are recorded as not run. Nothing is rolled back.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from installdeps.adapters.registry import AdapterRegistry
from installdeps.core.models.action import Receipt
from installdeps.core.models.install import Supported

logger = logging.getLogger(__name__)


@dataclass
class ExecutionReport:
    """Result of executing an action."""

    operation_id: str = ""
    platform: str = ""
    receipts: list[Receipt] = field(default_factory=list)
    not_run: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.status == "skipped")

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    @property
    def failed_receipt(self) -> Receipt | None:
        for r in self.receipts:
            if r.failed:
                return r
        return None

    def to_dict(self) -> dict:
        return {
            "operation_id": self.operation_id,
            "platform": self.platform,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "not_run": self.not_run,
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


def execute_action(
    action: Supported,
    registry: AdapterRegistry,
    dry_run: bool = False,
    operation_id: str | None = None,
    on_progress: Any = None,
) -> ExecutionReport:
    """Run every step of ``action`` through the adapter registry.

    Args:
        action: The resolved (and elevation-wrapped) action.
        registry: Adapter registry for dispatch.
        dry_run: If True, report what would run without running it.
        operation_id: Identifier for log correlation (generated if None).
        on_progress: Optional callback ``(step, receipt)``. Called with
                     ``receipt=None`` before a step runs, then again with
                     its receipt once it has finished.

    Returns:
        ExecutionReport; halts at the first failed step.
    """
    report = ExecutionReport(
        operation_id=operation_id or generate_operation_id(),
        platform=action.platform,
    )
    steps = action.steps()

    for index, step in enumerate(steps):
        logger.debug("[%s] starting %s", report.operation_id, step.id)
        if on_progress:
            on_progress(step, None)

        receipt = registry.execute_step(step, dry_run=dry_run)
        report.receipts.append(receipt)
        if on_progress:
            on_progress(step, receipt)

        status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
        logger.info("%s %s → %s", status_marker, step.id, receipt.status)

        if receipt.failed:
            report.not_run = [s.id for s in steps[index + 1:]]
            logger.error(
                "[%s] step %s failed: %s",
                report.operation_id, step.id, receipt.error,
            )
            break

    return report


def generate_operation_id() -> str:
    """Generate a unique operation ID."""
    now = datetime.now(UTC).strftime("%Y%m%d-%H%M%S")
    short = uuid.uuid4().hex[:6]
    return f"op-{now}-{short}"
