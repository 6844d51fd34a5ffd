"""
Adapter registry — central dispatch for step execution.

The registry handles registration, lookup, mock mode, and step
execution. The executor never talks to adapters directly — always
through the registry.
"""

from __future__ import annotations

import logging
import time

from installdeps.adapters.base import Adapter, ExecutionContext
from installdeps.core.models.action import Receipt, Step

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Central registry and dispatcher for adapters.

    Features:
        - Register adapters by name
        - Mock mode: route every step to a mock adapter
        - Execute steps through the appropriate adapter
    """

    def __init__(self, mock_mode: bool = False, mock_adapter: Adapter | None = None):
        self._adapters: dict[str, Adapter] = {}
        self._mock_adapter: Adapter | None = None
        if mock_mode:
            if mock_adapter is None:
                from installdeps.adapters.mock import MockAdapter

                mock_adapter = MockAdapter()
            self._mock_adapter = mock_adapter

    def register(self, adapter: Adapter) -> None:
        name = adapter.name
        if name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def execute_step(self, step: Step, dry_run: bool = False) -> Receipt:
        """Run one step through its adapter. Never raises.

        1. Resolves the adapter (or mock)
        2. Validates the step
        3. Executes (or dry-runs)
        """
        start_time = time.monotonic()
        context = ExecutionContext(step=step, dry_run=dry_run)

        # Dry run — nothing is resolved against the host
        if dry_run:
            return Receipt.skip(
                adapter=step.adapter,
                step_id=step.id,
                reason=f"[dry-run] Would run: {step.command_line}",
                metadata={"dry_run": True, "command": step.command_line},
            )

        adapter = self._mock_adapter or self._adapters.get(step.adapter)

        if adapter is None:
            return Receipt.failure(
                adapter=step.adapter,
                step_id=step.id,
                error=f"No adapter registered for '{step.adapter}'",
            )

        try:
            is_valid, error_msg = adapter.validate(context)
            if not is_valid:
                return Receipt.failure(
                    adapter=step.adapter,
                    step_id=step.id,
                    error=f"Validation failed: {error_msg}",
                )
        except Exception as e:
            return Receipt.failure(
                adapter=step.adapter,
                step_id=step.id,
                error=f"Validation error: {e}",
            )

        try:
            receipt = adapter.execute(context)
        except Exception as e:
            # Adapters should never raise
            logger.error("Adapter %s raised during execution: %s", step.adapter, e)
            receipt = Receipt.failure(
                adapter=step.adapter,
                step_id=step.id,
                error=f"Unexpected error: {e}",
            )

        if not receipt.duration_ms:
            receipt.duration_ms = int((time.monotonic() - start_time) * 1000)
        return receipt


def default_registry(
    mock_mode: bool = False,
    mock_adapter: Adapter | None = None,
) -> AdapterRegistry:
    """Registry with the command adapter registered.

    In mock mode every step goes to ``mock_adapter`` (a fresh
    ``MockAdapter`` when None) instead.
    """
    from installdeps.adapters.shell.command import CommandAdapter

    registry = AdapterRegistry(mock_mode=mock_mode, mock_adapter=mock_adapter)
    registry.register(CommandAdapter())
    return registry
