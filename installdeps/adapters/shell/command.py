"""
Command adapter — run a step's argv and capture its output.

The single place where package-manager commands are spawned. Commands
run without a shell; the optional step stdin is piped in (used for
``tee -a`` source-list appends).
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import time

from installdeps.adapters.base import Adapter, ExecutionContext
from installdeps.core.models.action import Receipt

logger = logging.getLogger(__name__)

# Package installs can legitimately take a long time
DEFAULT_TIMEOUT = 3600


class CommandAdapter(Adapter):
    """Execute a step's argv and capture output.

    Output is truncated to the last 2000 characters in receipts.
    """

    def __init__(self, timeout: int = DEFAULT_TIMEOUT):
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "command"

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        argv = context.step.argv
        if not argv:
            return False, "Step has an empty command"
        if shutil.which(argv[0]) is None:
            return False, f"Command not found: {argv[0]}"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        step = context.step
        timeout = context.timeout or self._timeout

        logger.debug("Executing: %s", step.command_line)
        start = time.monotonic()

        try:
            result = subprocess.run(
                list(step.argv),
                input=step.stdin,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            return Receipt.failure(
                adapter=self.name,
                step_id=step.id,
                error=f"Command timed out after {timeout}s",
                metadata={"command": step.command_line, "timeout": timeout},
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                step_id=step.id,
                error=f"Command execution error: {e}",
                metadata={"command": step.command_line},
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        output = result.stdout[-2000:].strip() if result.stdout else ""
        stderr = result.stderr[-2000:].strip() if result.stderr else ""

        if result.returncode == 0:
            return Receipt.success(
                adapter=self.name,
                step_id=step.id,
                output=output,
                duration_ms=elapsed_ms,
                metadata={
                    "command": step.command_line,
                    "return_code": result.returncode,
                    "stderr": stderr,
                },
            )

        return Receipt.failure(
            adapter=self.name,
            step_id=step.id,
            error=stderr or f"Command exited with code {result.returncode}",
            duration_ms=elapsed_ms,
            metadata={
                "command": step.command_line,
                "return_code": result.returncode,
                "stdout": output,
            },
        )
