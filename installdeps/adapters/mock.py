"""
Mock adapter — test double for step execution.

Used by ``install --mock`` (via the registry) and by the tests to walk through an install
without touching the package manager. Returns success by default;
configurable per step ID.
"""

from __future__ import annotations

from installdeps.adapters.base import Adapter, ExecutionContext
from installdeps.core.models.action import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing."""

    def __init__(
        self,
        adapter_name: str = "mock",
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    def set_response(self, step_id: str, receipt: Receipt) -> None:
        """Set a custom response for a specific step ID."""
        self._responses[step_id] = receipt

    def set_failure(self, step_id: str, error: str = "Mock failure") -> None:
        """Configure a specific step to fail."""
        self._responses[step_id] = Receipt.failure(
            adapter=self._name,
            step_id=step_id,
            error=error,
        )

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)

        if context.step.id in self._responses:
            return self._responses[context.step.id]

        return Receipt.success(
            adapter=self._name,
            step_id=context.step.id,
            output=self._default_output,
            metadata={"mock": True, "command": context.step.command_line},
        )

    def reset(self) -> None:
        """Clear call log and custom responses."""
        self._call_log.clear()
        self._responses.clear()
