"""
Step and Receipt models — the execution contract.

Steps represent external commands to run. Receipts represent results.
This is the I/O contract between the executor and adapters:
the executor sends Steps, adapters return Receipts. Never exceptions.
"""

from __future__ import annotations

import shlex
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

StepKind = Literal["append_source", "remove_package", "refresh_index", "install"]


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Step(BaseModel):
    """One external command in an install action.

    ``privileged`` marks steps that write root-owned state (the package
    database, the apt source list). Only those are ever wrapped with the
    elevation prefix.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    kind: StepKind
    argv: tuple[str, ...]
    stdin: str | None = None
    privileged: bool = True
    elevated: bool = False
    adapter: str = "command"
    description: str = ""

    @property
    def command_line(self) -> str:
        """Shell-style rendering, for display only."""
        cmd = shlex.join(self.argv)
        if self.stdin is not None:
            line = self.stdin.rstrip("\n")
            return f"echo {shlex.quote(line)} | {cmd}"
        return cmd

    def elevate(self, prefix: tuple[str, ...]) -> Step:
        """Return a copy wrapped with ``prefix``; no-op for unprivileged steps."""
        if not self.privileged or self.elevated:
            return self
        return self.model_copy(update={"argv": prefix + self.argv, "elevated": True})

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind,
            "argv": list(self.argv),
            "stdin": self.stdin,
            "privileged": self.privileged,
            "elevated": self.elevated,
            "command": self.command_line,
        }


class Receipt(BaseModel):
    """Result of running one step.

    The adapter NEVER raises exceptions — failures are captured here.
    """

    adapter: str
    step_id: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the step succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the step failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        adapter: str,
        step_id: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(
            adapter=adapter,
            step_id=step_id,
            status="ok",
            output=output,
            **kwargs,
        )

    @classmethod
    def failure(
        cls,
        adapter: str,
        step_id: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(
            adapter=adapter,
            step_id=step_id,
            status="failed",
            error=error,
            **kwargs,
        )

    @classmethod
    def skip(
        cls,
        adapter: str,
        step_id: str,
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt."""
        return cls(
            adapter=adapter,
            step_id=step_id,
            status="skipped",
            output=reason,
            **kwargs,
        )
