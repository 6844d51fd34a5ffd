"""
InstallAction — the single outcome of resolving a platform.

A closed variant: either ``Supported`` (a manager, a package list and
the ordered steps to run) or ``Unsupported`` (one of four error kinds,
a reason and remediation hints). Exactly one is produced per run.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict

from installdeps.core.models.action import Step


class ErrorKind(StrEnum):
    """Why a platform cannot be handled.

    The kinds are kept apart because the remediation shown to the
    user differs for each of them.
    """

    MISSING_PREREQUISITE_TOOL = "missing_prerequisite_tool"
    UNSUPPORTED_PLATFORM = "unsupported_platform"
    UNSUPPORTED_VERSION = "unsupported_version"
    UNRECOGNIZED_PLATFORM = "unrecognized_platform"


class Supported(BaseModel):
    """A platform we know how to provision."""

    model_config = ConfigDict(frozen=True)

    tag: Literal["supported"] = "supported"
    platform: str
    manager: str
    packages: tuple[str, ...]
    extra_steps: tuple[Step, ...] = ()
    refresh_step: Step | None = None
    install_step: Step
    notes: tuple[str, ...] = ()
    requires_elevation: bool = False

    def steps(self) -> list[Step]:
        """Pre-steps, then the index refresh (if any), then the install."""
        steps = list(self.extra_steps)
        if self.refresh_step is not None:
            steps.append(self.refresh_step)
        steps.append(self.install_step)
        return steps

    def source_lines(self) -> list[str]:
        """Lines this action appends to the package-source list."""
        return [
            s.stdin.rstrip("\n")
            for s in self.extra_steps
            if s.kind == "append_source" and s.stdin
        ]

    def to_dict(self) -> dict:
        return {
            "tag": self.tag,
            "platform": self.platform,
            "manager": self.manager,
            "packages": list(self.packages),
            "notes": list(self.notes),
            "requires_elevation": self.requires_elevation,
            "steps": [s.to_dict() for s in self.steps()],
        }


class Unsupported(BaseModel):
    """A platform we recognise as out of reach, or do not recognise at all."""

    model_config = ConfigDict(frozen=True)

    tag: Literal["unsupported"] = "unsupported"
    kind: ErrorKind
    reason: str
    remediation: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "tag": self.tag,
            "kind": self.kind.value,
            "reason": self.reason,
            "remediation": list(self.remediation),
        }


InstallAction = Supported | Unsupported
