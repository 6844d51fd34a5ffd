"""
PlatformSignal — the raw facts gathered about the host.

Produced exactly once per run by the detection service and consumed by
the dispatcher. Every field is optional: a signal source that is not
available on this host simply leaves its field empty.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

DistroSource = Literal["marker", "os-release", "lsb_release"]


class PlatformSignal(BaseModel):
    """Immutable snapshot of the platform signals.

    ``distro_source`` records which detection tier produced
    ``distro_id``, because the dispatcher matches differently per tier
    (exact id for lsb_release, prefix for os-release NAME).
    """

    model_config = ConfigDict(frozen=True)

    kernel_name: str | None = None
    distro_id: str | None = None
    distro_codename: str | None = None
    version_string: str | None = None

    distro_source: DistroSource | None = None
    available_tools: frozenset[str] = frozenset()
    env_flags: frozenset[str] = frozenset()

    @property
    def is_empty(self) -> bool:
        """True when no signal source answered at all."""
        return (
            self.kernel_name is None
            and self.distro_id is None
            and self.distro_codename is None
            and self.version_string is None
        )

    def has_tool(self, name: str) -> bool:
        return name in self.available_tools

    def has_flag(self, name: str) -> bool:
        return name in self.env_flags

    def major_minor(self) -> str | None:
        """``10.11.6`` → ``10.11``. None when there is no version."""
        if not self.version_string:
            return None
        parts = self.version_string.strip().split(".")
        return ".".join(parts[:2])

    def to_dict(self) -> dict:
        return {
            "kernel_name": self.kernel_name,
            "distro_id": self.distro_id,
            "distro_codename": self.distro_codename,
            "version_string": self.version_string,
            "distro_source": self.distro_source,
            "available_tools": sorted(self.available_tools),
            "env_flags": sorted(self.env_flags),
        }
