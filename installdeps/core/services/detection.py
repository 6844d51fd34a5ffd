"""
Detection service — gather platform signals from the host.

Signal sources are queried in a fixed priority order, each tier
short-circuiting the ones below it:

    1. kernel name          (uname -s)
    2. distro marker file   (/etc/arch-release, Linux only)
    3. os-release NAME      (/etc/os-release)
    4. lsb_release          (id, codename, version)

All host access goes through a ``HostProbe`` so that detection can be
exercised without a real host. ``detect()`` never raises: a source
that is unavailable just leaves its field empty.
"""

from __future__ import annotations

import logging
import os
import platform
import shlex
import shutil
import subprocess
from pathlib import Path

from installdeps.core.models.platform import PlatformSignal

logger = logging.getLogger(__name__)

ARCH_MARKER = "/etc/arch-release"
OS_RELEASE = "/etc/os-release"

# Tools whose presence the dispatcher needs to know about
PREREQUISITE_TOOLS = ("brew", "lsb_release")

# The only environment variables that change the chosen action
RECOGNISED_ENV_FLAGS = ("TRAVIS",)


class HostProbe:
    """Read-only queries against the real host.

    Every method returns None / False when the underlying source is
    unavailable. Subclass or duck-type it in tests.
    """

    timeout = 10

    def kernel_name(self) -> str | None:
        out = self.run(["uname", "-s"])
        if out:
            return out
        return platform.system() or None

    def path_exists(self, path: str) -> bool:
        return Path(path).exists()

    def read_text(self, path: str) -> str | None:
        try:
            return Path(path).read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None

    def run(self, argv: list[str]) -> str | None:
        """Stripped stdout of ``argv``, or None if it is missing or fails."""
        try:
            r = subprocess.run(
                argv,
                capture_output=True, text=True, timeout=self.timeout,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired, OSError) as exc:
            logger.debug("Probe %s unavailable: %s", argv[0], exc)
            return None
        if r.returncode != 0:
            logger.debug("Probe %s exited %d", argv, r.returncode)
            return None
        return r.stdout.strip() or None

    def which(self, tool: str) -> bool:
        return shutil.which(tool) is not None

    def getenv(self, name: str) -> str | None:
        return os.environ.get(name)

    def mac_version(self) -> str | None:
        out = self.run(["sw_vers", "-productVersion"])
        if out:
            return out
        return platform.mac_ver()[0] or None


def parse_os_release(text: str) -> dict[str, str]:
    """Parse os-release KEY=value lines.

    Values may be double- or single-quoted with shell escaping.
    Blank lines, comments and malformed lines are skipped.
    """
    result: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if not key:
            continue
        try:
            parts = shlex.split(value)
        except ValueError:
            # Unbalanced quotes — keep the raw text
            parts = [value.strip().strip("\"'")]
        result[key] = " ".join(parts)
    return result


def _detect_linux_distro(
    probe: HostProbe,
    arch_marker: str,
    os_release: str,
) -> dict:
    """Tiers 2–4 of the cascade. Returns PlatformSignal field values."""
    # Tier 2: marker file wins over everything else
    if probe.path_exists(arch_marker):
        logger.debug("Found distro marker %s", arch_marker)
        return {"distro_id": "Arch", "distro_source": "marker"}

    # Tier 3: os-release NAME
    if probe.path_exists(os_release):
        text = probe.read_text(os_release)
        name = parse_os_release(text).get("NAME") if text else None
        if name:
            logger.debug("os-release NAME=%r", name)
            return {"distro_id": name, "distro_source": "os-release"}
        logger.debug("%s has no NAME, falling back to lsb_release", os_release)

    # Tier 4: lsb_release
    distro_id = probe.run(["lsb_release", "-is"])
    if distro_id is None:
        return {}
    return {
        "distro_id": distro_id,
        "distro_codename": probe.run(["lsb_release", "-cs"]),
        "version_string": probe.run(["lsb_release", "-rs"]),
        "distro_source": "lsb_release",
    }


def detect(
    probe: HostProbe | None = None,
    *,
    arch_marker: str = ARCH_MARKER,
    os_release: str = OS_RELEASE,
) -> PlatformSignal:
    """Gather the platform signal. Never raises.

    Args:
        probe: Host query implementation (default: the real host).
        arch_marker: Path of the Arch Linux marker file.
        os_release: Path of the os-release metadata file.

    Returns:
        A PlatformSignal; all fields empty when nothing could be queried.
    """
    probe = probe or HostProbe()
    fields: dict = {}

    kernel = probe.kernel_name()
    fields["kernel_name"] = kernel

    if kernel == "Linux":
        fields.update(_detect_linux_distro(probe, arch_marker, os_release))
    elif kernel == "Darwin":
        fields["version_string"] = probe.mac_version()

    fields["available_tools"] = frozenset(
        tool for tool in PREREQUISITE_TOOLS if probe.which(tool)
    )
    fields["env_flags"] = frozenset(
        name for name in RECOGNISED_ENV_FLAGS if probe.getenv(name)
    )

    signal = PlatformSignal(**fields)
    logger.info(
        "Detected kernel=%s distro=%s codename=%s version=%s (via %s)",
        signal.kernel_name,
        signal.distro_id,
        signal.distro_codename,
        signal.version_string,
        signal.distro_source or "-",
    )
    return signal


def detect_privileged(geteuid=None) -> bool:
    """True when the invoking principal is root."""
    geteuid = geteuid or getattr(os, "geteuid", None)
    if geteuid is None:
        return False
    return geteuid() == 0
