"""
Elevation policy — wrap privileged steps when not running as root.

Decided once per run from the principal's identity and applied the
same way to every branch the dispatcher can take.
"""

from __future__ import annotations

import logging

from installdeps.core.models.install import InstallAction, Supported

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = ("sudo",)


def apply_elevation(
    action: InstallAction,
    is_root: bool,
    prefix: tuple[str, ...] | list[str] = DEFAULT_PREFIX,
) -> InstallAction:
    """Return ``action`` with every privileged step elevation-wrapped.

    Unsupported actions, and every action when ``is_root`` is True,
    come back unchanged.
    """
    if not isinstance(action, Supported) or is_root:
        return action

    prefix = tuple(prefix)
    extra = tuple(s.elevate(prefix) for s in action.extra_steps)
    refresh = action.refresh_step.elevate(prefix) if action.refresh_step else None
    install = action.install_step.elevate(prefix)

    wrapped = [*extra, install] + ([refresh] if refresh else [])
    elevated = action.model_copy(update={
        "extra_steps": extra,
        "refresh_step": refresh,
        "install_step": install,
        "requires_elevation": any(s.elevated for s in wrapped),
    })
    if elevated.requires_elevation:
        logger.debug("Not running as root, wrapping privileged steps with %s", prefix)
    return elevated
