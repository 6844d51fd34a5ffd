"""
Domain models — Pydantic types for install-deps.

All models are re-exported here for convenient access:

    from installdeps.core.models import PlatformSignal, Supported, Unsupported, Step
"""

from installdeps.core.models.action import Receipt, Step
from installdeps.core.models.catalog import (
    Catalog,
    MacOSRelease,
    MacOSSpec,
    ManagerSpec,
    PlatformSpec,
    UbuntuRelease,
    UbuntuSpec,
)
from installdeps.core.models.install import (
    ErrorKind,
    InstallAction,
    Supported,
    Unsupported,
)
from installdeps.core.models.platform import PlatformSignal

__all__ = [
    # catalog.py
    "Catalog",
    # install.py
    "ErrorKind",
    "InstallAction",
    "MacOSRelease",
    "MacOSSpec",
    "ManagerSpec",
    # platform.py
    "PlatformSignal",
    "PlatformSpec",
    # action.py
    "Receipt",
    "Step",
    "Supported",
    "UbuntuRelease",
    "UbuntuSpec",
    "Unsupported",
]
