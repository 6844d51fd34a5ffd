"""Adapters — bindings to the external package-manager commands.

Public re-exports for convenient access.
"""

from installdeps.adapters.base import Adapter, ExecutionContext
from installdeps.adapters.mock import MockAdapter
from installdeps.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
