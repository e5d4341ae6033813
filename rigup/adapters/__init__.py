"""Adapters — tool bindings for external commands.

Public re-exports for convenient access.
"""

from rigup.adapters.base import Adapter, ExecutionContext
from rigup.adapters.mock import MockAdapter
from rigup.adapters.registry import AdapterRegistry, build_default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "build_default_registry",
]
