"""Adapters — bindings to the external programs hostctl drives.

Public re-exports for convenient access.
"""

from hostctl.adapters.base import Adapter, ExecutionContext
from hostctl.adapters.mock import MockAdapter
from hostctl.adapters.registry import AdapterRegistry, default_registry

__all__ = [
    "Adapter",
    "AdapterRegistry",
    "ExecutionContext",
    "MockAdapter",
    "default_registry",
]
