"""Configuration submodule for building adapters.

Exports:
    MemoryFactory: Builds store bundles and adapters from configuration
    AdapterConfigSchema: Top-level adapter configuration
    StoreConfigSchema: Store backend configuration
"""

from .factory import MemoryFactory, MemoryFactoryError
from .schema import AdapterConfigSchema, StoreConfigSchema

__all__ = [
    "AdapterConfigSchema",
    "MemoryFactory",
    "MemoryFactoryError",
    "StoreConfigSchema",
]
