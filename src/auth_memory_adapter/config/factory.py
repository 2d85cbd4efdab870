"""Memory factory for creating store bundles from configuration.

Uses the Registry pattern to map backend type strings to builder
functions, allowing extensibility without modifying factory code.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import ClassVar

from auth_memory_adapter.adapter import MemoryAdapter
from auth_memory_adapter.memory import Memory, init_json_memory, init_memory

from .schema import AdapterConfigSchema, StoreConfigSchema

DATA_DIR_ENV = "AUTH_MEMORY_DIR"

MemoryBuilder = Callable[[StoreConfigSchema], Memory]


class MemoryFactoryError(Exception):
    """Raised when a store bundle cannot be built from configuration."""

    pass


def _build_memory(config: StoreConfigSchema) -> Memory:
    return init_memory()


def _build_json_memory(config: StoreConfigSchema) -> Memory:
    path = config.path or os.getenv(DATA_DIR_ENV, "")
    if not path:
        raise MemoryFactoryError(
            f"json store requires 'path' (or the {DATA_DIR_ENV} environment variable)"
        )
    return init_json_memory(path)


class MemoryFactory:
    """Creates :class:`Memory` bundles and adapters from configuration.

    Backends are registered at class level and can be extended via the
    `register` class method.

    Example:
        factory = MemoryFactory()
        memory = factory.create(StoreConfigSchema(type="json", path="./.auth-data"))
        adapter = factory.create_adapter(AdapterConfigSchema())
    """

    # Class-level registry mapping type strings to builders
    _registry: ClassVar[dict[str, MemoryBuilder]] = {
        "memory": _build_memory,
        "json": _build_json_memory,
    }

    @classmethod
    def register(cls, type_name: str, builder: MemoryBuilder) -> None:
        """Register a custom store backend.

        Args:
            type_name: Type string to use in configuration
            builder: Callable receiving the store config and returning a Memory

        Raises:
            ValueError: If type_name is empty

        Example:
            MemoryFactory.register("redis", build_redis_memory)
        """
        if not type_name:
            raise ValueError("Store type name must not be empty")
        cls._registry[type_name] = builder

    @classmethod
    def registered_types(cls) -> list[str]:
        """Return list of registered store type names."""
        return list(cls._registry.keys())

    def create(self, config: StoreConfigSchema) -> Memory:
        """Build a store bundle.

        Args:
            config: Store configuration

        Returns:
            The populated Memory

        Raises:
            MemoryFactoryError: If the type is unknown or the builder fails
        """
        builder = self._registry.get(config.type)
        if builder is None:
            available = ", ".join(sorted(self.registered_types()))
            raise MemoryFactoryError(
                f"Unknown store type: '{config.type}'. Available types: {available}"
            )

        try:
            return builder(config)
        except MemoryFactoryError:
            raise
        except Exception as e:
            raise MemoryFactoryError(f"Failed to create '{config.type}' store: {e}") from e

    def create_adapter(self, config: AdapterConfigSchema) -> MemoryAdapter:
        """Build a :class:`MemoryAdapter` over a freshly created store bundle."""
        return MemoryAdapter(self.create(config.store), id_length=config.id_length)
