"""Storage backends for adapter records."""

from auth_memory_adapter.stores.base import Store
from auth_memory_adapter.stores.json_file import JSONFileStore
from auth_memory_adapter.stores.memory import InMemoryStore

__all__ = ["InMemoryStore", "JSONFileStore", "Store"]
