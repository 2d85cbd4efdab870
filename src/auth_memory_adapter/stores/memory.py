"""InMemoryStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

from typing import TypeVar

from auth_memory_adapter.stores.base import Store

T = TypeVar("T")


class InMemoryStore(Store[T]):
    """In-memory store backed by a plain dict.  Data is lost on process exit."""

    def __init__(self) -> None:
        self._data: dict[str, T] = {}

    def get(self, key: str) -> T | None:
        return self._data.get(key)

    def set(self, key: str, value: T) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def items(self) -> list[tuple[str, T]]:
        return list(self._data.items())

    def __len__(self) -> int:
        return len(self._data)
