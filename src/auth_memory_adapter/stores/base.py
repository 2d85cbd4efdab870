"""Store protocol — generic key-value container for one entity type."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class Store(ABC, Generic[T]):
    """Abstract base for all storage backends.

    A store maps string keys to records of a single type.  It is agnostic to
    what the record contains.  Operations are synchronous; the backing
    mapping is owned exclusively by the store instance.
    """

    @abstractmethod
    def get(self, key: str) -> T | None:
        """Return the stored value, or ``None`` if not found."""
        ...

    @abstractmethod
    def set(self, key: str, value: T) -> None:
        """Create or overwrite a value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete a value.  No-op if the key does not exist."""
        ...

    @abstractmethod
    def items(self) -> list[tuple[str, T]]:
        """Return a snapshot of all ``(key, value)`` pairs in insertion order."""
        ...

    # ── derived traversal ────────────────────────────────────

    def values(self) -> list[T]:
        """Return a snapshot of all current values.

        Each call takes a fresh snapshot, so mutating the store while walking
        the result is safe but not reflected in it.
        """
        return [value for _, value in self.items()]

    def keys(self) -> list[str]:
        return [key for key, _ in self.items()]

    def for_each(self, callback: Callable[[T, str], object]) -> None:
        """Call ``callback(value, key)`` for every entry in a snapshot."""
        for key, value in self.items():
            callback(value, key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self.items())
