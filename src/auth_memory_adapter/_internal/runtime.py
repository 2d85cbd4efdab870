"""Clock and id-generation seams.  Inject fakes in tests."""

from __future__ import annotations

import secrets
import string
from datetime import UTC, datetime
from typing import Protocol

ID_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits


class Clock(Protocol):
    """Protocol for getting the current time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Default clock backed by the real system time (timezone-aware UTC)."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class IdGenerator(Protocol):
    """Protocol for producing opaque record identifiers."""

    def generate(self, length: int) -> str: ...


class RandomIdGenerator:
    """Draws each character uniformly from ``[A-Za-z0-9]`` using :mod:`secrets`.

    Collisions are not checked.
    """

    def __init__(self, alphabet: str = ID_ALPHABET) -> None:
        self._alphabet = alphabet

    def generate(self, length: int) -> str:
        return "".join(secrets.choice(self._alphabet) for _ in range(length))
