"""Entity records persisted by the adapter.

Each record is an immutable dataclass.  Serialization to and from JSON-ready
dicts is a field-by-field transform driven by two class-level declarations:

* ``_binary_fields`` — first-level fields holding raw ``bytes``; written as
  tagged base64 structures.
* ``_datetime_fields`` — first-level fields holding ``datetime``; written as
  ISO-8601 text.

Only first-level fields are transformed.  Bytes nested inside a container
field are not descended into and will not survive a JSON round trip.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from datetime import UTC, datetime
from typing import Any, ClassVar, Self

from auth_memory_adapter.codec import (
    decode_bytes,
    decode_datetime,
    encode_bytes,
    encode_datetime,
)


@dataclass(frozen=True)
class Record:
    """Base class for all stored entities.

    ``_key_field`` names the field a store keys the record by; :meth:`merged`
    refuses to change it.  Naive datetimes in ``_datetime_fields`` are taken
    to be UTC.
    """

    _key_field: ClassVar[str] = ""
    _binary_fields: ClassVar[frozenset[str]] = frozenset()
    _datetime_fields: ClassVar[frozenset[str]] = frozenset()

    def __post_init__(self) -> None:
        for name in self._datetime_fields:
            value = getattr(self, name)
            if isinstance(value, datetime) and value.tzinfo is None:
                object.__setattr__(self, name, value.replace(tzinfo=UTC))

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict of this record."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                data[f.name] = None
            elif f.name in self._binary_fields:
                data[f.name] = encode_bytes(value)
            elif f.name in self._datetime_fields:
                data[f.name] = encode_datetime(value)
            else:
                data[f.name] = value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Rebuild a record from the output of :meth:`to_dict`.

        Raises:
            TypeError: On missing or unknown fields.
            ValueError: On a malformed binary or datetime value.
        """
        values = dict(data)
        for name in cls._binary_fields:
            if values.get(name) is not None:
                values[name] = decode_bytes(values[name])
        for name in cls._datetime_fields:
            if values.get(name) is not None:
                values[name] = decode_datetime(values[name])
        return cls(**values)

    def merged(self, **changes: Any) -> Self:
        """Return a copy with *changes* applied (shallow merge).

        Raises:
            ValueError: On unknown fields, or a change to the key field.
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Unknown {type(self).__name__} field(s): {', '.join(unknown)}")
        key = self._key_field
        if key in changes and changes[key] != getattr(self, key):
            raise ValueError(f"Cannot change {type(self).__name__}.{key}")
        return replace(self, **changes)


@dataclass(frozen=True)
class User(Record):
    """A person who can sign in.  ``email`` uniqueness is not enforced."""

    _key_field: ClassVar[str] = "id"
    _datetime_fields: ClassVar[frozenset[str]] = frozenset({"email_verified"})

    id: str
    email: str
    email_verified: datetime | None = None
    name: str | None = None
    image: str | None = None


@dataclass(frozen=True)
class Account(Record):
    """A provider account linked to a user.  Keyed by ``provider_account_id``."""

    _key_field: ClassVar[str] = "provider_account_id"

    user_id: str
    type: str
    provider: str
    provider_account_id: str
    refresh_token: str | None = None
    access_token: str | None = None
    expires_at: int | None = None
    token_type: str | None = None
    scope: str | None = None
    id_token: str | None = None
    session_state: str | None = None


@dataclass(frozen=True)
class Session(Record):
    """A database session.  Keyed by ``session_token``."""

    _key_field: ClassVar[str] = "session_token"
    _datetime_fields: ClassVar[frozenset[str]] = frozenset({"expires"})

    session_token: str
    user_id: str
    expires: datetime


@dataclass(frozen=True)
class VerificationToken(Record):
    """A single-use sign-in token.  Keyed by ``token``, not ``identifier``."""

    _key_field: ClassVar[str] = "token"
    _datetime_fields: ClassVar[frozenset[str]] = frozenset({"expires"})

    identifier: str
    token: str
    expires: datetime


@dataclass(frozen=True)
class Authenticator(Record):
    """A WebAuthn credential.  Keyed by the base64 text of ``credential_id``."""

    _key_field: ClassVar[str] = "credential_id"
    _binary_fields: ClassVar[frozenset[str]] = frozenset(
        {"credential_id", "credential_public_key"}
    )

    credential_id: bytes
    user_id: str
    provider_account_id: str
    credential_public_key: bytes
    counter: int
    credential_device_type: str
    credential_backed_up: bool
    transports: str | None = None


@dataclass(frozen=True)
class SessionAndUser:
    """Result of :meth:`MemoryAdapter.get_session_and_user`."""

    session: Session
    user: User
