"""Memory — the five entity stores the adapter operates on."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from auth_memory_adapter.records import (
    Account,
    Authenticator,
    Session,
    User,
    VerificationToken,
)
from auth_memory_adapter.stores.base import Store
from auth_memory_adapter.stores.json_file import JSONFileStore
from auth_memory_adapter.stores.memory import InMemoryStore

# File name per store inside a JSON data directory.
JSON_FILE_NAMES: dict[str, str] = {
    "users": "users.json",
    "accounts": "accounts.json",
    "sessions": "sessions.json",
    "verification_tokens": "verification_tokens.json",
    "authenticators": "authenticators.json",
}


@dataclass
class Memory:
    """Bundle of per-entity stores.

    Attributes:
        users:               Keyed by user id.
        accounts:            Keyed by ``provider_account_id``.
        sessions:            Keyed by ``session_token``.
        verification_tokens: Keyed by ``token``.
        authenticators:      Keyed by base64 of ``credential_id``.
    """

    users: Store[User]
    accounts: Store[Account]
    sessions: Store[Session]
    verification_tokens: Store[VerificationToken]
    authenticators: Store[Authenticator]


def init_memory() -> Memory:
    """Return a :class:`Memory` of empty, volatile stores."""
    return Memory(
        users=InMemoryStore(),
        accounts=InMemoryStore(),
        sessions=InMemoryStore(),
        verification_tokens=InMemoryStore(),
        authenticators=InMemoryStore(),
    )


def init_json_memory(base_dir: str | Path) -> Memory:
    """Return a :class:`Memory` persisted as one JSON file per store under *base_dir*.

    Existing files are loaded; missing or unreadable ones are reset to ``{}``.
    """
    root = Path(base_dir)
    return Memory(
        users=JSONFileStore(root / JSON_FILE_NAMES["users"], User),
        accounts=JSONFileStore(root / JSON_FILE_NAMES["accounts"], Account),
        sessions=JSONFileStore(root / JSON_FILE_NAMES["sessions"], Session),
        verification_tokens=JSONFileStore(
            root / JSON_FILE_NAMES["verification_tokens"], VerificationToken
        ),
        authenticators=JSONFileStore(root / JSON_FILE_NAMES["authenticators"], Authenticator),
    )
