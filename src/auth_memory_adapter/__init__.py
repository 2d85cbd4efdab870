"""auth_memory_adapter — in-memory storage adapter for an auth framework.

Five entity stores (users, accounts, sessions, verification tokens,
authenticators) behind a CRUD façade.  Stores are either volatile dicts or
JSON files rewritten on every change.  Not meant for production.
"""

from auth_memory_adapter.adapter import CascadeOperations, MemoryAdapter
from auth_memory_adapter.client import AuthClient, SignInResult
from auth_memory_adapter.exceptions import (
    AdapterConfigError,
    AdapterError,
    AuthClientError,
    RecordNotFoundError,
)
from auth_memory_adapter.memory import Memory, init_json_memory, init_memory
from auth_memory_adapter.records import (
    Account,
    Authenticator,
    Session,
    SessionAndUser,
    User,
    VerificationToken,
)

__all__ = [
    "Account",
    "AdapterConfigError",
    "AdapterError",
    "AuthClient",
    "AuthClientError",
    "Authenticator",
    "CascadeOperations",
    "Memory",
    "MemoryAdapter",
    "RecordNotFoundError",
    "Session",
    "SessionAndUser",
    "SignInResult",
    "User",
    "VerificationToken",
    "init_json_memory",
    "init_memory",
]
