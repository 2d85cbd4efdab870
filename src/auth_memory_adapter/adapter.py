"""MemoryAdapter — CRUD façade implementing the auth framework's adapter contract."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from auth_memory_adapter._internal.runtime import (
    Clock,
    IdGenerator,
    RandomIdGenerator,
    SystemClock,
)
from auth_memory_adapter.codec import credential_key
from auth_memory_adapter.exceptions import AdapterConfigError, RecordNotFoundError
from auth_memory_adapter.memory import Memory, init_memory
from auth_memory_adapter.records import (
    Account,
    Authenticator,
    Session,
    SessionAndUser,
    User,
    VerificationToken,
)

logger = logging.getLogger(__name__)

USER_ID_LENGTH = 32


@dataclass(frozen=True)
class CascadeOperations:
    """Sibling operations ``delete_user`` and session eviction depend on.

    Any field left as ``None`` is reported as an :class:`AdapterConfigError`
    by the operation that needs it.

    Attributes:
        delete_session:         ``(session_token) -> None``
        unlink_account:         ``(provider, provider_account_id) -> None``
        use_verification_token: ``(identifier, token) -> VerificationToken | None``
    """

    delete_session: Callable[[str], Awaitable[None]] | None = None
    unlink_account: Callable[[str, str], Awaitable[None]] | None = None
    use_verification_token: (
        Callable[[str, str], Awaitable[VerificationToken | None]] | None
    ) = None


class MemoryAdapter:
    """Stores auth framework entities in a :class:`Memory` bundle.

    Lookups return ``None`` when nothing matches.  Updates of a missing
    record raise :class:`RecordNotFoundError`.  Sessions past their expiry
    are evicted when read.

    Parameters:
        memory:       Stores to operate on.  Defaults to :func:`init_memory`.
        clock:        Injectable clock, used for session expiry.
        id_generator: Injectable strategy for new user ids.
        cascade:      Operations used by ``delete_user`` and session eviction.
                      Defaults to this adapter's own implementations.
        id_length:    Length of generated user ids.
    """

    def __init__(
        self,
        memory: Memory | None = None,
        *,
        clock: Clock | None = None,
        id_generator: IdGenerator | None = None,
        cascade: CascadeOperations | None = None,
        id_length: int = USER_ID_LENGTH,
    ) -> None:
        self._memory = memory or init_memory()
        self._clock = clock or SystemClock()
        self._ids = id_generator or RandomIdGenerator()
        self._id_length = id_length
        self._cascade = cascade or CascadeOperations(
            delete_session=self.delete_session,
            unlink_account=self.unlink_account,
            use_verification_token=self.use_verification_token,
        )

    @property
    def memory(self) -> Memory:
        return self._memory

    def _require(self, operation: str, purpose: str) -> Callable[..., Awaitable[Any]]:
        implementation = getattr(self._cascade, operation)
        if implementation is None:
            raise AdapterConfigError(operation, purpose)
        return implementation

    # ── users ────────────────────────────────────────────────

    async def create_user(
        self,
        *,
        email: str,
        name: str | None = None,
        image: str | None = None,
        email_verified: datetime | None = None,
    ) -> User:
        """Store a new user under a freshly generated id and return it."""
        user = User(
            id=self._ids.generate(self._id_length),
            email=email,
            email_verified=email_verified,
            name=name,
            image=image,
        )
        self._memory.users.set(user.id, user)
        return user

    async def get_user(self, user_id: str) -> User | None:
        return self._memory.users.get(user_id)

    async def get_user_by_email(self, email: str) -> User | None:
        return next((user for user in self._memory.users.values() if user.email == email), None)

    async def get_user_by_account(
        self, *, provider: str, provider_account_id: str
    ) -> User | None:
        """Resolve the account, then its owning user.  ``None`` if either is missing."""
        account = await self.get_account(provider=provider, provider_account_id=provider_account_id)
        if account is None:
            return None
        return self._memory.users.get(account.user_id)

    async def update_user(self, user_id: str, /, **changes: Any) -> User:
        """Apply *changes* to a stored user.

        Raises:
            RecordNotFoundError: If no such user exists.
            ValueError: On an unknown field, or an attempt to change ``id``.
        """
        current = self._memory.users.get(user_id)
        if current is None:
            raise RecordNotFoundError("User", user_id)
        updated = current.merged(**changes)
        self._memory.users.set(user_id, updated)
        return updated

    async def delete_user(self, user_id: str) -> User | None:
        """Delete a user along with its sessions, accounts and verification tokens.

        All three cascade operations are checked before anything is deleted.
        Each cascade step is awaited before the user record itself is removed.

        Returns:
            The deleted user, or ``None`` if no such user existed.

        Raises:
            AdapterConfigError: If a cascade operation is not configured.
        """
        purpose = "required to cascade user deletion"
        delete_session = self._require("delete_session", purpose)
        unlink_account = self._require("unlink_account", purpose)
        use_verification_token = self._require("use_verification_token", purpose)

        user = self._memory.users.get(user_id)
        if user is None:
            return None

        for session in self._memory.sessions.values():
            if session.user_id == user.id:
                await delete_session(session.session_token)

        for account in self._memory.accounts.values():
            if account.user_id == user.id:
                await unlink_account(account.provider, account.provider_account_id)

        for token in self._memory.verification_tokens.values():
            if token.identifier == user.email:
                await use_verification_token(token.identifier, token.token)

        self._memory.users.delete(user_id)
        return user

    # ── accounts ─────────────────────────────────────────────

    async def link_account(self, account: Account) -> Account:
        self._memory.accounts.set(account.provider_account_id, account)
        return account

    async def unlink_account(self, provider: str, provider_account_id: str) -> None:
        """Remove the account if it exists and belongs to *provider*."""
        account = await self.get_account(provider=provider, provider_account_id=provider_account_id)
        if account is None:
            return
        self._memory.accounts.delete(account.provider_account_id)

    async def get_account(
        self, *, provider: str, provider_account_id: str
    ) -> Account | None:
        account = self._memory.accounts.get(provider_account_id)
        if account is None or account.provider != provider:
            return None
        return account

    # ── sessions ─────────────────────────────────────────────

    async def create_session(self, session: Session) -> Session:
        self._memory.sessions.set(session.session_token, session)
        return session

    async def get_session_and_user(self, session_token: str) -> SessionAndUser | None:
        """Return the session and its user.

        A session whose ``expires`` is earlier than the clock's ``now()`` is
        deleted as a side effect and reported as ``None``.
        """
        session = self._memory.sessions.get(session_token)
        if session is None:
            return None

        if session.expires < self._clock.now():
            delete_session = self._require("delete_session", "required to evict expired sessions")
            logger.debug("Evicting expired session of user %s", session.user_id)
            await delete_session(session_token)
            return None

        user = self._memory.users.get(session.user_id)
        if user is None:
            return None
        return SessionAndUser(session=session, user=user)

    async def update_session(self, session_token: str, /, **changes: Any) -> Session:
        """Apply *changes* to a stored session; ``session_token`` cannot change."""
        current = self._memory.sessions.get(session_token)
        if current is None:
            raise RecordNotFoundError("Session", session_token)
        updated = current.merged(**changes)
        self._memory.sessions.set(session_token, updated)
        return updated

    async def delete_session(self, session_token: str) -> None:
        self._memory.sessions.delete(session_token)

    # ── verification tokens ──────────────────────────────────

    async def create_verification_token(self, token: VerificationToken) -> VerificationToken:
        self._memory.verification_tokens.set(token.token, token)
        return token

    async def use_verification_token(self, identifier: str, token: str) -> VerificationToken | None:
        """Redeem a token: return it and delete it.  A second call returns ``None``."""
        current = self._memory.verification_tokens.get(token)
        if current is None or current.identifier != identifier:
            return None
        self._memory.verification_tokens.delete(token)
        return current

    # ── authenticators ───────────────────────────────────────

    async def list_authenticators_by_user_id(self, user_id: str) -> list[Authenticator]:
        """Authenticators attached to any account owned by *user_id*."""
        account_ids = {
            account.provider_account_id
            for account in self._memory.accounts.values()
            if account.user_id == user_id
        }
        return [
            authenticator
            for authenticator in self._memory.authenticators.values()
            if authenticator.provider_account_id in account_ids
        ]

    async def create_authenticator(self, authenticator: Authenticator) -> Authenticator:
        key = credential_key(authenticator.credential_id)
        self._memory.authenticators.set(key, authenticator)
        logger.debug("Stored authenticator %s (%d total)", key, len(self._memory.authenticators))
        return authenticator

    async def get_authenticator(self, credential_id: bytes) -> Authenticator | None:
        key = credential_key(credential_id)
        logger.debug("Looking up authenticator %s", key)
        return self._memory.authenticators.get(key)

    async def update_authenticator_counter(
        self, credential_id: bytes, new_counter: int
    ) -> Authenticator:
        """Persist and return the authenticator with ``counter`` replaced."""
        current = await self.get_authenticator(credential_id)
        if current is None:
            raise RecordNotFoundError("Authenticator", credential_key(credential_id))
        updated = current.merged(counter=new_counter)
        self._memory.authenticators.set(credential_key(credential_id), updated)
        return updated
