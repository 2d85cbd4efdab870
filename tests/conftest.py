"""Shared test fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from auth_memory_adapter import (
    Account,
    Authenticator,
    MemoryAdapter,
    Session,
    VerificationToken,
    init_memory,
)


class FakeClock:
    def __init__(self, start: datetime | None = None):
        self._now = start or datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._now

    def advance(self, seconds: float) -> None:
        self._now += timedelta(seconds=seconds)


class SequentialIds:
    """Deterministic ids: ``user-0001``, ``user-0002``, ... padded to *length*."""

    def __init__(self):
        self.count = 0

    def generate(self, length: int) -> str:
        self.count += 1
        return f"user-{self.count:04d}".ljust(length, "0")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def ids():
    return SequentialIds()


@pytest.fixture
def memory():
    return init_memory()


@pytest.fixture
def adapter(memory, clock, ids):
    return MemoryAdapter(memory, clock=clock, id_generator=ids)


@pytest.fixture
async def alice(adapter):
    return await adapter.create_user(email="alice@example.com", name="Alice")


@pytest.fixture
def make_account():
    def _make(user_id: str, provider_account_id: str = "gh-1", provider: str = "github"):
        return Account(
            user_id=user_id,
            type="oauth",
            provider=provider,
            provider_account_id=provider_account_id,
            access_token="at_123",
        )

    return _make


@pytest.fixture
def make_session(clock):
    def _make(user_id: str, token: str = "sess-1", ttl: float = 3600):
        return Session(
            session_token=token,
            user_id=user_id,
            expires=clock.now() + timedelta(seconds=ttl),
        )

    return _make


@pytest.fixture
def make_token(clock):
    def _make(identifier: str, token: str = "tok-1"):
        return VerificationToken(
            identifier=identifier,
            token=token,
            expires=clock.now() + timedelta(hours=1),
        )

    return _make


@pytest.fixture
def make_authenticator():
    def _make(
        provider_account_id: str = "gh-1",
        credential_id: bytes = b"\x01\x02\xff\x00cred",
        user_id: str = "",
    ):
        return Authenticator(
            credential_id=credential_id,
            user_id=user_id,
            provider_account_id=provider_account_id,
            credential_public_key=b"\x04public-key\x00\xfe",
            counter=0,
            credential_device_type="singleDevice",
            credential_backed_up=False,
            transports="usb,nfc",
        )

    return _make
