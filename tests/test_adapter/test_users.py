"""Tests for MemoryAdapter user operations."""

import string
from datetime import UTC, datetime

import pytest

from auth_memory_adapter import MemoryAdapter, RecordNotFoundError


async def test_create_user_assigns_generated_id(adapter, ids):
    user = await adapter.create_user(email="user@example.com")
    assert len(user.id) == 32
    assert user.id.startswith("user-0001")
    assert ids.count == 1


async def test_default_ids_are_32_alphanumeric_chars():
    adapter = MemoryAdapter()
    alphabet = set(string.ascii_letters + string.digits)

    first = await adapter.create_user(email="a@example.com")
    second = await adapter.create_user(email="b@example.com")

    assert len(first.id) == 32
    assert set(first.id) <= alphabet
    assert first.id != second.id


async def test_get_user_by_email(adapter):
    user = await adapter.create_user(email="user@example.com")
    assert await adapter.get_user_by_email("user@example.com") == user
    assert await adapter.get_user_by_email("nobody@example.com") is None


async def test_get_user(adapter, alice):
    assert await adapter.get_user(alice.id) == alice
    assert await adapter.get_user("missing") is None


async def test_update_user_merges_fields(adapter, alice):
    verified = datetime(2024, 2, 1, tzinfo=UTC)
    updated = await adapter.update_user(alice.id, email_verified=verified)

    assert updated.email_verified == verified
    assert updated.name == "Alice"
    assert await adapter.get_user(alice.id) == updated


async def test_update_missing_user_raises(adapter):
    with pytest.raises(RecordNotFoundError) as exc_info:
        await adapter.update_user("ghost", name="Ghost")
    assert exc_info.value.entity == "User"
    assert exc_info.value.key == "ghost"


async def test_update_user_rejects_unknown_field(adapter, alice):
    with pytest.raises(ValueError):
        await adapter.update_user(alice.id, nickname="al")


async def test_get_user_by_account(adapter, alice, make_account):
    await adapter.link_account(make_account(alice.id, "gh-1"))

    assert await adapter.get_user_by_account(provider="github", provider_account_id="gh-1") == alice


async def test_get_user_by_account_misses(adapter, alice, make_account):
    await adapter.link_account(make_account("someone-deleted", "gh-2"))
    await adapter.link_account(make_account(alice.id, "gh-1"))

    assert await adapter.get_user_by_account(provider="github", provider_account_id="nope") is None
    assert await adapter.get_user_by_account(provider="google", provider_account_id="gh-1") is None
    assert await adapter.get_user_by_account(provider="github", provider_account_id="gh-2") is None


async def test_delete_missing_user_is_noop(adapter):
    assert await adapter.delete_user("ghost") is None


async def test_update_user_cannot_change_id(adapter, memory, alice, make_session):
    await adapter.create_session(make_session(alice.id, "sess-1"))

    with pytest.raises(ValueError):
        await adapter.update_user(alice.id, id="renamed")
    assert await adapter.get_user(alice.id) == alice

    await adapter.delete_user(alice.id)
    assert memory.sessions.keys() == []


async def test_update_user_accepts_unchanged_id(adapter, alice):
    updated = await adapter.update_user(alice.id, id=alice.id, name="Al")
    assert updated.id == alice.id
    assert updated.name == "Al"
