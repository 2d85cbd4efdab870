"""Tests for cascading user deletion."""

import pytest

from auth_memory_adapter import AdapterConfigError, CascadeOperations, MemoryAdapter


@pytest.fixture
async def populated(adapter, alice, make_account, make_session, make_token):
    """Alice with 2 sessions, 2 accounts and 2 tokens; Bob with one of each."""
    bob = await adapter.create_user(email="bob@example.com")

    for token in ("a-s1", "a-s2"):
        await adapter.create_session(make_session(alice.id, token))
    await adapter.create_session(make_session(bob.id, "b-s1"))

    await adapter.link_account(make_account(alice.id, "a-gh", "github"))
    await adapter.link_account(make_account(alice.id, "a-gg", "google"))
    await adapter.link_account(make_account(bob.id, "b-gh", "github"))

    await adapter.create_verification_token(make_token(alice.email, "a-t1"))
    await adapter.create_verification_token(make_token(alice.email, "a-t2"))
    await adapter.create_verification_token(make_token(bob.email, "b-t1"))
    return alice, bob


async def test_delete_user_cascades(adapter, memory, populated):
    alice, bob = populated

    deleted = await adapter.delete_user(alice.id)

    assert deleted == alice
    assert await adapter.get_user(alice.id) is None
    assert memory.sessions.keys() == ["b-s1"]
    assert memory.accounts.keys() == ["b-gh"]
    assert memory.verification_tokens.keys() == ["b-t1"]
    assert await adapter.get_user(bob.id) == bob


async def test_delete_user_uses_injected_operations(memory, clock, ids, populated):
    alice, _ = populated
    calls = []

    async def delete_session(token):
        calls.append(("delete_session", token))

    async def unlink_account(provider, provider_account_id):
        calls.append(("unlink_account", provider, provider_account_id))

    async def use_verification_token(identifier, token):
        calls.append(("use_verification_token", identifier, token))
        return None

    adapter = MemoryAdapter(
        memory,
        clock=clock,
        id_generator=ids,
        cascade=CascadeOperations(
            delete_session=delete_session,
            unlink_account=unlink_account,
            use_verification_token=use_verification_token,
        ),
    )
    await adapter.delete_user(alice.id)

    assert sorted(calls) == [
        ("delete_session", "a-s1"),
        ("delete_session", "a-s2"),
        ("unlink_account", "github", "a-gh"),
        ("unlink_account", "google", "a-gg"),
        ("use_verification_token", "alice@example.com", "a-t1"),
        ("use_verification_token", "alice@example.com", "a-t2"),
    ]
    assert memory.users.get(alice.id) is None


@pytest.mark.parametrize(
    "missing",
    ["delete_session", "unlink_account", "use_verification_token"],
)
async def test_missing_cascade_operation_fails_before_deleting(
    memory, clock, ids, populated, missing
):
    alice, _ = populated
    base = MemoryAdapter(memory, clock=clock, id_generator=ids)
    operations = {
        "delete_session": base.delete_session,
        "unlink_account": base.unlink_account,
        "use_verification_token": base.use_verification_token,
    }
    operations[missing] = None
    adapter = MemoryAdapter(memory, clock=clock, cascade=CascadeOperations(**operations))

    with pytest.raises(AdapterConfigError) as exc_info:
        await adapter.delete_user(alice.id)

    assert exc_info.value.operation == missing
    assert memory.users.get(alice.id) == alice
    assert len(memory.sessions) == 3
    assert len(memory.accounts) == 3
    assert len(memory.verification_tokens) == 3


async def test_expired_session_without_delete_session_is_config_error(
    memory, clock, alice, make_session
):
    adapter = MemoryAdapter(memory, clock=clock, cascade=CascadeOperations())
    await adapter.create_session(make_session(alice.id, ttl=1))
    clock.advance(5)

    with pytest.raises(AdapterConfigError):
        await adapter.get_session_and_user("sess-1")
