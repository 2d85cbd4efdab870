"""
auth_memory_adapter — Hello World

Five stores, one façade.  Swap init_memory() for init_json_memory(path)
and the same data survives a restart.
"""

import asyncio
import tempfile
from datetime import UTC, datetime, timedelta

from auth_memory_adapter import (
    Account,
    MemoryAdapter,
    Session,
    VerificationToken,
    init_json_memory,
)


async def main():
    data_dir = tempfile.mkdtemp(prefix="auth-memory-")

    # ──────────────────────────────────────
    #  1. Create the adapter over JSON files
    # ──────────────────────────────────────
    adapter = MemoryAdapter(init_json_memory(data_dir))

    # ──────────────────────────────────────
    #  2. A user signs up with GitHub
    # ──────────────────────────────────────
    user = await adapter.create_user(email="user@example.com", name="User")
    await adapter.link_account(
        Account(
            user_id=user.id,
            type="oauth",
            provider="github",
            provider_account_id="12345",
        )
    )
    await adapter.create_session(
        Session(
            session_token="session-abc",
            user_id=user.id,
            expires=datetime.now(UTC) + timedelta(days=30),
        )
    )
    print(f"Created user {user.id} in {data_dir}")

    # ──────────────────────────────────────
    #  3. Restart: load everything from disk
    # ──────────────────────────────────────
    restarted = MemoryAdapter(init_json_memory(data_dir))
    found = await restarted.get_session_and_user("session-abc")
    print(f"  Session user after restart: {found.user.email if found else None}")
    by_account = await restarted.get_user_by_account(provider="github", provider_account_id="12345")
    print(f"  By account: {by_account}")

    # ──────────────────────────────────────
    #  4. Magic-link tokens are single use
    # ──────────────────────────────────────
    await restarted.create_verification_token(
        VerificationToken(
            identifier=user.email,
            token="magic",
            expires=datetime.now(UTC) + timedelta(hours=1),
        )
    )
    print(f"  First use:  {await restarted.use_verification_token(user.email, 'magic')}")
    print(f"  Second use: {await restarted.use_verification_token(user.email, 'magic')}")

    # ──────────────────────────────────────
    #  5. Deleting the user cascades
    # ──────────────────────────────────────
    await restarted.delete_user(user.id)
    print(f"  Session after delete: {await restarted.get_session_and_user('session-abc')}")


if __name__ == "__main__":
    asyncio.run(main())
