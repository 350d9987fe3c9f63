from __future__ import annotations

import pytest

from resources import TokenVerifier
from tests.support import HOUR_MS, OTHER_PHONE, PHONE, register_and_login


@pytest.mark.asyncio
async def test_verify_accepts_live_token_for_owner(registry, store, clock) -> None:
    token_id = await register_and_login(registry)
    verifier = TokenVerifier(store, clock)

    assert await verifier.verify(token_id, PHONE) is True


@pytest.mark.asyncio
async def test_verify_rejects_unknown_wrong_owner_and_missing(registry, store, clock) -> None:
    token_id = await register_and_login(registry)
    verifier = TokenVerifier(store, clock)

    assert await verifier.verify("x" * 20, PHONE) is False
    assert await verifier.verify(token_id, OTHER_PHONE) is False
    assert await verifier.verify(None, PHONE) is False


@pytest.mark.asyncio
async def test_verify_rejects_token_at_and_after_expiry(registry, store, clock) -> None:
    token_id = await register_and_login(registry)
    verifier = TokenVerifier(store, clock)

    clock.advance(HOUR_MS - 1)
    assert await verifier.verify(token_id, PHONE) is True

    clock.advance(1)
    assert await verifier.verify(token_id, PHONE) is False


@pytest.mark.asyncio
async def test_verify_collapses_store_failures_to_false(registry, store, clock) -> None:
    token_id = await register_and_login(registry)
    store.fail("read", "tokens", token_id)

    assert await TokenVerifier(store, clock).verify(token_id, PHONE) is False
