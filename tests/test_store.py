from __future__ import annotations

import pytest

from store import RecordExistsError, RecordNotFoundError, RecordStore


@pytest.mark.asyncio
async def test_create_read_update_delete(store) -> None:
    await store.create("users", "5551234567", {"firstName": "Ada"})
    assert await store.read("users", "5551234567") == {"firstName": "Ada"}

    await store.update("users", "5551234567", {"firstName": "Grace"})
    assert (await store.read("users", "5551234567"))["firstName"] == "Grace"

    await store.delete("users", "5551234567")
    with pytest.raises(RecordNotFoundError):
        await store.read("users", "5551234567")


@pytest.mark.asyncio
async def test_create_existing_record_conflicts(store) -> None:
    await store.create("tokens", "t" * 20, {"id": "t" * 20})
    with pytest.raises(RecordExistsError):
        await store.create("tokens", "t" * 20, {"id": "t" * 20})


@pytest.mark.asyncio
async def test_collections_are_separate_namespaces(store) -> None:
    await store.create("users", "same-id", {"kind": "user"})
    await store.create("checks", "same-id", {"kind": "check"})
    assert (await store.read("checks", "same-id"))["kind"] == "check"


@pytest.mark.asyncio
async def test_update_and_delete_missing_record(store) -> None:
    with pytest.raises(RecordNotFoundError):
        await store.update("checks", "missing", {})
    with pytest.raises(RecordNotFoundError):
        await store.delete("checks", "missing")


def test_record_store_contract_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        RecordStore()


@pytest.mark.asyncio
async def test_partial_contract_implementation_is_rejected() -> None:
    class ReadOnlyStore(RecordStore):
        async def read(self, collection: str, record_id: str) -> dict:
            return {}

    with pytest.raises(TypeError):
        ReadOnlyStore()
