# Shared helpers for resource and API tests.
# FaultyStore lets a test fail chosen store calls to exercise partial cascades.

from __future__ import annotations

from typing import Any

from resources import HandlerRequest, HandlerResponse, Registry, dispatch
from store import SqlRecordStore, StoreError

PHONE = "5551234567"
OTHER_PHONE = "5559876543"
PASSWORD = "correct horse"
START_MS = 1_700_000_000_000
HOUR_MS = 60 * 60 * 1000


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = START_MS) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class FaultyStore(SqlRecordStore):
    """SqlRecordStore that raises StoreError for selected (operation, collection, id) calls."""

    def __init__(self, session_factory: Any) -> None:
        super().__init__(session_factory)
        self.failures: set[tuple[str, str, str]] = set()
        self.calls: list[tuple[str, str, str]] = []

    def fail(self, operation: str, collection: str, record_id: str) -> None:
        self.failures.add((operation, collection, record_id))

    def _maybe_fail(self, operation: str, collection: str, record_id: str) -> None:
        self.calls.append((operation, collection, record_id))
        if (operation, collection, record_id) in self.failures:
            raise StoreError(f"injected {operation} failure for {collection}/{record_id}")

    async def create(self, collection: str, record_id: str, record: dict) -> None:
        self._maybe_fail("create", collection, record_id)
        await super().create(collection, record_id, record)

    async def read(self, collection: str, record_id: str) -> dict:
        self._maybe_fail("read", collection, record_id)
        return await super().read(collection, record_id)

    async def update(self, collection: str, record_id: str, record: dict) -> None:
        self._maybe_fail("update", collection, record_id)
        await super().update(collection, record_id, record)

    async def delete(self, collection: str, record_id: str) -> None:
        self._maybe_fail("delete", collection, record_id)
        await super().delete(collection, record_id)


def make_request(
    method: str,
    resource: str,
    *,
    payload: dict | None = None,
    query: dict | None = None,
    token: str | None = None,
) -> HandlerRequest:
    headers = {"token": token} if token is not None else {}
    return HandlerRequest(
        method=method,
        resource=resource,
        headers=headers,
        query=query or {},
        payload=payload or {},
    )


def user_payload(phone: str = PHONE, password: str = PASSWORD, **overrides: Any) -> dict:
    payload = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "phone": phone,
        "password": password,
        "tosAgreement": True,
    }
    payload.update(overrides)
    return payload


def check_payload(**overrides: Any) -> dict:
    payload = {
        "protocol": "https",
        "url": "example.com",
        "method": "get",
        "successCodes": [200],
        "timeoutSeconds": 3,
    }
    payload.update(overrides)
    return payload


async def call(registry: Registry, method: str, resource: str, **kwargs: Any) -> HandlerResponse:
    return await dispatch(registry, make_request(method, resource, **kwargs))


async def register_and_login(registry: Registry, phone: str = PHONE, password: str = PASSWORD) -> str:
    created = await call(registry, "post", "users", payload=user_payload(phone, password))
    assert created.status_code == 200
    issued = await call(registry, "post", "tokens", payload={"phone": phone, "password": password})
    assert issued.status_code == 200
    return issued.body["id"]


async def create_check(registry: Registry, token: str, **overrides: Any) -> dict:
    response = await call(registry, "post", "checks", payload=check_payload(**overrides), token=token)
    assert response.status_code == 200, response.body
    return response.body
