"""
Shared test configuration.
Every test gets its own in-memory SQLite record store and a controllable clock.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from database import init_db  # noqa: E402
from resources import build_registry  # noqa: E402
from server import create_app  # noqa: E402
from tests.support import FakeClock, FaultyStore  # noqa: E402


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        engine.dispose()


@pytest.fixture()
def store(session_factory) -> FaultyStore:
    return FaultyStore(session_factory)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def registry(store, clock):
    return build_registry(store, clock=clock, max_checks=5)


@pytest.fixture()
def client(store, clock):
    app = create_app(store, clock=clock, max_checks=5)
    with TestClient(app) as test_client:
        yield test_client
