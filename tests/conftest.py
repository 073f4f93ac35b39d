"""Shared test fixtures.

Provides an in-memory ledger, a registry bound to it, a candidate factory,
a seeding helper and a FastAPI ``TestClient`` whose registry dependency uses
that ledger.
"""

import json
from collections.abc import Callable, Generator
from typing import Any

import pytest
from fastapi.testclient import TestClient

from app.db.ledger import InMemoryLedger
from app.models.candidate import Candidate
from app.services.codec import candidate_key, encode
from app.services.registry import RegistrySynchronizer

OWNER = "0xAbC0000000000000000000000000000000000001"
STRANGER = "0x9990000000000000000000000000000000000002"
FIXED_NOW = 1_700_000_000.0


@pytest.fixture()
def ledger() -> InMemoryLedger:
    """Empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture()
def registry(ledger: InMemoryLedger) -> RegistrySynchronizer:
    """Registry over the in-memory ledger with a fixed clock and score."""
    return RegistrySynchronizer(
        ledger,
        clock=lambda: FIXED_NOW,
        score_source=lambda: 42,
    )


@pytest.fixture()
def make_candidate() -> Callable[..., Candidate]:
    """Factory for ``Candidate`` instances with overridable fields."""

    def _make(**overrides: Any) -> Candidate:
        fields: dict[str, Any] = {
            "id": "1700000000000-abc1234",
            "name": "Ada Lovelace",
            "position": "Engineer",
            "score": 87,
            "stage": "screening",
            "encrypted_data": "FHE-e30=",
            "timestamp": 1_700_000_000,
            "owner": OWNER,
        }
        fields.update(overrides)
        return Candidate(**fields)

    return _make


@pytest.fixture()
def seed(ledger: InMemoryLedger) -> Callable[..., None]:
    """Write candidates and an index straight into the ledger's storage."""

    def _seed(*candidates: Candidate, index: list[str] | None = None) -> None:
        for candidate in candidates:
            ledger._data[candidate_key(candidate.id)] = encode(candidate)
        ids = index if index is not None else [c.id for c in candidates]
        ledger._data["candidate_keys"] = json.dumps(ids).encode("utf-8")

    return _seed


@pytest.fixture()
def test_client(ledger: InMemoryLedger) -> Generator[TestClient, None, None]:
    """FastAPI TestClient using the in-memory ledger with owner enforcement."""
    from app.main import app
    from app.routers.dependencies import get_registry

    app.dependency_overrides[get_registry] = lambda: RegistrySynchronizer(
        ledger,
        enforce_owner=True,
        clock=lambda: FIXED_NOW,
        score_source=lambda: 42,
    )
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
