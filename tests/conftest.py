"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from typing import Any

import pytest

from content_ingest.ingestion.embedder import EmbeddingGateway
from content_ingest.ingestion.models import Point
from content_ingest.ingestion.orchestrator import IngestionOrchestrator
from content_ingest.storage.base import VectorStoreBase


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


# ── Fake gateways for deterministic testing ─────────────────────────────


class FakeEmbeddingGateway(EmbeddingGateway):
    """Returns ``[len(text), position, 0, …]`` vectors and records every call.

    Any text listed in ``fail_on`` makes the call raise ``RuntimeError``;
    any text in ``malformed_on`` gets a vector of non-numeric strings.
    """

    def __init__(self, dimension: int = 4) -> None:
        super().__init__("fake-embedding", dimension)
        self.calls: list[list[str]] = []
        self.fail_on: set[str] = set()
        self.malformed_on: set[str] = set()

    async def embed(self, input: str | Sequence[str]) -> list[list[float]]:
        texts = [input] if isinstance(input, str) else list(input)
        self.calls.append(texts)
        for text in texts:
            if text in self.fail_on:
                raise RuntimeError(f"provider rejected input: {text[:20]}")
        return [
            ["not-a-float"] * self.dimension
            if text in self.malformed_on
            else [float(len(text)), float(i)] + [0.0] * (self.dimension - 2)
            for i, text in enumerate(texts)
        ]


class FakeVectorStore(VectorStoreBase):
    """In-memory store that records calls in order."""

    def __init__(self, collections: Sequence[str] = ()) -> None:
        self.collections: dict[str, dict[str, Any]] = {
            name: {"vector_size": None, "distance": None} for name in collections
        }
        self.points: dict[str, list[Point]] = {}
        self.upsert_calls: list[tuple[str, list[Point], bool]] = []
        self.events: list[str] = []
        self.fail_upsert = False
        self.fail_get = False
        self.fail_create = False
        self.closed = False

    async def upsert(self, collection_name: str, points: Sequence[Point], *, wait: bool = True) -> None:
        self.events.append("upsert")
        if self.fail_upsert:
            raise ConnectionError("store unavailable")
        self.upsert_calls.append((collection_name, list(points), wait))
        self.points.setdefault(collection_name, []).extend(points)

    async def get_collection(self, collection_name: str) -> dict[str, Any]:
        self.events.append("get_collection")
        if self.fail_get:
            raise ConnectionError("store unavailable")
        if collection_name not in self.collections:
            raise KeyError(f"collection {collection_name!r} not found")
        return self.collections[collection_name]

    async def create_collection(
        self,
        collection_name: str,
        *,
        vector_size: int,
        distance: str = "cosine",
    ) -> None:
        self.events.append("create_collection")
        if self.fail_create:
            raise ConnectionError("cannot create collection")
        self.collections[collection_name] = {"vector_size": vector_size, "distance": distance}

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True


# ── Fixtures ────────────────────────────────────────────────────────────


@pytest.fixture()
def fake_embedder() -> FakeEmbeddingGateway:
    return FakeEmbeddingGateway()


@pytest.fixture()
def fake_store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture()
def sequential_ids():
    """Deterministic id factory: ``id-0``, ``id-1``, …"""
    counter = itertools.count()
    return lambda: f"id-{next(counter)}"


@pytest.fixture()
def orchestrator(
    fake_embedder: FakeEmbeddingGateway,
    fake_store: FakeVectorStore,
    sequential_ids,
) -> IngestionOrchestrator:
    return IngestionOrchestrator(
        fake_embedder,
        fake_store,
        id_factory=sequential_ids,
        chunk_size=10,
        chunk_overlap=2,
    )
