"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import chromadb

from content_ingest.ingestion.models import Point
from content_ingest.storage.base import VectorStoreBase

logger = logging.getLogger(__name__)

_SPACE_MAP = {
    "cosine": "cosine",
    "dot": "ip",
    "euclid": "l2",
}


def _flatten_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Chroma metadata values must be flat str/int/float/bool."""
    return {
        key: value
        for key, value in payload.items()
        if key != "content" and isinstance(value, (str, int, float, bool))
    }


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store.

    Chroma writes are synchronous, so ``wait`` is always honoured.  The
    vector size is fixed by the first insert rather than at creation
    time; it is recorded in the collection metadata for reference.

    Parameters
    ----------
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    client:
        Pre-built async Chroma client; when given, *host* and *port* are
        ignored.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8000,
        *,
        client: Any = None,
    ) -> None:
        self._host = host
        self._port = port
        self._client = client

    async def _get_client(self) -> Any:
        if self._client is None:
            logger.info("Connecting to Chroma at %s:%d", self._host, self._port)
            self._client = await chromadb.AsyncHttpClient(host=self._host, port=self._port)
        return self._client

    # -- VectorStoreBase overrides --------------------------------------------

    async def upsert(
        self,
        collection_name: str,
        points: Sequence[Point],
        *,
        wait: bool = True,
    ) -> None:
        client = await self._get_client()
        collection = await client.get_collection(name=collection_name)
        logger.info("Upserting %d points into collection=%r", len(points), collection_name)
        await collection.upsert(
            ids=[point.id for point in points],
            embeddings=[point.vector for point in points],
            documents=[str(point.payload.get("content", "")) for point in points],
            metadatas=[_flatten_payload(point.payload) for point in points],
        )

    async def get_collection(self, collection_name: str) -> dict[str, Any]:
        client = await self._get_client()
        collection = await client.get_collection(name=collection_name)
        return {"name": collection.name, "metadata": collection.metadata or {}}

    async def create_collection(
        self,
        collection_name: str,
        *,
        vector_size: int,
        distance: str = "cosine",
    ) -> None:
        space = _SPACE_MAP.get(distance.lower())
        if space is None:
            raise ValueError(f"Unsupported distance metric: {distance!r}")
        client = await self._get_client()
        logger.info(
            "Creating collection=%r (size=%d, distance=%s)", collection_name, vector_size, distance
        )
        await client.create_collection(
            name=collection_name,
            metadata={"hnsw:space": space, "vector_size": vector_size},
        )

    async def health_check(self) -> bool:
        try:
            client = await self._get_client()
            await client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
