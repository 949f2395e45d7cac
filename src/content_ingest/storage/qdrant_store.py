"""Qdrant implementation of the vector-store abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models as rest

from content_ingest.ingestion.models import Point
from content_ingest.storage.base import VectorStoreBase

logger = logging.getLogger(__name__)

_DISTANCE_MAP = {
    "cosine": rest.Distance.COSINE,
    "dot": rest.Distance.DOT,
    "euclid": rest.Distance.EUCLID,
    "manhattan": rest.Distance.MANHATTAN,
}


class QdrantVectorStore(VectorStoreBase):
    """Qdrant-backed vector store.

    Parameters
    ----------
    url:
        Qdrant server URL, e.g. ``http://localhost:6333``.
    api_key:
        Qdrant Cloud API key (empty for local servers).
    client:
        Pre-built ``AsyncQdrantClient``; when given, *url* and *api_key*
        are ignored.
    """

    def __init__(
        self,
        url: str = "http://localhost:6333",
        *,
        api_key: str | None = None,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        if client is None:
            logger.info(
                "Initializing AsyncQdrantClient: url=%s, api_key=%s",
                url,
                "***" if api_key else "<none>",
            )
            client = AsyncQdrantClient(url=url, api_key=api_key or None)
        self._client = client

    # -- VectorStoreBase overrides --------------------------------------------

    async def upsert(
        self,
        collection_name: str,
        points: Sequence[Point],
        *,
        wait: bool = True,
    ) -> None:
        structs = [
            rest.PointStruct(id=point.id, vector=point.vector, payload=point.payload)
            for point in points
        ]
        logger.info("Upserting %d points into collection=%r", len(structs), collection_name)
        await self._client.upsert(collection_name=collection_name, points=structs, wait=wait)

    async def get_collection(self, collection_name: str) -> dict[str, Any]:
        info = await self._client.get_collection(collection_name=collection_name)
        return info.model_dump()

    async def create_collection(
        self,
        collection_name: str,
        *,
        vector_size: int,
        distance: str = "cosine",
    ) -> None:
        metric = _DISTANCE_MAP.get(distance.lower())
        if metric is None:
            raise ValueError(f"Unsupported distance metric: {distance!r}")
        logger.info(
            "Creating collection=%r (size=%d, distance=%s)", collection_name, vector_size, distance
        )
        await self._client.create_collection(
            collection_name=collection_name,
            vectors_config=rest.VectorParams(size=vector_size, distance=metric),
        )

    async def health_check(self) -> bool:
        try:
            await self._client.get_collections()
            return True
        except Exception:
            logger.warning("Qdrant health-check failed", exc_info=True)
            return False

    async def close(self) -> None:
        await self._client.close()
