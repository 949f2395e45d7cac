"""
Storage — vector-store gateways behind one async interface.

Public surface
--------------
- :class:`VectorStoreBase` — abstract backend (subclass for other stores).
- :class:`QdrantVectorStore` — default Qdrant backend.
- :class:`ChromaVectorStore` — Chroma backend.
- :func:`get_vector_store` — build the backend named in the settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from content_ingest.storage.base import VectorStoreBase

if TYPE_CHECKING:
    from content_ingest.config import Settings

__all__ = [
    "ChromaVectorStore",
    "QdrantVectorStore",
    "VectorStoreBase",
    "get_vector_store",
]


def get_vector_store(settings: Settings) -> VectorStoreBase:
    """Return the backend selected by ``settings.vector_db_type``."""
    db_type = settings.vector_db_type.lower()
    if db_type == "qdrant":
        from content_ingest.storage.qdrant_store import QdrantVectorStore

        return QdrantVectorStore(settings.qdrant_url, api_key=settings.qdrant_api_key or None)
    if db_type == "chroma":
        from content_ingest.storage.chroma_store import ChromaVectorStore

        return ChromaVectorStore(settings.chroma_host, settings.chroma_port)
    raise ValueError(
        f"Unsupported vector_db_type={settings.vector_db_type!r}. "
        "Expected 'qdrant' or 'chroma'."
    )


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import backends to avoid pulling in their SDKs at import time."""
    if name == "QdrantVectorStore":
        from content_ingest.storage.qdrant_store import QdrantVectorStore

        return QdrantVectorStore
    if name == "ChromaVectorStore":
        from content_ingest.storage.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
