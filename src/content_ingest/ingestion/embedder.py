"""Embedding gateway — single place to swap embedding providers.

Supports two providers:

1. **OpenAI** (default) — ``text-embedding-3-small`` with a reduced
   ``dimensions`` setting.  Set ``OPENAI_API_KEY``; ``OPENAI_BASE_URL``
   points the client at any OpenAI-compatible server.
2. **HuggingFace** — a local sentence-transformer model, configured
   separately through ``HUGGINGFACE_MODEL`` and ``HUGGINGFACE_DIMENSIONS``
   (``all-MiniLM-L6-v2`` and its native 384 by default).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

    from content_ingest.config import Settings

logger = logging.getLogger(__name__)


class EmbeddingGateway(ABC):
    """Batch text → fixed-dimension vectors.

    Parameters
    ----------
    model:
        Provider model identifier.
    dimension:
        Length of every returned vector.
    """

    def __init__(self, model: str, dimension: int) -> None:
        self.model = model
        self.dimension = dimension

    @abstractmethod
    async def embed(self, input: str | Sequence[str]) -> list[list[float]]:
        """Return one vector per input text, in request order."""
        ...


class LangChainEmbeddingGateway(EmbeddingGateway):
    """Adapter over any LangChain :class:`Embeddings` implementation."""

    def __init__(self, embeddings: Embeddings, *, model: str, dimension: int) -> None:
        super().__init__(model, dimension)
        self._embeddings = embeddings

    async def embed(self, input: str | Sequence[str]) -> list[list[float]]:
        texts = [input] if isinstance(input, str) else list(input)
        if not texts:
            return []

        vectors = await self._embeddings.aembed_documents(texts)

        if len(vectors) != len(texts):
            raise ValueError(
                f"Embedding provider returned {len(vectors)} vectors for {len(texts)} inputs"
            )
        for vector in vectors:
            if len(vector) != self.dimension:
                raise ValueError(
                    f"Embedding provider returned a {len(vector)}-dim vector, "
                    f"expected {self.dimension}"
                )
        logger.debug("Embedded %d texts with model=%s", len(texts), self.model)
        return [list(v) for v in vectors]


def get_embedding_gateway(settings: Settings) -> EmbeddingGateway:
    """Build the configured embedding gateway.

    Provider SDKs are imported here only, so the rest of the package can
    be used (and tested) without them installed.
    """
    provider = settings.embedding_provider.lower()

    if provider == "openai":
        from langchain_openai import OpenAIEmbeddings

        kwargs: dict = {
            "model": settings.embedding_model,
            "dimensions": settings.embedding_dimensions,
            "api_key": settings.openai_api_key,
        }
        if settings.openai_base_url:
            logger.info("Using OpenAI-compatible endpoint: %s", settings.openai_base_url)
            kwargs["base_url"] = settings.openai_base_url
        return LangChainEmbeddingGateway(
            OpenAIEmbeddings(**kwargs),
            model=settings.embedding_model,
            dimension=settings.embedding_dimensions,
        )

    if provider == "huggingface":
        from langchain_huggingface import HuggingFaceEmbeddings

        embeddings = HuggingFaceEmbeddings(
            model_name=settings.huggingface_model,
            encode_kwargs={"normalize_embeddings": True},
        )
        return LangChainEmbeddingGateway(
            embeddings,
            model=settings.huggingface_model,
            dimension=settings.huggingface_dimensions,
        )

    raise ValueError(
        f"Unsupported embedding_provider={settings.embedding_provider!r}. "
        "Expected 'openai' or 'huggingface'."
    )
