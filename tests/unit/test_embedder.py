"""Unit tests for the LangChain embedding gateway and provider factory."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding

from content_ingest.config import Settings
from content_ingest.ingestion.embedder import LangChainEmbeddingGateway, get_embedding_gateway


class _ShortResponseEmbeddings(DeterministicFakeEmbedding):
    """Drops the last vector to simulate a misbehaving provider."""

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return super().embed_documents(texts)[:-1]


@pytest.fixture()
def gateway() -> LangChainEmbeddingGateway:
    return LangChainEmbeddingGateway(
        DeterministicFakeEmbedding(size=8), model="fake", dimension=8
    )


@pytest.mark.asyncio
async def test_single_string_returns_one_vector(gateway) -> None:
    vectors = await gateway.embed("hello")
    assert len(vectors) == 1
    assert len(vectors[0]) == 8


@pytest.mark.asyncio
async def test_batch_preserves_request_order(gateway) -> None:
    texts = ["alpha", "beta", "gamma"]
    batch = await gateway.embed(texts)
    singles = [(await gateway.embed(t))[0] for t in texts]
    assert batch == singles


@pytest.mark.asyncio
async def test_empty_batch_makes_no_call(gateway) -> None:
    assert await gateway.embed([]) == []


@pytest.mark.asyncio
async def test_dimension_mismatch_raises() -> None:
    gateway = LangChainEmbeddingGateway(DeterministicFakeEmbedding(size=8), model="fake", dimension=512)
    with pytest.raises(ValueError, match="expected 512"):
        await gateway.embed("hello")


@pytest.mark.asyncio
async def test_count_mismatch_raises() -> None:
    gateway = LangChainEmbeddingGateway(_ShortResponseEmbeddings(size=8), model="fake", dimension=8)
    with pytest.raises(ValueError, match="2 vectors for 3 inputs"):
        await gateway.embed(["a", "b", "c"])


def test_factory_builds_openai_embeddings() -> None:
    settings = Settings(
        openai_api_key="sk-test",
        openai_base_url="http://localhost:9000/v1",
        embedding_dimensions=512,
    )
    with patch("langchain_openai.OpenAIEmbeddings") as openai_cls:
        gateway = get_embedding_gateway(settings)

    openai_cls.assert_called_once_with(
        model="text-embedding-3-small",
        dimensions=512,
        api_key="sk-test",
        base_url="http://localhost:9000/v1",
    )
    assert gateway.dimension == 512
    assert gateway.model == "text-embedding-3-small"


def test_factory_builds_huggingface_embeddings() -> None:
    settings = Settings(embedding_provider="huggingface")
    with patch("langchain_huggingface.HuggingFaceEmbeddings") as hf_cls:
        gateway = get_embedding_gateway(settings)

    hf_cls.assert_called_once()
    assert hf_cls.call_args.kwargs["model_name"] == "sentence-transformers/all-MiniLM-L6-v2"
    assert gateway.model == "sentence-transformers/all-MiniLM-L6-v2"
    assert gateway.dimension == 384


def test_huggingface_ignores_openai_model_settings() -> None:
    settings = Settings(
        embedding_provider="huggingface",
        embedding_model="text-embedding-3-small",
        embedding_dimensions=512,
        huggingface_model="BAAI/bge-small-en-v1.5",
        huggingface_dimensions=384,
    )
    with patch("langchain_huggingface.HuggingFaceEmbeddings") as hf_cls:
        gateway = get_embedding_gateway(settings)

    assert hf_cls.call_args.kwargs["model_name"] == "BAAI/bge-small-en-v1.5"
    assert gateway.dimension == 384


def test_factory_rejects_unknown_provider() -> None:
    with pytest.raises(ValueError, match="Unsupported embedding_provider"):
        get_embedding_gateway(Settings(embedding_provider="cohere"))
