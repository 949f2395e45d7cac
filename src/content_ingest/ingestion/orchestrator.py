"""Ingestion orchestrator — segments / records → embeddings → vector store.

Two modes share the same tail (embed → build point → upsert):

* **Batch mode** (:meth:`IngestionOrchestrator.ingest_segments`) — every
  segment of one input goes through a single embedding call and a single
  upsert.  The batch succeeds or fails as a whole.
* **Per-item mode** (:meth:`IngestionOrchestrator.ingest_records`) — each
  record gets its own embedding call and upsert.  A failing record is
  logged, counted and skipped; the run carries on.

Usage::

    orchestrator = IngestionOrchestrator(embedder, store)
    result = await orchestrator.ingest_article(text, ArticleMetadata(title="…"))

    await orchestrator.ensure_collection()
    tally = await orchestrator.ingest_records(records)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING
from uuid import uuid4

from content_ingest.ingestion.chunker import chunk_text
from content_ingest.ingestion.errors import (
    BootstrapError,
    EmptyResultError,
    GatewayError,
    ValidationError,
)
from content_ingest.ingestion.extractor import extract_records
from content_ingest.ingestion.models import (
    ArticleIngestResult,
    ArticleMetadata,
    ContentType,
    IngestionTally,
    Point,
    PostIngestResult,
    PostMetadata,
    Record,
    Segment,
)

if TYPE_CHECKING:
    from content_ingest.config import Settings
    from content_ingest.ingestion.embedder import EmbeddingGateway
    from content_ingest.storage.base import VectorStoreBase

logger = logging.getLogger(__name__)

# Request metadata copied onto every segment of an article.
_OVERRIDE_FIELDS = ("title", "author", "date", "language")

ProgressCallback = Callable[[int, int], None]


def _new_point_id() -> str:
    return str(uuid4())


class IngestionOrchestrator:
    """Compose chunking / extraction with the embedding and store gateways.

    Parameters
    ----------
    embedder:
        Embedding gateway; its ``dimension`` sizes new collections.
    store:
        Vector-store gateway.
    id_factory:
        Returns a fresh point id per call.  Defaults to random UUID4
        strings; tests pass a deterministic sequence.
    chunk_size / chunk_overlap:
        Window parameters for article chunking.
    articles_collection / posts_collection:
        Target collection per content kind.
    default_source:
        Source tag used when an article carries no URL.
    max_concurrency:
        Number of records processed at once in per-item mode.
    """

    def __init__(
        self,
        embedder: EmbeddingGateway,
        store: VectorStoreBase,
        *,
        id_factory: Callable[[], str] = _new_point_id,
        chunk_size: int = 500,
        chunk_overlap: int = 50,
        articles_collection: str = "articles",
        posts_collection: str = "linkedin-posts",
        default_source: str = "user-upload",
        max_concurrency: int = 1,
    ) -> None:
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be >= 0 and < chunk_size ({chunk_size})"
            )
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency ({max_concurrency}) must be >= 1")
        self._embedder = embedder
        self._store = store
        self._id_factory = id_factory
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.articles_collection = articles_collection
        self.posts_collection = posts_collection
        self.default_source = default_source
        self.max_concurrency = max_concurrency

    async def close(self) -> None:
        """Release the vector-store client."""
        await self._store.close()

    # -- batch mode -----------------------------------------------------------

    async def ingest_article(
        self,
        content: str,
        metadata: ArticleMetadata | None = None,
    ) -> ArticleIngestResult:
        """Chunk *content* and upload every segment in one batch.

        Raises
        ------
        EmptyResultError
            Chunking produced no segments (empty or whitespace-only text).
        GatewayError
            The embedding or upsert call failed.
        """
        metadata = metadata or ArticleMetadata()
        source = metadata.url or self.default_source
        segments = chunk_text(
            content,
            self.chunk_size,
            self.chunk_overlap,
            source,
            content_type=ContentType.ARTICLE,
        )
        if not segments:
            raise EmptyResultError("No chunks created from content")

        overrides = {field: getattr(metadata, field) for field in _OVERRIDE_FIELDS}
        try:
            points = await self.ingest_segments(
                segments, self.articles_collection, overrides=overrides
            )
        except GatewayError as exc:
            raise GatewayError("Failed to upload article", exc.details) from exc.__cause__

        return ArticleIngestResult(
            chunks_created=len(segments),
            vectors_uploaded=len(points),
            content_length=len(content),
        )

    async def ingest_segments(
        self,
        segments: Sequence[Segment],
        collection_name: str,
        *,
        overrides: dict[str, str | None] | None = None,
    ) -> list[Point]:
        """Embed *segments* in one call and upsert them in one call.

        Truthy values in *overrides* (title / author / date / language)
        are applied to every segment's payload.  Nothing is written when
        the embedding call fails.
        """
        if not segments:
            raise EmptyResultError("No segments to ingest")

        payloads = []
        for segment in segments:
            payload = segment.payload()
            for key, value in (overrides or {}).items():
                if value:
                    payload[key] = value
            payload["contentType"] = segment.metadata.content_type.value
            payloads.append(payload)

        contents = [segment.content for segment in segments]
        try:
            vectors = await self._embedder.embed(contents)
        except Exception as exc:
            logger.error("Embedding %d segments failed: %s", len(segments), exc)
            raise GatewayError("Embedding request failed", str(exc)) from exc

        if len(vectors) != len(segments):
            raise GatewayError(
                "Embedding request failed",
                f"expected {len(segments)} vectors, got {len(vectors)}",
            )

        try:
            points = [
                Point(id=self._id_factory(), vector=vector, payload=payload)
                for vector, payload in zip(vectors, payloads)
            ]
        except Exception as exc:
            logger.error("Building points from embedding response failed: %s", exc)
            raise GatewayError("Invalid embedding response", str(exc)) from exc

        try:
            await self._store.upsert(collection_name, points, wait=True)
        except Exception as exc:
            logger.error("Upserting %d points into %r failed: %s", len(points), collection_name, exc)
            raise GatewayError("Vector store upsert failed", str(exc)) from exc

        logger.info("Uploaded %d segments to collection=%r", len(points), collection_name)
        return points

    # -- single records -------------------------------------------------------

    async def ingest_post(
        self,
        content: str,
        metadata: PostMetadata | None = None,
    ) -> PostIngestResult:
        """Embed and upload one post as a single, un-chunked point."""
        if not content.strip():
            raise ValidationError("Invalid request", "content must be a non-empty string")

        metadata = metadata or PostMetadata()
        record = Record(
            text=content,
            url=metadata.url or "",
            date=metadata.date or "",
            likes=metadata.likes or 0,
        )
        try:
            await self._ingest_record(record, self.posts_collection)
        except GatewayError as exc:
            raise GatewayError("Failed to upload LinkedIn post", exc.details) from exc.__cause__

        return PostIngestResult(content_length=len(content))

    async def _ingest_record(self, record: Record, collection_name: str) -> Point:
        try:
            vectors = await self._embedder.embed(record.text)
        except Exception as exc:
            raise GatewayError("Embedding request failed", str(exc)) from exc
        if len(vectors) != 1:
            raise GatewayError(
                "Embedding request failed", f"expected 1 vector, got {len(vectors)}"
            )

        try:
            point = Point(id=self._id_factory(), vector=vectors[0], payload=record.payload())
        except Exception as exc:
            raise GatewayError("Invalid embedding response", str(exc)) from exc

        try:
            await self._store.upsert(collection_name, [point], wait=True)
        except Exception as exc:
            raise GatewayError("Vector store upsert failed", str(exc)) from exc
        return point

    # -- per-item mode --------------------------------------------------------

    async def ensure_collection(self, collection_name: str | None = None) -> None:
        """Create *collection_name* unless it already exists.

        A failing existence check is treated as "does not exist".

        Raises
        ------
        BootstrapError
            The collection could not be created.
        """
        collection_name = collection_name or self.posts_collection
        logger.info("Checking if collection %r exists", collection_name)
        try:
            await self._store.get_collection(collection_name)
        except Exception as exc:
            logger.info("Collection %r not available (%s); creating it", collection_name, exc)
        else:
            logger.info("Collection %r already exists", collection_name)
            return

        try:
            await self._store.create_collection(
                collection_name,
                vector_size=self._embedder.dimension,
                distance="cosine",
            )
        except Exception as exc:
            raise BootstrapError(f"Could not create collection {collection_name!r}", str(exc)) from exc
        logger.info("Collection %r created", collection_name)

    async def ingest_records(
        self,
        records: Sequence[Record],
        collection_name: str | None = None,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> IngestionTally:
        """Upload each record independently and return the tally.

        A failure on one record never stops the others.  *on_progress* is
        called with ``(succeeded, total)`` after each successful upload.
        """
        collection_name = collection_name or self.posts_collection
        tally = IngestionTally(total=len(records))
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _process(record: Record) -> None:
            async with semaphore:
                try:
                    await self._ingest_record(record, collection_name)
                except GatewayError as exc:
                    logger.error("Failed to upload post: %s (%s)", record.url, exc)
                    tally.failed += 1
                    tally.failed_urls.append(record.url)
                    return
            tally.succeeded += 1
            logger.info("Uploaded post %d/%d", tally.succeeded, tally.total)
            if on_progress is not None:
                on_progress(tally.succeeded, tally.total)

        if self.max_concurrency == 1:
            for record in records:
                await _process(record)
        else:
            await asyncio.gather(*(_process(record) for record in records))

        logger.info(
            "Summary: %d uploaded, %d failed, %d total",
            tally.succeeded,
            tally.failed,
            tally.total,
        )
        return tally

    async def run_bulk_upload(
        self,
        raw_csv_text: str,
        collection_name: str | None = None,
        *,
        on_progress: ProgressCallback | None = None,
    ) -> tuple[IngestionTally, int]:
        """Extract records from CSV, ensure the collection and upload them.

        Returns the tally and the number of CSV rows skipped during
        extraction.  The CSV is parsed before any store call, so a
        :class:`ValidationError` for a malformed header leaves the store
        untouched.  :class:`BootstrapError` propagates before any record
        is processed.
        """
        collection_name = collection_name or self.posts_collection
        extraction = extract_records(raw_csv_text)
        logger.info("Found %d posts", len(extraction.records))

        await self.ensure_collection(collection_name)

        tally = await self.ingest_records(
            extraction.records, collection_name, on_progress=on_progress
        )
        return tally, extraction.skipped


# ---------------------------------------------------------------------------
# Convenience factory — wires gateways from settings
# ---------------------------------------------------------------------------


def build_orchestrator(settings: Settings) -> IngestionOrchestrator:
    """Build an orchestrator with the gateways named in *settings*.

    The caller owns the returned object's lifecycle and should
    ``await orchestrator.close()`` when done.
    """
    from content_ingest.ingestion.embedder import get_embedding_gateway
    from content_ingest.storage import get_vector_store

    return IngestionOrchestrator(
        get_embedding_gateway(settings),
        get_vector_store(settings),
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
        articles_collection=settings.articles_collection,
        posts_collection=settings.linkedin_collection,
        default_source=settings.default_source,
        max_concurrency=settings.bulk_concurrency,
    )
