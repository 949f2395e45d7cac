"""Domain models for segments, records, points and ingestion results.

Payloads written to the vector store use camelCase keys
(``chunkIndex``, ``contentType`` …) so that every collection shares one
payload vocabulary regardless of the Python attribute names.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ContentType(str, Enum):
    """Kind of source a point was ingested from."""

    ARTICLE = "article"
    LINKEDIN = "linkedin"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Units of ingestion ────────────────────────────────────────────────


class SegmentMetadata(_CamelModel):
    """Positional and source attribution of a :class:`Segment`.

    Attributes
    ----------
    source:
        Caller-supplied origin tag (URL or ``"user-upload"``).
    chunk_index:
        Ordinal of the segment within its input, contiguous from 0.
    start_offset / end_offset:
        Half-open ``[start, end)`` span into the original text.
    content_type:
        Ingestion source kind.
    """

    source: str
    chunk_index: int = Field(ge=0)
    start_offset: int = Field(ge=0)
    end_offset: int
    content_type: ContentType = ContentType.ARTICLE
    title: str | None = None
    author: str | None = None
    date: str | None = None
    language: str | None = None

    @model_validator(mode="after")
    def _check_span(self) -> SegmentMetadata:
        if self.end_offset <= self.start_offset:
            raise ValueError(
                f"end_offset ({self.end_offset}) must be > start_offset ({self.start_offset})"
            )
        return self


class Segment(BaseModel):
    """A bounded substring of source text, sized for embedding."""

    content: str = Field(min_length=1)
    metadata: SegmentMetadata

    def payload(self) -> dict[str, Any]:
        """Return the store payload: camelCase metadata plus ``content``."""
        data = self.metadata.model_dump(mode="json", by_alias=True, exclude_none=True)
        data["content"] = self.content
        return data


class Record(BaseModel):
    """One un-chunked unit (e.g. a social post), embedded as a whole."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(min_length=1)
    url: str = ""
    date: str = ""
    likes: int = Field(default=0, ge=0)

    def payload(self) -> dict[str, Any]:
        return {
            "content": self.text,
            "url": self.url,
            "date": self.date,
            "likes": self.likes,
            "contentType": ContentType.LINKEDIN.value,
        }


class Point(BaseModel):
    """The persisted unit: id, vector and payload."""

    id: str
    vector: list[float]
    payload: dict[str, Any] = Field(default_factory=dict)


class ExtractionResult(BaseModel):
    """Records parsed from a tabular export plus the count of rows skipped."""

    records: list[Record] = Field(default_factory=list)
    skipped: int = 0


# ── Request metadata ──────────────────────────────────────────────────


class ArticleMetadata(_CamelModel):
    """Optional metadata supplied alongside an article upload."""

    title: str | None = None
    author: str | None = None
    date: str | None = None
    url: str | None = None
    language: str | None = None


class PostMetadata(_CamelModel):
    """Optional metadata supplied alongside a single post upload."""

    url: str | None = None
    date: str | None = None
    likes: int | None = Field(default=None, ge=0)


# ── Results ───────────────────────────────────────────────────────────


class ArticleIngestResult(_CamelModel):
    success: bool = True
    chunks_created: int
    vectors_uploaded: int
    content_length: int


class PostIngestResult(_CamelModel):
    success: bool = True
    vectors_uploaded: int = 1
    content_length: int


class IngestionTally(BaseModel):
    """Outcome of a per-item run."""

    succeeded: int = 0
    failed: int = 0
    total: int = 0
    failed_urls: list[str] = Field(default_factory=list)
