"""Sliding-window text chunking with source attribution."""

from __future__ import annotations

from content_ingest.ingestion.models import ContentType, Segment, SegmentMetadata


def chunk_text(
    text: str,
    max_chunk_size: int,
    overlap_size: int,
    source: str,
    content_type: ContentType = ContentType.ARTICLE,
) -> list[Segment]:
    """Split *text* into overlapping, fixed-width segments.

    Parameters
    ----------
    text:
        Raw input.  Offsets in the returned metadata index into this
        string unchanged.
    max_chunk_size:
        Maximum number of characters per segment.
    overlap_size:
        Number of characters shared by consecutive segments.
    source:
        Attribution tag copied into every segment.
    content_type:
        Ingestion source kind recorded on every segment.

    Returns
    -------
    list[Segment]
        Segments in increasing ``start_offset`` order.  Empty when *text*
        is empty or whitespace-only.
    """
    if max_chunk_size <= 0:
        raise ValueError(f"max_chunk_size ({max_chunk_size}) must be > 0")
    if not 0 <= overlap_size < max_chunk_size:
        raise ValueError(
            f"overlap_size ({overlap_size}) must be >= 0 and < max_chunk_size ({max_chunk_size})"
        )

    if not text.strip():
        return []

    stride = max_chunk_size - overlap_size
    length = len(text)
    segments: list[Segment] = []

    start = 0
    while start < length:
        end = min(start + max_chunk_size, length)
        segments.append(
            Segment(
                content=text[start:end],
                metadata=SegmentMetadata(
                    source=source,
                    chunk_index=len(segments),
                    start_offset=start,
                    end_offset=end,
                    content_type=content_type,
                ),
            )
        )
        # The window that reaches the end is the last; another step would
        # only repeat its tail.
        if end == length:
            break
        start += stride

    return segments
