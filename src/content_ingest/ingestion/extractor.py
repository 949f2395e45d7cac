"""Extract un-chunked post records from a CSV export."""

from __future__ import annotations

import csv
import io
import logging

from pydantic import ValidationError as PydanticValidationError

from content_ingest.ingestion.errors import ValidationError
from content_ingest.ingestion.models import ExtractionResult, Record

logger = logging.getLogger(__name__)

# Accepted header names per field, compared case-insensitively.
_COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "text": ("text", "content", "post", "post_text", "posttext", "commentary"),
    "url": ("url", "link", "post_url", "posturl"),
    "date": ("date", "posted_at", "postedat", "posted_date", "created_at"),
    "likes": ("likes", "num_likes", "numlikes", "like_count", "reactions"),
}


def _resolve_columns(header: list[str]) -> dict[str, int]:
    """Map each known field to its column index in *header*."""
    normalised = [h.lstrip("\ufeff").strip().lower() for h in header]
    columns: dict[str, int] = {}
    for field, aliases in _COLUMN_ALIASES.items():
        for idx, name in enumerate(normalised):
            if name in aliases:
                columns[field] = idx
                break
    return columns


def _parse_likes(raw: str) -> int:
    """Parse a likes cell; blank means 0.  Raises ``ValueError`` otherwise."""
    cleaned = raw.strip().replace(",", "").replace("_", "")
    if not cleaned:
        return 0
    value = int(cleaned)
    if value < 0:
        raise ValueError(f"negative likes count: {value}")
    return value


def _cell(row: list[str], columns: dict[str, int], field: str) -> str:
    idx = columns.get(field)
    if idx is None or idx >= len(row):
        return ""
    return row[idx]


def extract_records(raw_text: str) -> ExtractionResult:
    """Parse *raw_text* (CSV with a header row) into :class:`Record` objects.

    Rows that cannot be parsed, have a blank text cell, or carry an
    invalid likes count are skipped and counted rather than aborting the
    whole extraction.

    Raises
    ------
    ValidationError
        When the header has no recognisable text column.
    """
    reader = csv.reader(io.StringIO(raw_text))

    try:
        header = next(reader)
    except StopIteration:
        return ExtractionResult()
    except csv.Error as exc:
        raise ValidationError("Unreadable CSV header", str(exc)) from exc

    columns = _resolve_columns(header)
    if "text" not in columns:
        raise ValidationError("CSV has no text column", {"header": header})

    records: list[Record] = []
    skipped = 0
    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            skipped += 1
            logger.warning("Skipping unparsable row near line %d: %s", reader.line_num, exc)
            continue

        if not any(cell.strip() for cell in row):
            continue

        try:
            record = Record(
                text=_cell(row, columns, "text").strip(),
                url=_cell(row, columns, "url").strip(),
                date=_cell(row, columns, "date").strip(),
                likes=_parse_likes(_cell(row, columns, "likes")),
            )
        except (ValueError, PydanticValidationError) as exc:
            skipped += 1
            logger.warning("Skipping malformed row at line %d: %s", reader.line_num, exc)
            continue
        records.append(record)

    logger.info("Extracted %d records (%d skipped)", len(records), skipped)
    return ExtractionResult(records=records, skipped=skipped)
