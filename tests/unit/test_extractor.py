"""Unit tests for CSV record extraction."""

from __future__ import annotations

import pytest

from content_ingest.ingestion.errors import ValidationError
from content_ingest.ingestion.extractor import extract_records
from content_ingest.ingestion.models import Record

SAMPLE_CSV = (
    "text,url,date,likes\n"
    '"Shipping beats perfect.",https://linkedin.com/p/1,2024-01-02,42\n'
    '"Multi-line post,\nwith a comma.",https://linkedin.com/p/2,2024-01-03,"1,204"\n'
    '"No likes here",https://linkedin.com/p/3,2024-01-04,\n'
)


def test_extracts_rows_in_order() -> None:
    result = extract_records(SAMPLE_CSV)
    assert result.skipped == 0
    assert [r.url for r in result.records] == [
        "https://linkedin.com/p/1",
        "https://linkedin.com/p/2",
        "https://linkedin.com/p/3",
    ]
    assert result.records[1].text == "Multi-line post,\nwith a comma."
    assert result.records[1].likes == 1204


def test_missing_fields_get_defaults() -> None:
    result = extract_records("content\nJust the text\n")
    assert result.records == [Record(text="Just the text", url="", date="", likes=0)]


def test_blank_likes_default_to_zero() -> None:
    result = extract_records(SAMPLE_CSV)
    assert result.records[2].likes == 0


def test_header_aliases_are_case_insensitive() -> None:
    raw = "\ufeffPostText,PostUrl,PostedAt,NumLikes\nHello,https://x/1,2024-05-01,7\n"
    result = extract_records(raw)
    assert result.records == [
        Record(text="Hello", url="https://x/1", date="2024-05-01", likes=7)
    ]


def test_malformed_rows_are_skipped_and_counted() -> None:
    raw = (
        "text,url,likes\n"
        "Good post,https://x/1,3\n"
        ",https://x/2,5\n"  # blank text
        "Bad likes,https://x/3,lots\n"
        "Negative likes,https://x/4,-2\n"
        "Another good one,https://x/5,\n"
    )
    result = extract_records(raw)
    assert [r.url for r in result.records] == ["https://x/1", "https://x/5"]
    assert result.skipped == 3


def test_empty_lines_are_ignored() -> None:
    result = extract_records("text\nFirst\n\n\nSecond\n")
    assert [r.text for r in result.records] == ["First", "Second"]
    assert result.skipped == 0


def test_duplicates_are_kept() -> None:
    result = extract_records("text\nSame\nSame\n")
    assert len(result.records) == 2


def test_empty_input_returns_no_records() -> None:
    result = extract_records("")
    assert result.records == []
    assert result.skipped == 0


def test_header_without_text_column_raises() -> None:
    with pytest.raises(ValidationError, match="no text column"):
        extract_records("url,likes\nhttps://x/1,3\n")


def test_records_are_immutable() -> None:
    record = extract_records("text\nHello\n").records[0]
    with pytest.raises(Exception):
        record.text = "changed"  # type: ignore[misc]
