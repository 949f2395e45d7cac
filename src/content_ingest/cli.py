"""Command-line entry points for batch uploads.

Usage::

    content-ingest upload-linkedin --csv data/linkedin_posts.csv
    content-ingest upload-article notes/post.md --title "Release notes"
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer

from content_ingest.config import settings
from content_ingest.ingestion.errors import IngestionError
from content_ingest.ingestion.models import ArticleMetadata, IngestionTally
from content_ingest.ingestion.orchestrator import IngestionOrchestrator, build_orchestrator

app = typer.Typer(help="Chunk, embed and upload content into the vector store.")


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        typer.echo(f"Could not read {path}: {exc}", err=True)
        raise typer.Exit(1)


async def _upload_linkedin(
    orchestrator: IngestionOrchestrator,
    raw_csv: str,
    collection: str | None,
) -> tuple[IngestionTally, int]:
    try:
        return await orchestrator.run_bulk_upload(
            raw_csv,
            collection,
            on_progress=lambda done, total: typer.echo(f"Uploaded post {done}/{total}"),
        )
    finally:
        await orchestrator.close()


@app.command("upload-linkedin")
def upload_linkedin(
    csv_path: Optional[Path] = typer.Option(None, "--csv", help="CSV export of posts"),
    collection: Optional[str] = typer.Option(None, "--collection", help="Target collection"),
    concurrency: Optional[int] = typer.Option(
        None, "--concurrency", min=1, help="Posts uploaded at once"
    ),
) -> None:
    """Upload every post in a CSV export, one point per post, no chunking.

    Exits 1 when the collection cannot be created, and also when the file
    is unreadable or its header has no text column; both are checked
    before the collection is touched.
    """
    logging.basicConfig(level=settings.log_level)
    path = csv_path or Path(settings.linkedin_csv_path)
    typer.echo("Processing LinkedIn posts...")
    raw_csv = _read_text(path)

    orchestrator = build_orchestrator(settings)
    if concurrency is not None:
        orchestrator.max_concurrency = concurrency

    try:
        tally, skipped = asyncio.run(_upload_linkedin(orchestrator, raw_csv, collection))
    except IngestionError as exc:
        typer.echo(f"Error processing LinkedIn posts: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo("")
    typer.echo("Summary:")
    typer.echo(f"   Successfully uploaded: {tally.succeeded}")
    typer.echo(f"   Failed: {tally.failed}")
    typer.echo(f"   Total: {tally.total}")
    if skipped:
        typer.echo(f"   Skipped rows: {skipped}")
    typer.echo("Upload complete!")


async def _upload_article(
    orchestrator: IngestionOrchestrator,
    content: str,
    metadata: ArticleMetadata,
):
    try:
        return await orchestrator.ingest_article(content, metadata)
    finally:
        await orchestrator.close()


@app.command("upload-article")
def upload_article(
    path: Path = typer.Argument(..., help="Text or Markdown file to ingest"),
    title: Optional[str] = typer.Option(None, help="Article title"),
    author: Optional[str] = typer.Option(None, help="Article author"),
    date: Optional[str] = typer.Option(None, help="Publication date"),
    url: Optional[str] = typer.Option(None, help="Canonical URL, used as the chunk source"),
    language: Optional[str] = typer.Option(None, help="Language code"),
) -> None:
    """Chunk one article file and upload all chunks in a single batch."""
    logging.basicConfig(level=settings.log_level)
    content = _read_text(path)
    metadata = ArticleMetadata(title=title, author=author, date=date, url=url, language=language)

    orchestrator = build_orchestrator(settings)
    try:
        result = asyncio.run(_upload_article(orchestrator, content, metadata))
    except IngestionError as exc:
        typer.echo(f"Error uploading article: {exc}", err=True)
        raise typer.Exit(1)

    typer.echo(
        f"Uploaded {result.vectors_uploaded} vectors "
        f"({result.chunks_created} chunks, {result.content_length} characters)"
    )


def main() -> None:
    app()


if __name__ == "__main__":
    main()
