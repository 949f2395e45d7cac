"""FastAPI application exposing the upload endpoints."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from content_ingest.config import settings
from content_ingest.ingestion.errors import IngestionError, ValidationError
from content_ingest.ingestion.models import (
    ArticleIngestResult,
    ArticleMetadata,
    PostIngestResult,
    PostMetadata,
)
from content_ingest.ingestion.orchestrator import IngestionOrchestrator, build_orchestrator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the gateway clients for the lifetime of the process."""
    logging.basicConfig(level=settings.log_level)
    app.state.orchestrator = build_orchestrator(settings)
    logger.info(
        "Ingestion API ready (embedding=%s/%s, vector_db=%s)",
        settings.embedding_provider,
        settings.embedding_model,
        settings.vector_db_type,
    )
    try:
        yield
    finally:
        await app.state.orchestrator.close()


app = FastAPI(
    title="Content Ingest API",
    version="0.1.0",
    description="Chunk, embed and upsert articles and posts into a vector store.",
    lifespan=lifespan,
)


def get_orchestrator(request: Request) -> IngestionOrchestrator:
    return request.app.state.orchestrator


# ── Request schemas ───────────────────────────────────────────────────
class UploadArticleRequest(BaseModel):
    """Article text plus optional attribution."""

    content: str
    metadata: ArticleMetadata | None = None


class UploadPostRequest(BaseModel):
    """A single post, stored without chunking."""

    content: str
    metadata: PostMetadata | None = None


# ── Error handlers ────────────────────────────────────────────────────
@app.exception_handler(IngestionError)
async def ingestion_error_handler(request: Request, exc: IngestionError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Error handling %s: %s", request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = ValidationError(
        "Invalid request",
        [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()],
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# ── Routes ────────────────────────────────────────────────────────────
@app.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}


@app.post("/upload-article", response_model=ArticleIngestResult)
async def upload_article(
    request: UploadArticleRequest,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
) -> ArticleIngestResult:
    """Chunk an article and upload every chunk in one batch."""
    return await orchestrator.ingest_article(request.content, request.metadata)


@app.post("/upload-linkedin-post", response_model=PostIngestResult)
async def upload_linkedin_post(
    request: UploadPostRequest,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
) -> PostIngestResult:
    """Embed a single post and upload it without chunking."""
    return await orchestrator.ingest_post(request.content, request.metadata)
