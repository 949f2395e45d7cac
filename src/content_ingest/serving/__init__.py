"""
Serving — FastAPI application exposing the upload endpoints.

Run with ``uvicorn content_ingest.serving.app:app``.
"""
