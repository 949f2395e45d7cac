"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # Embedding
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openai_base_url: str = Field(
        default="",
        description="Optional OpenAI-compatible endpoint. Leave empty to use OpenAI cloud.",
    )
    embedding_provider: str = Field(default="openai", description="'openai' or 'huggingface'")
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = Field(
        default=512,
        description="Vector size requested from the OpenAI model",
    )
    huggingface_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    huggingface_dimensions: int = Field(
        default=384,
        description="Native vector size of the HuggingFace model",
    )

    # Vector store
    vector_db_type: str = Field(default="qdrant", description="'qdrant' or 'chroma'")
    qdrant_url: str = "http://localhost:6333"
    qdrant_api_key: str = ""
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    articles_collection: str = "articles"
    linkedin_collection: str = "linkedin-posts"

    # Chunking
    chunk_size: int = 500
    chunk_overlap: int = 50
    default_source: str = "user-upload"

    # Bulk upload
    linkedin_csv_path: str = "data/linkedin_posts.csv"
    bulk_concurrency: int = 1

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton — import `settings` wherever needed.
settings = Settings()
