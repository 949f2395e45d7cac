"""Chunk, embed and upsert text content into a vector search index."""

__version__ = "0.1.0"
