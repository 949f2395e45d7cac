"""
Ingestion — chunking, record extraction, embedding and upload.

This package turns raw text (long-form articles, CSV exports of short
posts) into uniquely identified vector-store points with consistent
metadata, and accounts for per-item failures along the way.
"""
