"""Error kinds raised by the ingestion pipeline.

Every failure the pipeline reports belongs to one of four kinds:

* :class:`ValidationError` – the input itself is unusable (blank content,
  a CSV without a text column).  Raised before any external call.
* :class:`EmptyResultError` – chunking / extraction produced nothing to
  embed.  Raised before any external call.
* :class:`GatewayError` – the embedding provider or the vector store
  failed.  The underlying exception is kept as ``__cause__``.
* :class:`BootstrapError` – the target collection could not be created.

Callers at the edge (HTTP handlers, the CLI) convert them into a uniform
response through :meth:`IngestionError.to_dict`.
"""

from __future__ import annotations

from typing import Any


class IngestionError(Exception):
    """Base class for all pipeline errors.

    Attributes
    ----------
    message:
        Short, user-facing summary.
    details:
        Underlying message or structured context (optional).
    """

    category: str = "ingestion_error"
    status_code: int = 500

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "category": self.category, "details": self.details}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ValidationError(IngestionError):
    """Malformed or missing required input."""

    category = "validation_error"
    status_code = 400


class EmptyResultError(IngestionError):
    """Chunking or extraction yielded nothing to ingest."""

    category = "empty_result"
    status_code = 400


class GatewayError(IngestionError):
    """The embedding provider or vector store call failed."""

    category = "gateway_error"
    status_code = 500


class BootstrapError(IngestionError):
    """The target collection could not be ensured."""

    category = "bootstrap_error"
    status_code = 500
