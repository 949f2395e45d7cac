"""Abstract base class for vector-store backends.

Adding a new backend (Pinecone, Weaviate …) only requires subclassing
:class:`VectorStoreBase` and implementing the abstract methods.  The
ingestion orchestrator is backend-agnostic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from content_ingest.ingestion.models import Point


class VectorStoreBase(ABC):
    """Backend-agnostic vector-store interface.

    All methods are coroutines; each call is an external-call boundary.
    """

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    async def upsert(
        self,
        collection_name: str,
        points: Sequence[Point],
        *,
        wait: bool = True,
    ) -> None:
        """Insert-or-update *points* in *collection_name*.

        With ``wait=True`` the call returns only once the write is
        persisted, not merely accepted.
        """
        ...

    @abstractmethod
    async def get_collection(self, collection_name: str) -> dict[str, Any]:
        """Return backend info for *collection_name*; raise if it does not exist."""
        ...

    @abstractmethod
    async def create_collection(
        self,
        collection_name: str,
        *,
        vector_size: int,
        distance: str = "cosine",
    ) -> None:
        """Create *collection_name* with a fixed vector size and distance metric."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...

    # -- optional overrides ---------------------------------------------------

    async def close(self) -> None:
        """Release client resources.  No-op by default."""
        return None
