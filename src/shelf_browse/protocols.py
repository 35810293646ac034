"""Protocols for dependency injection in the browse engines."""

from typing import Protocol, runtime_checkable

from shelf_browse.models.browse import Direction
from shelf_browse.models.catalog import CatalogDocument, HoldingsSnapshot


@runtime_checkable
class DocumentStoreProtocol(Protocol):
    """Protocol for document stores ordered by shelfkey."""

    def get_document(self, doc_id: str) -> CatalogDocument | None:
        """Return a document by id, or None if unknown."""
        ...

    def query_neighbors(
        self,
        key: str,
        direction: Direction,
        limit: int,
        *,
        skip: int = 0,
        anchor_id: str | None = None,
    ) -> list[CatalogDocument]:
        """Return up to ``limit`` documents next to a shelf position.

        For ``Direction.ASC`` ``key`` is a shelfkey and documents at or after
        ``(key, anchor_id)`` are returned in shelf order. For ``Direction.DESC``
        ``key`` is a reverse shelfkey and documents strictly before the
        position are returned nearest first. ``skip`` results are passed over
        before collecting.
        """
        ...


@runtime_checkable
class HoldingsServiceProtocol(Protocol):
    """Protocol for availability services."""

    def get_holdings(self, doc_id: str) -> HoldingsSnapshot:
        """Return the holdings snapshot for a document."""
        ...
