"""Browse request and window models."""

from dataclasses import dataclass
from enum import StrEnum

from shelf_browse.models.catalog import CatalogDocument, DocumentRef


class Offset(StrEnum):
    """Symbolic position of the origin within window 0."""

    FIRST = "first"
    MIDDLE = "middle"
    LAST = "last"


OffsetValue = Offset | int


class Direction(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class BrowseOrigin:
    """Anchor of a browse session: a document id or a starting call number."""

    document_id: str | None = None
    call_number: str | None = None


@dataclass(frozen=True)
class BrowseWindow:
    """One page of shelf neighbors, in ascending shelf order.

    ``start_position`` is the slot of the first document relative to the
    origin (the origin itself is slot 0).
    """

    origin: BrowseOrigin
    origin_shelfkey: str
    page: int
    width: int
    offset: OffsetValue
    start_position: int
    documents: tuple[DocumentRef, ...]
    origin_document: CatalogDocument | None = None

    @property
    def end_position(self) -> int:
        """Slot just past the last requested position."""
        return self.start_position + self.width

    @property
    def origin_index(self) -> int | None:
        """Index of the origin document in ``documents``, if present."""
        if self.origin_document is None:
            return None
        for i, doc in enumerate(self.documents):
            if isinstance(doc, CatalogDocument) and doc.id == self.origin_document.id:
                return i
        return None

    @property
    def catalog_documents(self) -> tuple[CatalogDocument, ...]:
        return tuple(d for d in self.documents if isinstance(d, CatalogDocument))
