"""Catalog domain models: call numbers, documents and holdings."""

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class ShelfKey:
    """Sortable encodings of a call number.

    ``shelfkey`` sorts in shelving order, ``reverse_shelfkey`` in the
    opposite order. Both are empty when ``ok`` is false.
    """

    shelfkey: str
    reverse_shelfkey: str
    ok: bool


@dataclass(frozen=True)
class CallNumber:
    """A raw call number with its derived forms."""

    raw: str
    normalized: str
    shelfkey: str
    reverse_shelfkey: str
    ok: bool
    lc_format: bool

    @property
    def browsable(self) -> bool:
        return self.lc_format and bool(self.shelfkey)


@dataclass(frozen=True)
class CatalogDocument:
    """A catalog record that occupies a position on the shelf."""

    id: str
    call_number: CallNumber
    title: str = ""


class PlaceholderReason(StrEnum):
    EMPTY = "empty"
    ERROR = "error"


@dataclass(frozen=True)
class Placeholder:
    """A window slot without a usable catalog document."""

    reason: PlaceholderReason
    detail: str = ""


DocumentRef = CatalogDocument | Placeholder


@dataclass(frozen=True)
class Availability:
    """Copy counts reported by the availability service."""

    existing: int = 0
    available: int = 0
    circulating: int = 0
    reserve: int = 0
    special_collections: int = 0
    by_library: tuple[tuple[str, int], ...] = ()


@dataclass(frozen=True)
class HoldingsSnapshot:
    """Availability facts for one document, as consumed by the marker engine."""

    doc_id: str
    availability: Availability | None = None
    unique_site: str | None = None
    shadowed: bool = False
    discoverable: bool = True
    online_only: bool = False
    has_url: bool = False
    pda: bool = False
    non_bibliographic: bool = False
    languages: tuple[str, ...] = ()
    formats: tuple[str, ...] = ()

    @classmethod
    def empty(cls, doc_id: str) -> "HoldingsSnapshot":
        """Snapshot for items with no physical holdings."""
        return cls(doc_id=doc_id)
