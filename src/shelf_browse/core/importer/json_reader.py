"""Parse catalog export records into domain models."""

from typing import Any

from shelf_browse.core.callnum.shelfkey import make_call_number
from shelf_browse.models.catalog import Availability, CatalogDocument, HoldingsSnapshot


def parse_catalog_record(data: dict[str, Any]) -> tuple[CatalogDocument, HoldingsSnapshot]:
    """Parse one catalog export record into a document and its holdings.

    Args:
        data: Raw record with ``id``, ``title``, ``call_number`` and an
            optional ``holdings`` object.

    Returns:
        Tuple of (CatalogDocument, HoldingsSnapshot).
    """
    doc_id = data.get("id")
    if not isinstance(doc_id, str) or not doc_id:
        msg = f"Catalog record without an id: {data!r:.80}"
        raise ValueError(msg)

    doc = CatalogDocument(
        id=doc_id,
        title=data.get("title") or "",
        call_number=make_call_number(data.get("call_number") or ""),
    )
    return doc, parse_holdings(doc_id, data.get("holdings") or {})


def parse_holdings(doc_id: str, data: dict[str, Any]) -> HoldingsSnapshot:
    """Parse a holdings object (as stored or as served by the availability service)."""
    if not data:
        return HoldingsSnapshot.empty(doc_id)

    raw_availability = data.get("availability")
    availability = None
    if raw_availability is not None:
        by_library = raw_availability.get("by_library") or {}
        availability = Availability(
            existing=int(raw_availability.get("existing", 0)),
            available=int(raw_availability.get("available", 0)),
            circulating=int(raw_availability.get("circulating", 0)),
            reserve=int(raw_availability.get("reserve", 0)),
            special_collections=int(raw_availability.get("special_collections", 0)),
            by_library=tuple((str(lib), int(count)) for lib, count in by_library.items()),
        )

    return HoldingsSnapshot(
        doc_id=doc_id,
        availability=availability,
        unique_site=data.get("unique_site") or None,
        shadowed=bool(data.get("shadowed", False)),
        discoverable=bool(data.get("discoverable", True)),
        online_only=bool(data.get("online_only", False)),
        has_url=bool(data.get("has_url", False)),
        pda=bool(data.get("pda", False)),
        non_bibliographic=bool(data.get("non_bibliographic", False)),
        languages=_string_list(data.get("languages")),
        formats=_string_list(data.get("formats")),
    )


def _string_list(value: Any) -> tuple[str, ...]:
    # A bare string is one value, not a sequence of characters.
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        msg = f"Expected a list of strings, got {type(value).__name__}"
        raise ValueError(msg)
    return tuple(str(item) for item in value)
