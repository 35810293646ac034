"""Page through shelf neighbors around an origin document or call number.

Positions are counted in shelf slots relative to the origin, which is slot 0.
Window 0 is placed around the origin according to the offset; page ``p``
is window 0 moved by ``p * width`` slots, so pages tile the shelf exactly
and jumping to page 3 lands where stepping there one page at a time does.
"""

from loguru import logger

from shelf_browse import config
from shelf_browse.core.callnum.shelfkey import encode
from shelf_browse.exceptions import BrowseInputError, OriginNotFoundError
from shelf_browse.models.browse import BrowseOrigin, BrowseWindow, Direction, Offset, OffsetValue
from shelf_browse.models.catalog import (
    CatalogDocument,
    DocumentRef,
    Placeholder,
    PlaceholderReason,
)
from shelf_browse.protocols import DocumentStoreProtocol


def parse_offset(text: str) -> OffsetValue:
    """Parse "first", "middle", "last" or a slot index."""
    try:
        return Offset(text.strip().lower())
    except ValueError:
        pass
    try:
        return int(text)
    except ValueError:
        msg = f"Offset must be first, middle, last or an index, not {text!r}"
        raise BrowseInputError(msg) from None


def window_start(offset: OffsetValue, width: int) -> int:
    """Slot of the first item of window 0."""
    if offset is Offset.FIRST:
        return 0
    if offset is Offset.MIDDLE:
        return -((width - 1) // 2)
    if offset is Offset.LAST:
        return -(width - 1)
    if not 0 <= offset < width:
        msg = f"Offset index {offset} is outside a window of width {width}"
        raise BrowseInputError(msg)
    return -offset


class BrowseEngine:
    """Builds browse windows from a document store."""

    def __init__(self, store: DocumentStoreProtocol) -> None:
        self.store = store

    def browse(
        self,
        origin: BrowseOrigin,
        *,
        page: int = 0,
        width: int = config.DEFAULT_WIDTH,
        offset: OffsetValue | None = None,
    ) -> BrowseWindow:
        """Return one page of shelf neighbors.

        Args:
            origin: Either a document id or a starting call number.
            page: Signed page number; 0 is the window containing the origin.
            width: Number of slots per page.
            offset: Position of the origin in window 0. Defaults to the
                middle for a document and to the first slot for a call number.

        Returns:
            BrowseWindow in ascending shelf order. It may hold fewer than
            ``width`` documents (or none) near the ends of the shelf.

        Raises:
            BrowseInputError: For a malformed origin, width or offset.
            OriginNotFoundError: If the origin document does not exist.
            StoreError: If the document store fails.
        """
        if not 1 <= width <= config.MAX_WIDTH:
            msg = f"Width must be between 1 and {config.MAX_WIDTH}, not {width}"
            raise BrowseInputError(msg)

        origin_doc, key, reverse_key, default_offset = self._resolve_origin(origin)
        if offset is None:
            offset = default_offset
        start = window_start(offset, width) + page * width
        end = start + width
        anchor_id = origin_doc.id if origin_doc is not None else None

        before: list[CatalogDocument] = []
        after: list[CatalogDocument] = []
        if start < 0:
            # Nearest first: slot -1 comes back first.
            skip = max(-end, 0)
            before = self._query(
                reverse_key, Direction.DESC, min(end, 0) - start, skip=skip, anchor_id=anchor_id
            )
            before.reverse()
        if end > 0:
            skip = max(start, 0)
            after = self._query(key, Direction.ASC, end - skip, skip=skip, anchor_id=anchor_id)

        documents = _mark_duplicates(before + after)
        logger.debug(
            "Browse {} page {} width {}: slots {}..{}, {} documents",
            origin, page, width, start, end - 1, len(documents),
        )
        return BrowseWindow(
            origin=origin,
            origin_shelfkey=key,
            page=page,
            width=width,
            offset=offset,
            start_position=start,
            documents=documents,
            origin_document=origin_doc,
        )

    def _resolve_origin(
        self, origin: BrowseOrigin
    ) -> tuple[CatalogDocument | None, str, str, Offset]:
        if bool(origin.document_id) == bool(origin.call_number):
            msg = "Give exactly one of a document id or a starting call number"
            raise BrowseInputError(msg)

        if origin.document_id:
            doc = self.store.get_document(origin.document_id)
            if doc is None:
                msg = f"Document {origin.document_id!r} not found"
                raise OriginNotFoundError(msg)
            if not doc.call_number.browsable:
                msg = (
                    f"Document {doc.id!r} has no shelf position "
                    f"(call number {doc.call_number.raw!r})"
                )
                raise BrowseInputError(msg)
            return doc, doc.call_number.shelfkey, doc.call_number.reverse_shelfkey, Offset.MIDDLE

        keys = encode(origin.call_number or "")
        if not keys.ok:
            msg = f"Cannot browse from malformed call number {origin.call_number!r}"
            raise BrowseInputError(msg)
        return None, keys.shelfkey, keys.reverse_shelfkey, Offset.FIRST

    def _query(
        self,
        key: str,
        direction: Direction,
        limit: int,
        *,
        skip: int,
        anchor_id: str | None,
    ) -> list[CatalogDocument]:
        docs = self.store.query_neighbors(key, direction, limit, skip=skip, anchor_id=anchor_id)
        if len(docs) > limit:
            logger.error(
                "Document store returned {} documents for limit {}; dropping the rest",
                len(docs), limit,
            )
            docs = docs[:limit]
        return list(docs)


def focus_index(window: BrowseWindow, position: OffsetValue | None = None) -> int | None:
    """Index of the tile to highlight in a window.

    The origin document wins when it is on the page. Otherwise ``position``
    (default: the window's offset) picks a slot, moving to the nearest
    catalog document when that slot is a placeholder.
    """
    if position is None:
        if window.origin_index is not None:
            return window.origin_index
        position = window.offset

    documents = window.documents
    catalog = [i for i, doc in enumerate(documents) if isinstance(doc, CatalogDocument)]
    if not catalog:
        return None
    if position is Offset.FIRST:
        return catalog[0]
    if position is Offset.LAST:
        return catalog[-1]
    if position is Offset.MIDDLE:
        index = (len(documents) - 1) // 2
    else:
        index = max(0, min(position, len(documents) - 1))
    if index in catalog:
        return index
    later = [i for i in catalog if i > index]
    return later[0] if later else catalog[-1]


def _mark_duplicates(docs: list[CatalogDocument]) -> tuple[DocumentRef, ...]:
    seen: set[str] = set()
    result: list[DocumentRef] = []
    for doc in docs:
        if doc.id in seen:
            logger.warning("Document {} appears twice in one window", doc.id)
            result.append(Placeholder(PlaceholderReason.ERROR, detail=f"duplicate {doc.id}"))
            continue
        seen.add(doc.id)
        result.append(doc)
    return tuple(result)
