"""Tests for the browse window engine."""

import pytest

from shelf_browse.core.browse.window import BrowseEngine, focus_index, parse_offset, window_start
from shelf_browse.core.callnum.shelfkey import make_call_number
from shelf_browse.exceptions import BrowseInputError, OriginNotFoundError
from shelf_browse.models.browse import BrowseOrigin, BrowseWindow, Direction, Offset
from shelf_browse.models.catalog import CatalogDocument, Placeholder, PlaceholderReason
from tests.unit.conftest import SHELF_ORDER
from tests.unit.fakes import FakeDocumentStore


def _ids(window: BrowseWindow) -> list[str]:
    return [doc.id if isinstance(doc, CatalogDocument) else "-" for doc in window.documents]


@pytest.mark.parametrize(
    ("offset", "width", "start"),
    [
        (Offset.FIRST, 7, 0),
        (Offset.MIDDLE, 7, -3),
        (Offset.MIDDLE, 6, -2),
        (Offset.LAST, 7, -6),
        (2, 7, -2),
    ],
)
def test_window_start(offset: Offset | int, width: int, start: int) -> None:
    assert window_start(offset, width) == start


def test_parse_offset() -> None:
    assert parse_offset("Middle") is Offset.MIDDLE
    assert parse_offset("3") == 3
    with pytest.raises(BrowseInputError):
        parse_offset("center")


def test_browse_document_centered(fake_store: FakeDocumentStore) -> None:
    window = BrowseEngine(fake_store).browse(BrowseOrigin(document_id="d05"), width=5)
    assert _ids(window) == ["d03", "d04", "d05", "d11", "d06"]
    assert window.start_position == -2
    assert window.origin_index == 2
    assert window.offset is Offset.MIDDLE


def test_browse_pages_chain(fake_store: FakeDocumentStore) -> None:
    """Stepping page by page walks the whole shelf without gaps or repeats."""
    engine = BrowseEngine(fake_store)
    origin = BrowseOrigin(document_id="d05")
    pages = [engine.browse(origin, page=p, width=5) for p in range(-2, 3)]
    seen = [doc_id for window in pages for doc_id in _ids(window)]
    assert seen == SHELF_ORDER


def test_browse_page_before(fake_store: FakeDocumentStore) -> None:
    window = BrowseEngine(fake_store).browse(BrowseOrigin(document_id="d05"), page=-1, width=5)
    assert _ids(window) == ["d01", "d02"]
    assert window.origin_index is None
    # One descending query, nothing after the origin.
    assert [call[1] for call in fake_store.calls] == [Direction.DESC]


def test_browse_page_after_uses_only_ascending_query(fake_store: FakeDocumentStore) -> None:
    window = BrowseEngine(fake_store).browse(BrowseOrigin(document_id="d05"), page=1, width=5)
    assert _ids(window) == ["d07", "d08", "d09", "d10"]
    assert fake_store.calls == [
        (fake_store.documents["d05"].call_number.shelfkey, Direction.ASC, 5, 3, "d05")
    ]


def test_browse_past_the_end_is_empty(fake_store: FakeDocumentStore) -> None:
    window = BrowseEngine(fake_store).browse(BrowseOrigin(document_id="d05"), page=5, width=5)
    assert window.documents == ()


def test_browse_ties_follow_document_id(fake_store: FakeDocumentStore) -> None:
    window = BrowseEngine(fake_store).browse(BrowseOrigin(document_id="d11"), width=3)
    assert _ids(window) == ["d05", "d11", "d06"]


def test_browse_from_call_number(fake_store: FakeDocumentStore) -> None:
    window = BrowseEngine(fake_store).browse(BrowseOrigin(call_number="QA76.73"), width=3)
    assert window.offset is Offset.FIRST
    assert _ids(window) == ["d03", "d04", "d05"]
    assert window.origin_document is None


def test_browse_from_call_number_before(fake_store: FakeDocumentStore) -> None:
    engine = BrowseEngine(fake_store)
    window = engine.browse(BrowseOrigin(call_number="QA76.73"), width=3, offset=Offset.LAST)
    assert _ids(window) == ["d01", "d02", "d03"]


def test_short_window_is_not_padded(fake_store: FakeDocumentStore) -> None:
    window = BrowseEngine(fake_store).browse(BrowseOrigin(document_id="d01"), width=5)
    assert _ids(window) == ["d01", "d02", "d03"]
    assert window.start_position == -2


def test_browse_is_repeatable(fake_store: FakeDocumentStore) -> None:
    engine = BrowseEngine(fake_store)
    origin = BrowseOrigin(document_id="d09")
    assert engine.browse(origin, width=7) == engine.browse(origin, width=7)


@pytest.mark.parametrize(
    ("origin", "kwargs", "error"),
    [
        (BrowseOrigin(), {}, BrowseInputError),
        (BrowseOrigin(document_id="d01", call_number="QA1"), {}, BrowseInputError),
        (BrowseOrigin(document_id="d01"), {"width": 0}, BrowseInputError),
        (BrowseOrigin(document_id="d01"), {"width": 101}, BrowseInputError),
        (BrowseOrigin(document_id="d01"), {"width": 5, "offset": 5}, BrowseInputError),
        (BrowseOrigin(call_number="???"), {}, BrowseInputError),
        (BrowseOrigin(document_id="x01"), {}, BrowseInputError),
        (BrowseOrigin(document_id="nope"), {}, OriginNotFoundError),
    ],
)
def test_browse_input_errors(
    fake_store: FakeDocumentStore, origin: BrowseOrigin, kwargs: dict, error: type[Exception]
) -> None:
    with pytest.raises(error):
        BrowseEngine(fake_store).browse(origin, **kwargs)


def test_origin_not_found_is_a_lookup_error(fake_store: FakeDocumentStore) -> None:
    with pytest.raises(LookupError):
        BrowseEngine(fake_store).browse(BrowseOrigin(document_id="nope"))


def test_extra_rows_are_dropped(fake_store: FakeDocumentStore) -> None:
    fake_store.extra_rows = [fake_store.documents["d04"]]
    window = BrowseEngine(fake_store).browse(
        BrowseOrigin(document_id="d05"), width=3, offset=Offset.FIRST
    )
    assert _ids(window) == ["d05", "d11", "d06"]


def test_duplicate_documents_become_placeholders(fake_store: FakeDocumentStore) -> None:
    d05 = fake_store.documents["d05"]
    fake_store.shelf.insert(fake_store.shelf.index(d05) + 2, d05)
    window = BrowseEngine(fake_store).browse(
        BrowseOrigin(document_id="d05"), width=3, offset=Offset.FIRST
    )
    assert _ids(window) == ["d05", "d11", "-"]
    placeholder = window.documents[2]
    assert isinstance(placeholder, Placeholder)
    assert placeholder.reason is PlaceholderReason.ERROR


def test_focus_index(fake_store: FakeDocumentStore) -> None:
    engine = BrowseEngine(fake_store)
    window = engine.browse(BrowseOrigin(document_id="d05"), width=5)
    assert focus_index(window) == 2
    assert focus_index(window, Offset.FIRST) == 0
    assert focus_index(window, Offset.LAST) == 4
    assert focus_index(window, 10) == 4

    other_page = engine.browse(BrowseOrigin(document_id="d05"), page=-1, width=5)
    assert focus_index(other_page) == 0


def test_focus_skips_placeholders() -> None:
    doc = CatalogDocument(id="a", call_number=make_call_number("QA1 .A1"))
    window = BrowseWindow(
        origin=BrowseOrigin(call_number="QA1"),
        origin_shelfkey="",
        page=0,
        width=3,
        offset=Offset.FIRST,
        start_position=0,
        documents=(Placeholder(PlaceholderReason.ERROR), doc, Placeholder(PlaceholderReason.EMPTY)),
    )
    assert focus_index(window) == 1
    assert focus_index(window, Offset.LAST) == 1
    assert focus_index(window, 2) == 1

