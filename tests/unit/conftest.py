"""Shared test fixtures."""

import json
import sqlite3
from pathlib import Path
from typing import Any

import pytest

from shelf_browse.core.database.schema import create_schema
from shelf_browse.core.importer.json_reader import parse_catalog_record
from shelf_browse.core.importer.loader import import_catalog_dir
from shelf_browse.core.lcc.outline import LccOutline, default_outline
from shelf_browse.models.catalog import CatalogDocument
from tests.unit.fakes import FakeDocumentStore, FakeHoldingsService


def _record(doc_id: str, call_number: str, title: str, **holdings: Any) -> dict[str, Any]:
    return {"id": doc_id, "title": title, "call_number": call_number, "holdings": holdings}


# Shelf order: d01 d02 d03 d04 d05 d11 d06 d07 d08 d09 d10 (d05/d11 share a call number).
CATALOG_SOURCE: dict[str, list[dict[str, Any]]] = {
    "computing.json": [
        _record("d01", "QA76.5 .A1 2000", "Computers and society"),
        _record("d02", "QA76.6 .B2", "Structured programming"),
        _record(
            "d03", "QA76.73.C15 S63 2021", "The C programming language",
            availability={"existing": 2, "available": 0, "circulating": 2,
                          "by_library": {"SCI-ENG": 2}},
        ),
        _record(
            "d04", "QA76.73 .J38 B45 2018", "Java in depth",
            availability={"existing": 5, "available": 4, "circulating": 5, "reserve": 1,
                          "by_library": {"SCI-ENG": 5}},
        ),
        _record("d05", "QA76.73 .P98 L88 2019", "Learning Python"),
        _record("d11", "QA76.73 .P98 L88 2019", "Learning Python (second copy)"),
        _record("d06", "QA76.76 .O63 T35 2005", "Operating systems"),
        _record("d07", "QA76.9 .D3 D37 2003", "Database systems"),
    ],
    "mathematics.json": [
        _record("d08", "QA77 .K5", "Analog computers"),
        _record("d09", "QA88 .S7 1990", "Mathematical machines"),
        _record("d10", "QA90 .T8", "Graphic methods"),
        _record("x01", "MSS 1234", "Papers of a mathematician"),
        _record("x02", "", "Uncatalogued pamphlet"),
    ],
}

SHELF_ORDER = ["d01", "d02", "d03", "d04", "d05", "d11", "d06", "d07", "d08", "d09", "d10"]


def write_catalog_source(source: Path) -> None:
    source.mkdir(parents=True, exist_ok=True)
    for name, records in CATALOG_SOURCE.items():
        (source / name).write_text(json.dumps(records))


@pytest.fixture
def catalog_source(tmp_path: Path) -> Path:
    """Return a directory with the catalog export files."""
    source = tmp_path / "source"
    write_catalog_source(source)
    return source


@pytest.fixture
def populated_db(catalog_source: Path) -> sqlite3.Connection:
    """Return an in-memory DB with the test catalog imported."""
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    import_catalog_dir(conn, catalog_source)
    return conn


@pytest.fixture
def catalog_documents() -> list[CatalogDocument]:
    """Return all test catalog documents, browsable or not."""
    return [
        parse_catalog_record(record)[0]
        for records in CATALOG_SOURCE.values()
        for record in records
    ]


@pytest.fixture
def fake_store(catalog_documents: list[CatalogDocument]) -> FakeDocumentStore:
    return FakeDocumentStore(catalog_documents)


@pytest.fixture
def fake_holdings() -> FakeHoldingsService:
    return FakeHoldingsService(
        parse_catalog_record(record)[1]
        for records in CATALOG_SOURCE.values()
        for record in records
    )


@pytest.fixture
def outline() -> LccOutline:
    """Return the bundled LCC outline."""
    return default_outline()
