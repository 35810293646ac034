"""Tests for the import loader that reads catalog export files into SQLite."""

import json
import sqlite3
from pathlib import Path

import pytest

from shelf_browse.core.database.schema import create_schema
from shelf_browse.core.importer.loader import import_catalog_dir
from tests.unit.conftest import SHELF_ORDER


def _new_db() -> sqlite3.Connection:
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    return conn


def test_import_catalog_dir_loads_documents(catalog_source: Path) -> None:
    conn = _new_db()
    stats = import_catalog_dir(conn, catalog_source)

    assert stats.files_imported == 2
    assert stats.files_skipped == 0
    assert stats.records_imported == 13
    assert stats.records_unbrowsable == 2

    row = conn.execute(
        "SELECT title, call_number, lc_format, source FROM documents WHERE id = 'd03'"
    ).fetchone()
    assert row == ("The C programming language", "QA76.73.C15 S63 2021", 1, "computing.json")


def test_import_orders_documents_by_shelfkey(catalog_source: Path) -> None:
    conn = _new_db()
    import_catalog_dir(conn, catalog_source)
    rows = conn.execute(
        "SELECT id FROM documents WHERE shelfkey IS NOT NULL ORDER BY shelfkey, id"
    ).fetchall()
    assert [r[0] for r in rows] == SHELF_ORDER


def test_unbrowsable_documents_have_no_keys(catalog_source: Path) -> None:
    conn = _new_db()
    import_catalog_dir(conn, catalog_source)
    rows = conn.execute(
        "SELECT id, shelfkey, reverse_shelfkey FROM documents WHERE id LIKE 'x%' ORDER BY id"
    ).fetchall()
    assert rows == [("x01", None, None), ("x02", None, None)]


def test_import_stores_holdings(catalog_source: Path) -> None:
    conn = _new_db()
    import_catalog_dir(conn, catalog_source)
    data = json.loads(
        conn.execute("SELECT data FROM holdings WHERE document_id = 'd04'").fetchone()[0]
    )
    assert data["availability"]["reserve"] == 1
    assert data["availability"]["by_library"] == {"SCI-ENG": 5}


def test_import_skips_unchanged_files_on_second_run(catalog_source: Path) -> None:
    conn = _new_db()
    import_catalog_dir(conn, catalog_source)

    second = import_catalog_dir(conn, catalog_source)
    assert second.files_imported == 0
    assert second.files_skipped == 2

    forced = import_catalog_dir(conn, catalog_source, force=True)
    assert forced.files_imported == 2
    assert conn.execute("SELECT COUNT(*) FROM documents").fetchone()[0] == 13


def test_changed_file_replaces_its_documents(catalog_source: Path) -> None:
    conn = _new_db()
    import_catalog_dir(conn, catalog_source)

    records = [{"id": "d08", "title": "Analog computers", "call_number": "QA77 .K5"}]
    (catalog_source / "mathematics.json").write_text(json.dumps(records))
    stats = import_catalog_dir(conn, catalog_source)

    assert stats.files_imported == 1
    assert stats.files_skipped == 1
    ids = {r[0] for r in conn.execute("SELECT id FROM documents WHERE source = 'mathematics.json'")}
    assert ids == {"d08"}
    assert conn.execute("SELECT COUNT(*) FROM holdings").fetchone()[0] == 9


def test_bad_file_is_rolled_back(catalog_source: Path) -> None:
    conn = _new_db()
    (catalog_source / "broken.json").write_text(json.dumps([{"title": "No id"}]))
    stats = import_catalog_dir(conn, catalog_source)

    assert stats.files_imported == 2
    count = conn.execute("SELECT COUNT(*) FROM documents WHERE source = 'broken.json'")
    assert count.fetchone()[0] == 0
    assert conn.execute("SELECT COUNT(*) FROM sync_state").fetchone()[0] == 2


def test_file_that_is_not_a_list_is_skipped(tmp_path: Path) -> None:
    (tmp_path / "catalog.json").write_text(json.dumps({"id": "d01"}))
    stats = import_catalog_dir(_new_db(), tmp_path)
    assert stats.files_imported == 0
    assert stats.records_imported == 0


def test_missing_source_dir(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        import_catalog_dir(_new_db(), tmp_path / "missing")
