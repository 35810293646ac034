"""Orchestrate importing catalog export files into SQLite."""

import hashlib
import json
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from shelf_browse.core.importer.json_reader import parse_catalog_record
from shelf_browse.models.catalog import CatalogDocument, HoldingsSnapshot


@dataclass(frozen=True)
class ImportStats:
    """Summary of an import operation."""

    files_imported: int
    files_skipped: int
    records_imported: int
    records_unbrowsable: int


def _file_hash(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def _should_reimport(conn: sqlite3.Connection, source: str, source_hash: str) -> bool:
    row = conn.execute(
        "SELECT source_hash FROM sync_state WHERE source = ?",
        (source,),
    ).fetchone()
    if row is None:
        return True
    return row[0] != source_hash


def insert_records(
    conn: sqlite3.Connection,
    records: list[tuple[CatalogDocument, HoldingsSnapshot]],
    *,
    source: str,
    imported_at: int,
) -> None:
    """Insert documents (with shelfkeys when browsable) and their holdings JSON."""
    conn.executemany(
        """INSERT OR REPLACE INTO documents
           (id, title, call_number, shelfkey, reverse_shelfkey, lc_format, source, imported_at)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
        [
            (
                doc.id, doc.title, doc.call_number.raw,
                doc.call_number.shelfkey if doc.call_number.browsable else None,
                doc.call_number.reverse_shelfkey if doc.call_number.browsable else None,
                int(doc.call_number.lc_format), source, imported_at,
            )
            for doc, _ in records
        ],
    )
    conn.executemany(
        "INSERT OR REPLACE INTO holdings (document_id, data) VALUES (?, ?)",
        [(doc.id, json.dumps(_holdings_data(holdings))) for doc, holdings in records],
    )


def import_catalog_dir(
    conn: sqlite3.Connection,
    source_dir: Path,
    *,
    force: bool = False,
) -> ImportStats:
    """Import all catalog export files (*.json) from source_dir into the database.

    Args:
        conn: SQLite connection (schema must already exist).
        source_dir: Directory containing JSON lists of catalog records.
        force: Re-import even if source file hasn't changed.

    Returns:
        ImportStats with counts of imported/skipped files and records.
    """
    if not source_dir.is_dir():
        msg = f"Catalog export directory not found: {source_dir}"
        raise FileNotFoundError(msg)

    files_imported = 0
    files_skipped = 0
    total_records = 0
    total_unbrowsable = 0

    for json_path in sorted(source_dir.glob("*.json")):
        source = json_path.name
        source_hash = _file_hash(json_path)

        if not force and not _should_reimport(conn, source, source_hash):
            files_skipped += 1
            continue

        try:
            data = json.loads(json_path.read_text(encoding="utf-8"))
            if not isinstance(data, list):
                msg = f"{source}: expected a list of records"
                raise ValueError(msg)
            records = [parse_catalog_record(item) for item in data]

            # Clear old data for this file
            conn.execute(
                "DELETE FROM holdings WHERE document_id IN "
                "(SELECT id FROM documents WHERE source = ?)",
                (source,),
            )
            conn.execute("DELETE FROM documents WHERE source = ?", (source,))

            now_ms = int(time.time() * 1000)
            insert_records(conn, records, source=source, imported_at=now_ms)

            conn.execute(
                """INSERT OR REPLACE INTO sync_state
                   (source, record_count, last_import_at, source_hash)
                   VALUES (?, ?, ?, ?)""",
                (source, len(records), now_ms, source_hash),
            )

            conn.commit()
        except Exception:
            conn.rollback()
            logger.exception("Failed to import {}", source)
            continue

        unbrowsable = sum(1 for doc, _ in records if not doc.call_number.browsable)
        files_imported += 1
        total_records += len(records)
        total_unbrowsable += unbrowsable
        logger.debug("Imported {} ({} records, {} not browsable)", source, len(records), unbrowsable)

    logger.info(
        "Import complete: {} imported, {} skipped, {} total records",
        files_imported, files_skipped, total_records,
    )
    return ImportStats(
        files_imported=files_imported,
        files_skipped=files_skipped,
        records_imported=total_records,
        records_unbrowsable=total_unbrowsable,
    )


def _holdings_data(holdings: HoldingsSnapshot) -> dict:
    data: dict = {
        "unique_site": holdings.unique_site,
        "shadowed": holdings.shadowed,
        "discoverable": holdings.discoverable,
        "online_only": holdings.online_only,
        "has_url": holdings.has_url,
        "pda": holdings.pda,
        "non_bibliographic": holdings.non_bibliographic,
        "languages": list(holdings.languages),
        "formats": list(holdings.formats),
    }
    availability = holdings.availability
    if availability is not None:
        data["availability"] = {
            "existing": availability.existing,
            "available": availability.available,
            "circulating": availability.circulating,
            "reserve": availability.reserve,
            "special_collections": availability.special_collections,
            "by_library": dict(availability.by_library),
        }
    return data
