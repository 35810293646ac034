"""Document store and holdings service over the SQLite catalog index."""

import dataclasses
import json
import sqlite3
import threading
import time

from loguru import logger

from shelf_browse import config
from shelf_browse.core.callnum.shelfkey import make_call_number
from shelf_browse.core.importer.json_reader import parse_holdings
from shelf_browse.exceptions import StoreError
from shelf_browse.models.browse import Direction
from shelf_browse.models.catalog import CatalogDocument, HoldingsSnapshot

# SQLite virtual machine instructions between deadline checks.
_PROGRESS_STEPS = 1000

_COLUMNS = "id, title, call_number, shelfkey, reverse_shelfkey"


class SqliteDocumentStore:
    """Shelf-ordered document lookups against the ``documents`` table.

    Shelf order is ``(shelfkey, id)``. Each query is aborted once ``timeout``
    seconds pass or the ``cancel`` event is set.
    """

    def __init__(
        self,
        conn: sqlite3.Connection,
        *,
        timeout: float = config.STORE_QUERY_TIMEOUT,
        cancel: threading.Event | None = None,
    ) -> None:
        self.conn = conn
        self.timeout = timeout
        self.cancel = cancel

    def get_document(self, doc_id: str) -> CatalogDocument | None:
        rows = self._fetch(f"SELECT {_COLUMNS} FROM documents WHERE id = ?", (doc_id,))
        return _to_document(rows[0]) if rows else None

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

        Args:
            key: Shelfkey (ASC) or reverse shelfkey (DESC) of the position.
            direction: ASC for documents at or after the position, DESC for
                documents strictly before it, nearest first.
            limit: Max documents to return.
            skip: Documents to pass over first.
            anchor_id: Document id that breaks ties at ``key``.

        Returns:
            Documents in the requested order.

        Raises:
            StoreError: If the query fails, times out or is cancelled.
        """
        if limit <= 0:
            return []

        if direction is Direction.ASC:
            column, tie_order = "shelfkey", ""
            if anchor_id is None:
                where, params = "shelfkey >= ?", [key]
            else:
                where = "(shelfkey > ? OR (shelfkey = ? AND id >= ?))"
                params = [key, key, anchor_id]
        else:
            column, tie_order = "reverse_shelfkey", " DESC"
            if anchor_id is None:
                where, params = "reverse_shelfkey > ?", [key]
            else:
                where = "(reverse_shelfkey > ? OR (reverse_shelfkey = ? AND id < ?))"
                params = [key, key, anchor_id]

        query = (
            f"SELECT {_COLUMNS} FROM documents "
            f"WHERE {column} IS NOT NULL AND {where} "
            f"ORDER BY {column}, id{tie_order} LIMIT ? OFFSET ?"
        )
        rows = self._fetch(query, (*params, limit, max(skip, 0)))
        logger.debug("{} neighbors of {!r}: skip {}, limit {} -> {}",
                     direction.value, key, skip, limit, len(rows))
        return [_to_document(row) for row in rows]

    def _fetch(self, query: str, params: tuple) -> list[tuple]:
        deadline = time.monotonic() + self.timeout

        def interrupt() -> int:
            if self.cancel is not None and self.cancel.is_set():
                return 1
            return int(time.monotonic() > deadline)

        self.conn.set_progress_handler(interrupt, _PROGRESS_STEPS)
        try:
            return self.conn.execute(query, params).fetchall()
        except sqlite3.Error as e:
            if self.cancel is not None and self.cancel.is_set():
                msg = "Document store query cancelled"
            elif time.monotonic() > deadline:
                msg = f"Document store query timed out after {self.timeout}s"
            else:
                msg = f"Document store query failed: {e}"
            raise StoreError(msg) from e
        finally:
            self.conn.set_progress_handler(None, 0)


class SqliteHoldingsService:
    """Holdings snapshots stored alongside the catalog index."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def get_holdings(self, doc_id: str) -> HoldingsSnapshot:
        try:
            row = self.conn.execute(
                "SELECT data FROM holdings WHERE document_id = ?", (doc_id,)
            ).fetchone()
        except sqlite3.Error as e:
            msg = f"Cannot read holdings of {doc_id!r}: {e}"
            raise StoreError(msg) from e
        if row is None:
            return HoldingsSnapshot.empty(doc_id)
        try:
            data = json.loads(row[0])
            if not isinstance(data, dict):
                msg = "not an object"
                raise TypeError(msg)
            return parse_holdings(doc_id, data)
        except (TypeError, ValueError, AttributeError) as e:
            msg = f"Malformed holdings of {doc_id!r}: {e}"
            raise StoreError(msg) from e


def _to_document(row: tuple) -> CatalogDocument:
    doc_id, title, raw, shelfkey, reverse_key = row
    # Keys come from the index so that an origin sorts exactly where it is stored.
    call_number = dataclasses.replace(
        make_call_number(raw),
        shelfkey=shelfkey or "",
        reverse_shelfkey=reverse_key or "",
    )
    return CatalogDocument(id=doc_id, title=title, call_number=call_number)
