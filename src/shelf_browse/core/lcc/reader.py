"""Read the LCC outline table from its JSON data file."""

import json
import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from shelf_browse.exceptions import LccTableError

_TRAILING_PUNCTUATION_RE = re.compile(r"\s+[?.\s]+$")


@dataclass(frozen=True)
class LccRow:
    """One row of the outline table, with its position in the hierarchy."""

    id: str
    parent: str | None
    range: str
    name: str
    ascii_name: str
    note: str
    start: str | None
    end: str | None
    artificial: bool
    depth: int


@dataclass(frozen=True)
class LccTable:
    version: str
    rows: tuple[LccRow, ...]


def read_lcc_table(path: Path) -> LccTable:
    """Load and check an outline table file.

    Raises:
        LccTableError: If the file is unreadable or violates the table schema.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Cannot read LCC table {path}: {exc}"
        raise LccTableError(msg) from exc
    return parse_lcc_table(data)


def parse_lcc_table(data: Any) -> LccTable:
    """Turn decoded table data into rows.

    Rows are listed parent first; their order within a parent is the order
    of the children. Depth is derived from the parent chain.

    Args:
        data: Decoded JSON with ``version`` and ``nodes`` keys.

    Returns:
        LccTable with one LccRow per node, in table order.
    """
    if not isinstance(data, dict) or not isinstance(data.get("nodes"), list):
        msg = "LCC table must be an object with a 'nodes' list"
        raise LccTableError(msg)
    version = data.get("version")
    if not isinstance(version, str) or not version:
        msg = "LCC table is missing its 'version'"
        raise LccTableError(msg)

    depths: dict[str, int] = {}
    rows: list[LccRow] = []
    for position, raw in enumerate(data["nodes"]):
        row = _parse_row(raw, position=position, depths=depths)
        depths[row.id] = row.depth
        rows.append(row)

    if not rows:
        msg = "LCC table has no nodes"
        raise LccTableError(msg)
    return LccTable(version=version, rows=tuple(rows))


def _parse_row(raw: Any, *, position: int, depths: dict[str, int]) -> LccRow:
    if not isinstance(raw, dict):
        msg = f"LCC table row {position} is not an object"
        raise LccTableError(msg)

    node_id = raw.get("id")
    if not isinstance(node_id, str) or not node_id:
        msg = f"LCC table row {position} has no id"
        raise LccTableError(msg)
    if node_id in depths:
        msg = f"Duplicate LCC node id {node_id!r}"
        raise LccTableError(msg)

    parent = raw.get("parent")
    if position == 0:
        if parent is not None:
            msg = f"First LCC node {node_id!r} must be the root (no parent)"
            raise LccTableError(msg)
        depth = 0
    elif parent is None:
        msg = f"LCC node {node_id!r} has no parent"
        raise LccTableError(msg)
    elif parent not in depths:
        msg = f"LCC node {node_id!r} refers to unknown or later parent {parent!r}"
        raise LccTableError(msg)
    else:
        depth = depths[parent] + 1

    for key in ("range", "name"):
        if not isinstance(raw.get(key), str):
            msg = f"LCC node {node_id!r} has no {key!r}"
            raise LccTableError(msg)
    if depth > 0 and not raw["range"].strip():
        msg = f"LCC node {node_id!r} has an empty range"
        raise LccTableError(msg)

    name = raw["name"].strip()
    return LccRow(
        id=node_id,
        parent=parent,
        range=raw["range"].strip(),
        name=name,
        ascii_name=raw.get("ascii_name") or ascii_fold(name),
        note=raw.get("note") or "",
        start=raw.get("start"),
        end=raw.get("end"),
        artificial=not raw.get("lcco", True),
        depth=depth,
    )


def ascii_fold(name: str) -> str:
    """Plain-ASCII form of a subject name, without trailing punctuation."""
    folded = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    return _TRAILING_PUNCTUATION_RE.sub("", folded)
