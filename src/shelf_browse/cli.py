"""CLI for virtual shelf browse (import, browse, LCC lookups)."""

import json
import sqlite3
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from shelf_browse import config
from shelf_browse.api import HttpHoldingsClient
from shelf_browse.core.browse.window import BrowseEngine, focus_index, parse_offset
from shelf_browse.core.callnum.shelfkey import decode, encode
from shelf_browse.core.database.schema import migrate_schema
from shelf_browse.core.display.range_display import describe_window, minimal_distinguishing_pair
from shelf_browse.core.display.text import render_tree_as_text
from shelf_browse.core.display.tree import render_tree
from shelf_browse.core.importer.loader import import_catalog_dir
from shelf_browse.core.lcc.outline import LccOutline, default_outline, lcc_depth_name
from shelf_browse.core.status.markers import derive_markers
from shelf_browse.core.store.sqlite_store import SqliteDocumentStore, SqliteHoldingsService
from shelf_browse.exceptions import LccTableError, ShelfBrowseError
from shelf_browse.logging_config import configure_logging
from shelf_browse.models.browse import BrowseOrigin
from shelf_browse.models.catalog import CatalogDocument
from shelf_browse.protocols import HoldingsServiceProtocol

app = typer.Typer(help="Virtual shelf browse: walk the shelf around a catalog item.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Catalog database directory"),
]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


@app.command(name="import")
def import_cmd(
    source_dir: Annotated[
        Path,
        typer.Argument(help="Directory with catalog export *.json files"),
    ],
    data_dir: DataDirOption = None,
    force: bool = typer.Option(False, "--force", "-f", help="Re-import all files"),
) -> None:
    """Import catalog export files into the catalog database."""
    dst = data_dir or config.resolve_data_directory()
    if not source_dir.is_dir():
        logger.error("Source directory not found: {}", source_dir)
        raise typer.Exit(1)

    dst.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(dst / config.CATALOG_DB_NAME))
    try:
        migrate_schema(conn)
        stats = import_catalog_dir(conn, source_dir, force=force)
        typer.echo(
            f"Imported {stats.files_imported} files "
            f"({stats.records_imported} records, {stats.records_unbrowsable} not browsable), "
            f"skipped {stats.files_skipped}"
        )
    finally:
        conn.close()


def _open_db(data_dir: Path | None) -> sqlite3.Connection:
    """Open the catalog database, raising if it doesn't exist."""
    dst = data_dir or config.resolve_data_directory()
    db_path = dst / config.CATALOG_DB_NAME
    if not db_path.exists():
        logger.error("Catalog database not found: {}. Run 'import' first.", db_path)
        raise typer.Exit(1)
    return sqlite3.connect(str(db_path))


def _load_outline() -> LccOutline:
    """Load the bundled LCC outline, exiting if the table is unusable."""
    try:
        return default_outline()
    except LccTableError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e


@app.command()
def browse(
    doc_id: str | None = typer.Argument(None, help="Document to center the shelf on"),
    start: Annotated[
        str | None,
        typer.Option("--start", "-s", help="Start at this call number instead of a document"),
    ] = None,
    page: int = typer.Option(0, "--page", "-p", help="Page relative to the origin"),
    width: int = typer.Option(config.DEFAULT_WIDTH, "--width", "-w", help="Items per page"),
    full: bool = typer.Option(False, "--full", help="Use the full-view width"),
    offset: Annotated[
        str | None,
        typer.Option("--offset", "-o", help="Origin position: first, middle, last or an index"),
    ] = None,
    data_dir: DataDirOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show one page of the virtual shelf."""
    conn = _open_db(data_dir)
    try:
        engine = BrowseEngine(SqliteDocumentStore(conn))
        holdings = SqliteHoldingsService(conn)
        try:
            window = engine.browse(
                BrowseOrigin(document_id=doc_id, call_number=start),
                page=page,
                width=config.FULL_VIEW_WIDTH if full else width,
                offset=parse_offset(offset) if offset else None,
            )
            focus = focus_index(window)
            marker_sets = [
                derive_markers(
                    holdings.get_holdings(doc.id) if isinstance(doc, CatalogDocument) else doc,
                    focus=i == focus,
                )
                for i, doc in enumerate(window.documents)
            ]
            description = describe_window(window, default_outline())
        except ShelfBrowseError as e:
            logger.error("{}", e)
            raise typer.Exit(1) from e

        if output_json:
            data = {
                "page": window.page,
                "start_position": window.start_position,
                "documents": [
                    {
                        "id": doc.id,
                        "title": doc.title,
                        "call_number": doc.call_number.raw,
                        "shelfkey": doc.call_number.shelfkey,
                        "markers": list(m.keys),
                    }
                    if isinstance(doc, CatalogDocument)
                    else {"placeholder": doc.reason.value, "markers": list(m.keys)}
                    for doc, m in zip(window.documents, marker_sets, strict=True)
                ],
                "range": [description.first_call_number, description.last_call_number],
                "position": description.position,
            }
            typer.echo(json.dumps(data, indent=2))
            return

        typer.echo(description.position)
        if description.first_call_number:
            typer.echo(
                f"Call numbers {description.first_call_number}"
                + (f" - {description.last_call_number}" if description.last_call_number else "")
            )
        for level in description.levels:
            indent = "  " * level.indent
            for entry in (level.first, level.last):
                if entry is not None:
                    typer.echo(f"{indent}{level.depth_name}: {entry.range} {entry.name or ''}")
        typer.echo()
        if not window.documents:
            typer.echo("No items on this page.")
        for i, (doc, m) in enumerate(zip(window.documents, marker_sets, strict=True)):
            pointer = ">" if i == focus else " "
            badges = "".join(marker.label for marker in m.markers if marker.label)
            if isinstance(doc, CatalogDocument):
                typer.echo(f"{pointer} {doc.call_number.raw:<24} {doc.title[:60]}  {badges}")
            else:
                typer.echo(f"{pointer} ({doc.reason.value}) {doc.detail}")
    finally:
        conn.close()


@app.command()
def shelfkey(
    value: str = typer.Argument(..., help="Call number (or shelfkey with --decode)"),
    decode_key: bool = typer.Option(False, "--decode", help="Turn a shelfkey into a call number"),
) -> None:
    """Print the shelfkeys of a call number."""
    if decode_key:
        number = decode(value)
        if number is None:
            typer.echo(f"Not a shelfkey: {value!r}")
            raise typer.Exit(1)
        typer.echo(str(number))
        return

    keys = encode(value)
    if not keys.ok:
        typer.echo(f"Not a call number: {value!r}")
        raise typer.Exit(1)
    typer.echo(f"shelfkey:         {keys.shelfkey}")
    typer.echo(f"reverse shelfkey: {keys.reverse_shelfkey}")


@app.command()
def lookup(call_number: str = typer.Argument(..., help="Call number to classify")) -> None:
    """Show where a call number sits in the LCC hierarchy."""
    outline = _load_outline()
    path = outline.lookup(call_number)
    if len(path) < 2:
        typer.echo(f"No LCC classification for {call_number!r}")
        raise typer.Exit(1)
    for node in path[1:]:
        indent = "  " * (node.depth - 1)
        typer.echo(f"{indent}{lcc_depth_name(node.depth)}: {node.range} {outline.effective_name(node)}")


@app.command()
def hierarchy(
    class_letter: Annotated[
        str | None, typer.Option("--class", "-c", help="Show one class")
    ] = None,
    subclass: Annotated[
        str | None, typer.Option("--subclass", "-s", help="Show one subclass")
    ] = None,
    range_text: Annotated[
        str | None, typer.Option("--range", "-r", help="Show one range, e.g. QA71-90")
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to render"),
    ] = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show the LCC navigation tree."""
    outline = _load_outline()
    node = outline.root
    if class_letter:
        node = outline.class_tree(class_letter)
    elif subclass:
        node = outline.subclass_tree(subclass)
    elif range_text:
        node = outline.range_tree(range_text)
    if node is None:
        typer.echo(f"No LCC node for {class_letter or subclass or range_text!r}")
        raise typer.Exit(1)

    if output_json:
        tree = render_tree(outline, node, max_depth=max_depth)
        typer.echo(json.dumps(tree.as_dict(), indent=2))
    else:
        tree = render_tree(outline, node)
        typer.echo(render_tree_as_text(tree, max_depth=max_depth), nl=False)


@app.command()
def markers(
    doc_id: str = typer.Argument(..., help="Document id"),
    holdings_url: Annotated[
        str | None,
        typer.Option("--holdings-url", help="Availability service (default: local holdings)"),
    ] = config.HOLDINGS_SERVICE_URL,
    special_collections: bool = typer.Option(
        False, "--special-collections", help="View through the Special Collections lens"
    ),
    overrides: Annotated[
        list[str] | None,
        typer.Option("--override", help="Library whose copies are out of service"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Show the status markers of a document."""
    service: HoldingsServiceProtocol
    conn: sqlite3.Connection | None = None
    if holdings_url:
        service = HttpHoldingsClient(holdings_url)
    else:
        conn = _open_db(data_dir)
        service = SqliteHoldingsService(conn)
    try:
        result = derive_markers(
            service.get_holdings(doc_id),
            special_collections_lens=special_collections,
            workflow_overrides=frozenset(overrides or ()),
        )
    except ShelfBrowseError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e
    finally:
        if conn is not None:
            conn.close()

    if not result.markers:
        typer.echo("No status markers.")
    for marker in result.markers:
        restyled = "" if result.is_restyled(marker.css_class) else "  (not restyled)"
        tooltip = marker.tooltip.replace("\n", " ")
        typer.echo(f"  [{marker.label or ' '}] {marker.key}: {tooltip}{restyled}")


@app.command(name="range")
def range_cmd(
    first: str = typer.Argument(..., help="First call number"),
    last: str = typer.Argument(..., help="Last call number"),
) -> None:
    """Shorten a pair of call numbers to where they differ."""
    a, b = minimal_distinguishing_pair(first, last)
    if b is None:
        typer.echo(a or "")
    else:
        typer.echo(f"{a} - {b}")
