"""Configuration constants for shelf-browse."""

import os
from pathlib import Path

# Directory with the catalog index. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/shelf-browse").expanduser(),
    Path("~/.shelf-browse").expanduser(),
    Path("/tmp/shelf-browse"),
]

# Database file inside the data directory.
CATALOG_DB_NAME: str = "catalog.db"

# LCC outline shipped with the package.
LCCO_TABLE_PATH: Path = Path(__file__).parent / "data" / "lcco.json"

# Browse window sizes.
DEFAULT_WIDTH: int = 7
FULL_VIEW_WIDTH: int = 11
MAX_WIDTH: int = 100

# Seconds before a document store query is aborted.
STORE_QUERY_TIMEOUT: float = 10.0

# Availability service, used by the HTTP holdings client.
HOLDINGS_SERVICE_URL: str | None = os.environ.get("SHELF_BROWSE_HOLDINGS_URL")
HOLDINGS_TIMEOUT: float = 5.0

# Collections that are only available in their own reading room.
UNIQUE_SITES: frozenset[str] = frozenset({"kluge", "cnhi"})

# Library code of Special Collections, for the Special Collections lens.
SPECIAL_COLLECTIONS_LIBRARY: str = "SPEC-COLL"

# Subclasses whose single-child chains are collapsed in the display tree
# even when the intermediate nodes come from the authoritative outline.
COLLAPSIBLE_SUBCLASSES: frozenset[str] = frozenset({"LD", "LE"})

# Three-letter subclasses that sit inside the range of a two-letter sibling.
NESTED_SUBCLASSES: frozenset[str] = frozenset({"DAW", "DJK", "KBM", "KWX"})


def resolve_data_directory() -> Path:
    """Return the first existing data directory, or the first candidate."""
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]
