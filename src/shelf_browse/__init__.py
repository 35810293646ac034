"""Virtual shelf browse: shelfkeys, LCC outline and shelf neighbor windows."""

from shelf_browse.core.browse.window import BrowseEngine
from shelf_browse.core.callnum.shelfkey import encode, make_call_number
from shelf_browse.core.lcc.outline import LccOutline, default_outline
from shelf_browse.core.status.markers import derive_markers
from shelf_browse.protocols import DocumentStoreProtocol, HoldingsServiceProtocol

__all__ = [
    "BrowseEngine",
    "DocumentStoreProtocol",
    "HoldingsServiceProtocol",
    "LccOutline",
    "default_outline",
    "derive_markers",
    "encode",
    "make_call_number",
]
