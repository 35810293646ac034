"""Derive status markers for shelf items from their holdings."""

from collections.abc import Collection

from shelf_browse import config
from shelf_browse.core.status.language import is_english, language_tooltip, reference_type
from shelf_browse.models.catalog import HoldingsSnapshot, Placeholder
from shelf_browse.models.status import StatusMarker, StatusMarkerSet


def _marker(key: str, css_class: str, label: str = "", tooltip: str = "") -> StatusMarker:
    return StatusMarker(key=key, css_class=css_class, label=label, tooltip=tooltip)


STATUS_MARKERS: dict[str, StatusMarker] = {
    m.key: m
    for m in (
        _marker("audio", "audio", "A", "Audio recording"),
        _marker("empty", "empty"),
        _marker("error", "error"),
        _marker("equipment", "equipment", "E", "Equipment for loan"),
        _marker("focus", "focus"),
        _marker("shadowed", "shadowed", "?", "ERROR: hidden/shadowed"),
        _marker("non_circ", "non-circ", "N", "Non-circulating - for use within the library"),
        _marker("non_english", "non-english", "L"),
        _marker("pda", "pda", "O", "Available to order"),
        _marker("reserve", "reserve", "R", "One or more copies on course reserve"),
        _marker("site_blandy", "site", "B", "Blandy Experimental Farm\n(available by request)"),
        _marker("site_kluge", "site", "K", "Kluge-Ruhe Study Center only"),
        _marker(
            "site_mt_lake", "site", "M", "Mountain Lake Biological Station\n(available by request)"
        ),
        _marker("site_cnhi", "site", "N", "Bjoring Center for Nursing Historical Inquiry only"),
        _marker("site_spec_coll", "site", "S", "Special Collections Reading Room only"),
        _marker("unavailable", "unavailable", "U", "Unavailable - all copies are in use"),
        _marker("undiscoverable", "error", "X", "ERROR: undiscoverable"),
        _marker("video", "video", "V", "Video recording"),
    )
}


def site_marker_key(library: str) -> str:
    """Marker key for a library code ("MT-LAKE" -> "site_mt_lake")."""
    return "site_" + library.strip().lower().replace("-", "_").replace(" ", "_")


class MarkerBuilder:
    """Ordered accumulator of markers and the style classes they imply."""

    def __init__(self) -> None:
        self._markers: list[StatusMarker] = []
        self._style_classes: list[str] = []

    def add(self, key: str, *, tooltip: str | None = None, restyle: bool = True) -> None:
        """Append a marker; a repeated key is ignored.

        With ``restyle=False`` the marker is shown but the item keeps its
        normal styling.
        """
        if any(m.key == key for m in self._markers):
            return
        marker = STATUS_MARKERS[key]
        if tooltip is not None:
            marker = _marker(marker.key, marker.css_class, marker.label, tooltip)
        self._markers.append(marker)
        if restyle and marker.css_class not in self._style_classes:
            self._style_classes.append(marker.css_class)

    def build(self) -> StatusMarkerSet:
        return StatusMarkerSet(markers=tuple(self._markers), style_classes=tuple(self._style_classes))


def derive_markers(
    item: HoldingsSnapshot | Placeholder,
    *,
    focus: bool = False,
    special_collections_lens: bool = False,
    workflow_overrides: Collection[str] = frozenset(),
) -> StatusMarkerSet:
    """Compute the status markers of one shelf item.

    The steps run in a fixed order and the output keeps that order:
    site markers, availability, language, item type, usage limits,
    data-integrity flags and finally focus.

    Args:
        item: Holdings of a catalog document, or a placeholder slot.
        focus: Mark the item as the currently selected tile.
        special_collections_lens: Show only the Special Collections site
            marker for items with copies there.
        workflow_overrides: Libraries whose copies are out of service.

    Returns:
        StatusMarkerSet with markers in derivation order.
    """
    builder = MarkerBuilder()

    if isinstance(item, Placeholder):
        builder.add(item.reason.value)
        return builder.build()

    availability = item.availability
    unique_site = (item.unique_site or "").lower()
    if unique_site not in config.UNIQUE_SITES:
        unique_site = ""
    online_only = False
    available_copies = 0
    available: bool | str
    if unique_site or item.shadowed or not item.discoverable:
        available = True
    elif availability is None:
        online_only = item.online_only
        available = online_only and item.has_url
    elif item.pda:
        available = "pda"
    elif availability.existing == 0:
        online_only = item.has_url
        available = online_only
    else:
        available_copies = availability.available
        available = available_copies > 0
    catalog_item = availability is not None and not online_only

    # Site markers are all-or-nothing: one unmarked library hides them all.
    site_counts: dict[str, int] = {}
    non_marked: dict[str, int] = {}
    special_status: set[str] = set()
    if catalog_item and availability is not None:
        sc_copies = availability.special_collections if special_collections_lens else 0
        if sc_copies:
            site_counts[site_marker_key(config.SPECIAL_COLLECTIONS_LIBRARY)] = sc_copies
        else:
            for library, count in availability.by_library:
                if count <= 0:
                    continue
                key = site_marker_key(library)
                if key in STATUS_MARKERS:
                    site_counts[key] = site_counts.get(key, 0) + count
                else:
                    non_marked[library] = non_marked.get(library, 0) + count
                if library in workflow_overrides:
                    special_status.add(library)
    elif unique_site:
        key = site_marker_key(unique_site)
        if key in STATUS_MARKERS:
            site_counts[key] = 0

    # Every library holding copies is out of service.
    holding = {lib for lib, count in availability.by_library if count > 0} if availability else set()
    if special_status and special_status == holding:
        available = False
    elif not non_marked and site_counts:
        for key in sorted(site_counts):
            builder.add(key)

    if available is False:
        builder.add("unavailable")
    elif isinstance(available, str):
        builder.add(available)

    if item.non_bibliographic:
        builder.add("equipment")
    elif not is_english(item.languages):
        builder.add("non_english", tooltip=language_tooltip(item.languages))

    item_type = reference_type(item.formats)
    if item_type == "SOUND":
        builder.add("audio")
    elif item_type == "VIDEO":
        builder.add("video")

    if catalog_item and availability is not None:
        circulating = availability.circulating
        if non_marked:
            circulating -= sum(site_counts.values())
        if circulating <= 0 and availability.existing > 0:
            builder.add("non_circ")

        # Reserve copies mixed with available ones: marked, not restyled.
        if availability.reserve:
            builder.add("reserve", restyle=availability.reserve >= available_copies)

    if item.shadowed:
        builder.add("shadowed")
    if not item.discoverable:
        builder.add("undiscoverable")

    if focus:
        builder.add("focus")
    return builder.build()
