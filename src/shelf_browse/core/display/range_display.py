"""Describe a shelf window: its call number range and classification context."""

import re
from collections.abc import Sequence

from shelf_browse.core.lcc.outline import LccOutline, lcc_depth_name, strip_parens
from shelf_browse.models.browse import BrowseWindow
from shelf_browse.models.display import FrameEntry, RangeFrameLevel, WindowDescription
from shelf_browse.models.lcc import LccNode

_JOIN_CLASS_RE = re.compile(r"^([a-z]+)\s+(\d+)", re.IGNORECASE)
_CUTTER_RE = re.compile(r"\.[a-z]\w+", re.IGNORECASE)


def call_number_parts(number: str) -> list[str]:
    """Break a call number into chunks that can be compared.

    "QA 76.73.C15 S63" -> ["QA76.73", ".C15", "S63"]
    """
    text = _JOIN_CLASS_RE.sub(r"\1\2", number.strip())
    text = _CUTTER_RE.sub(lambda m: " " + m[0], text)
    return text.split()


def differing_index(a: Sequence[str], b: Sequence[str]) -> int | None:
    """First index where two part lists differ (ignoring case), if any."""
    for index in range(min(len(a), len(b))):
        if a[index].casefold() != b[index].casefold():
            return index
    return None


def minimal_distinguishing_pair(a: str | None, b: str | None) -> tuple[str | None, str | None]:
    """Trim the ends of a call number range to the shortest distinct forms.

    Equal numbers give ``(a, None)`` to signal a single-value range. Blank
    values come back as None; if either is blank the other is unchanged.
    """
    a = a.strip() if a else None
    b = b.strip() if b else None
    if not a or not b:
        return a or None, b or None

    a_parts = call_number_parts(a)
    b_parts = call_number_parts(b)
    tail = differing_index(a_parts, b_parts)
    if tail is None:
        if len(a_parts) == len(b_parts):
            return a, None
        return a, b

    a_tail = b_tail = tail
    if tail == 0:
        # A lone class letter is too terse; show one more part.
        if len(a_parts) > 1:
            a_tail = 1
        if len(b_parts) > 1:
            b_tail = 1
    return " ".join(a_parts[: a_tail + 1]), " ".join(b_parts[: b_tail + 1])


def page_position_label(page: int) -> str:
    """Describe where a page is relative to the origin's page."""
    if page == 0:
        return "The virtual shelf is centered on the original item."
    count = abs(page)
    pages = "One page" if count == 1 else f"{count} pages"
    relative_to = "beyond" if page > 0 else "before"
    return f"{pages} {relative_to} the original item."


def range_frame(
    outline: LccOutline,
    first_path: Sequence[LccNode] | None,
    last_path: Sequence[LccNode] | None,
    *,
    first_level: int = 1,
    max_levels: int | None = None,
    allow_artificial: bool = False,
) -> tuple[RangeFrameLevel, ...]:
    """Classification levels shared by, or separating, the ends of a window.

    Each level shows the first item's node and, where it differs, the last
    item's. Once the two differ (or one path runs out) only one side is
    followed further down. Levels with nothing to show are skipped without
    using up indentation or depth naming.

    Args:
        outline: The outline the paths come from.
        first_path: LCC path of the first call number in the window.
        last_path: LCC path of the last call number in the window.
        first_level: Depth to start at (1 = class).
        max_levels: Stop after this many levels.
        allow_artificial: Show nodes that are not in the authoritative outline.

    Returns:
        The levels to display, top down.
    """
    levels: list[RangeFrameLevel] = []
    only: str | None = None
    level = max(1, first_level)
    while max_levels is None or len(levels) < max_levels:
        paths = (
            first_path if only != "last" else None,
            last_path if only != "first" else None,
        )
        nodes: list[LccNode] = []
        entries: list[FrameEntry | None] = []
        for path in paths:
            if not path or len(path) <= level:
                entries.append(None)
                continue
            nodes.append(path[level])
            entries.append(_frame_entry(outline, path[level], path[level - 1], allow_artificial))
        if not nodes:
            break

        first, last = entries
        if first == last:
            last = None
        elif first:
            only = "first"
        else:
            only = "last"

        if first or last:
            levels.append(
                RangeFrameLevel(
                    level=level,
                    indent=len(levels),
                    depth_name=lcc_depth_name(first_level + len(levels)),
                    first=first,
                    last=last,
                )
            )
        level += 1
    return tuple(levels)


def describe_window(window: BrowseWindow, outline: LccOutline) -> WindowDescription:
    """Summarize a window by its minimized call number range and LCC frame."""
    numbers = [
        doc.call_number.raw for doc in window.catalog_documents if doc.call_number.lc_format
    ]
    first_number = numbers[0] if numbers else None
    last_number = numbers[-1] if len(numbers) > 1 else None
    first_path = outline.lookup(first_number) if first_number else None
    last_path = outline.lookup(last_number) if last_number else None
    first_text, last_text = minimal_distinguishing_pair(first_number, last_number)
    return WindowDescription(
        first_call_number=first_text,
        last_call_number=last_text,
        levels=range_frame(outline, first_path, last_path),
        position=page_position_label(window.page),
    )


def _frame_entry(
    outline: LccOutline, node: LccNode, parent: LccNode, allow_artificial: bool
) -> FrameEntry | None:
    if node.artificial and not allow_artificial:
        return None
    if node.name == parent.name:
        return None
    return FrameEntry(range=strip_parens(node.range), name=outline.effective_name(node) or None)
