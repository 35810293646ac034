"""In-memory LCC outline with O(depth) call number lookup.

The outline is an arena: nodes live in a tuple and refer to each other by
index. Each node covers the shelfkey interval ``[low, high]``; siblings are
ordered by ``low`` so the child containing a key is found by binary search.
Nothing is mutated after construction, so one outline can be shared freely.
"""

import re
from bisect import bisect_right
from collections.abc import Iterator
from functools import cache
from pathlib import Path

from loguru import logger

from shelf_browse import config
from shelf_browse.core.callnum.lcc_number import LccNumber
from shelf_browse.core.callnum.shelfkey import RANGE_END_MARK, prefix_key, shelfkey_for
from shelf_browse.core.lcc.reader import LccRow, LccTable, read_lcc_table
from shelf_browse.exceptions import LccTableError
from shelf_browse.models.lcc import LccNode, NodeKind

_DEPTH_NAMES = ("Root", "Classification", "Sub-classification", "Topic")
_LEADING_LETTERS_RE = re.compile(r"^[A-Z]*")


def lcc_depth_name(depth: int) -> str:
    """Label for a level of the hierarchy ("Topic", "Sub-topic"...)."""
    if 0 <= depth < len(_DEPTH_NAMES):
        return _DEPTH_NAMES[depth]
    return "Sub-topic"


def strip_parens(range_text: str) -> str:
    return range_text.replace("(", "").replace(")", "").strip()


def split_range(range_text: str) -> tuple[str, str]:
    """Split "QA75.5-76.95" into ("QA75.5", "QA76.95")."""
    start, sep, end = strip_parens(range_text).upper().partition("-")
    start = start.strip()
    end = end.strip() if sep else start
    if end and not end[0].isalpha():
        end = _LEADING_LETTERS_RE.match(start)[0] + end  # type: ignore[index]
    return start, end


class LccOutline:
    """Read-only LCC hierarchy: Root -> Class -> Subclass -> Range..."""

    def __init__(self, nodes: tuple[LccNode, ...], *, version: str) -> None:
        self.version = version
        self._nodes = nodes
        self._child_lows = tuple(
            tuple(nodes[child].low for child in node.children) for node in nodes
        )
        self._by_range: dict[tuple[NodeKind, str], int] = {}
        for node in nodes:
            self._by_range.setdefault((node.kind, node.range), node.index)

    @classmethod
    def load(cls, path: Path | None = None, *, strict: bool = True) -> "LccOutline":
        """Build the outline from a table file (the bundled one by default)."""
        return cls.from_table(read_lcc_table(path or config.LCCO_TABLE_PATH), strict=strict)

    @classmethod
    def from_table(cls, table: LccTable, *, strict: bool = True) -> "LccOutline":
        """Build the outline from parsed table rows.

        Args:
            table: Rows as returned by read_lcc_table.
            strict: Raise on range problems (backwards, stray or overlapping
                ranges) instead of logging them.

        Returns:
            The outline.

        Raises:
            LccTableError: If a bound cannot be parsed, or on range problems
                when ``strict`` is set.
        """
        index_of = {row.id: i for i, row in enumerate(table.rows)}
        children: list[list[int]] = [[] for _ in table.rows]
        for i, row in enumerate(table.rows):
            if row.parent is not None:
                children[index_of[row.parent]].append(i)

        nodes: list[LccNode] = []
        for i, row in enumerate(table.rows):
            kind = NodeKind(min(row.depth, NodeKind.RANGE))
            start, end, low, high = _bounds(row, kind)
            nodes.append(
                LccNode(
                    index=i,
                    table_id=row.id,
                    kind=kind,
                    range=row.range,
                    name=row.name,
                    ascii_name=row.ascii_name,
                    note=row.note,
                    depth=row.depth,
                    artificial=row.artificial,
                    parent=index_of[row.parent] if row.parent is not None else None,
                    children=tuple(children[i]),
                    start=start,
                    end=end,
                    low=low,
                    high=high,
                )
            )

        arena = tuple(nodes)
        problems = list(_range_problems(arena))
        if problems and strict:
            msg = "LCC table range problems:\n  " + "\n  ".join(problems)
            raise LccTableError(msg)
        for problem in problems:
            logger.warning("LCC table: {}", problem)

        logger.debug("Loaded LCC outline {} ({} nodes)", table.version, len(arena))
        return cls(arena, version=table.version)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[LccNode]:
        return iter(self._nodes)

    @property
    def root(self) -> LccNode:
        return self._nodes[0]

    def node(self, index: int) -> LccNode:
        return self._nodes[index]

    def children(self, node: LccNode) -> tuple[LccNode, ...]:
        return tuple(self._nodes[i] for i in node.children)

    def parent(self, node: LccNode) -> LccNode | None:
        return self._nodes[node.parent] if node.parent is not None else None

    def path_to(self, node: LccNode) -> tuple[LccNode, ...]:
        """Ancestors of a node from the root down, including the node."""
        path = [node]
        while path[-1].parent is not None:
            path.append(self._nodes[path[-1].parent])
        return tuple(reversed(path))

    def leaves(self) -> Iterator[LccNode]:
        return (n for n in self._nodes if n.kind is NodeKind.RANGE and n.is_leaf)

    def lookup(self, call_number: str) -> tuple[LccNode, ...]:
        """Return the path from the root to the deepest node containing a call number.

        An unparseable call number gives an empty path. A number outside
        every class gives just the root.
        """
        number = LccNumber.parse(call_number)
        if number is None:
            return ()
        return self.lookup_key(shelfkey_for(number))

    def lookup_key(self, shelfkey: str) -> tuple[LccNode, ...]:
        node = self.root
        path = [node]
        while node.children:
            # Where two sibling ranges share a boundary, the later one wins.
            pos = bisect_right(self._child_lows[node.index], shelfkey) - 1
            if pos < 0:
                break
            child = self._nodes[node.children[pos]]
            if not child.contains_key(shelfkey):
                break
            path.append(child)
            node = child
        return tuple(path)

    def tree(self, level: int, call_number: str) -> LccNode | None:
        """Return the node at a given depth of a call number's path."""
        path = self.lookup(call_number)
        return path[level] if 0 <= level < len(path) else None

    def class_tree(self, letter: str) -> LccNode | None:
        return self._find(NodeKind.CLASS, letter.strip().upper())

    def subclass_tree(self, letters: str) -> LccNode | None:
        return self._find(NodeKind.SUBCLASS, letters.strip().upper())

    def range_tree(self, range_text: str) -> LccNode | None:
        """Return the range node matching ``range_text``.

        Falls back to the deepest range node containing the start of the
        range when no node has exactly that range.
        """
        target = strip_parens(range_text).upper()
        start, _ = split_range(target)
        path = [n for n in self.lookup(start) if n.kind is NodeKind.RANGE]
        for node in path:
            if strip_parens(node.range) == target:
                return node
        return path[-1] if path else None

    def effective_name(self, node: LccNode) -> str:
        """Subject name of a node; nameless subclasses borrow their children's."""
        if node.name:
            return node.name
        if node.kind is NodeKind.SUBCLASS:
            return ". ".join(child.name for child in self.children(node) if child.name)
        return ""

    def _find(self, kind: NodeKind, range_text: str) -> LccNode | None:
        index = self._by_range.get((kind, range_text))
        return self._nodes[index] if index is not None else None


@cache
def default_outline() -> LccOutline:
    """The bundled outline, loaded on first use."""
    return LccOutline.load()


def _bounds(row: LccRow, kind: NodeKind) -> tuple[str, str, str, str]:
    """Return (start, end, low, high) for a table row."""
    if kind is NodeKind.ROOT:
        return "", "", "", RANGE_END_MARK

    if kind in (NodeKind.CLASS, NodeKind.SUBCLASS):
        letters = row.range.upper()
        number = LccNumber.parse(letters)
        if number is None or not number.is_class_only:
            msg = f"LCC node {row.id!r}: {row.range!r} is not a class"
            raise LccTableError(msg)
        if kind is NodeKind.CLASS:
            return letters, letters, letters, letters + RANGE_END_MARK
        # "QA" covers "QAA".."QAZ"; a one-letter subclass covers only itself.
        upper = number if len(letters) == 1 else LccNumber(class_letters=letters.ljust(3, "Z"))
        return letters, letters, prefix_key(number), prefix_key(upper) + RANGE_END_MARK

    default_start, default_end = split_range(row.range)
    start = row.start or default_start
    end = row.end or default_end
    first = LccNumber.parse(start)
    last = LccNumber.parse(end)
    if first is None or last is None:
        msg = f"LCC node {row.id!r}: cannot parse range {row.range!r}"
        raise LccTableError(msg)
    return start, end, prefix_key(first), prefix_key(last) + RANGE_END_MARK


def _range_problems(nodes: tuple[LccNode, ...]) -> Iterator[str]:
    for node in nodes:
        if node.low > node.high:
            yield f"{node.table_id}: backwards range {node.range!r}"
        prev: LccNode | None = None
        for child in (nodes[i] for i in node.children):
            if child.low < node.low or child.high > node.high:
                yield f"{child.table_id}: {child.range!r} is outside of {node.range!r}"
            if prev is not None and child.range not in config.NESTED_SUBCLASSES:
                if child.low <= prev.low:
                    yield f"{child.table_id}: {child.range!r} is out of order after {prev.range!r}"
                elif child.low < prev.high and not child.low.startswith(prev.high[:-1]):
                    yield f"{child.table_id}: {child.range!r} overlaps {prev.range!r}"
            prev = child
