"""LCC outline node model."""

from dataclasses import dataclass
from enum import IntEnum


class NodeKind(IntEnum):
    """Node variants; the value is the depth at which the variant first appears."""

    ROOT = 0
    CLASS = 1
    SUBCLASS = 2
    RANGE = 3


@dataclass(frozen=True)
class LccNode:
    """A node of the LCC outline arena.

    ``parent`` and ``children`` hold arena indexes rather than node objects.
    ``low``/``high`` are the shelfkey interval covered by the node.
    """

    index: int
    table_id: str
    kind: NodeKind
    range: str
    name: str
    ascii_name: str
    note: str
    depth: int
    artificial: bool
    parent: int | None
    children: tuple[int, ...]
    start: str
    end: str
    low: str
    high: str

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def contains_key(self, shelfkey: str) -> bool:
        """Return True if the shelfkey falls inside this node's interval."""
        return self.low <= shelfkey <= self.high
