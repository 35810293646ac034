"""Display models: navigation trees and window descriptions."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TreeNode:
    """A generic navigation tree node."""

    id: str
    label: str
    title: str = ""
    depth_name: str = ""
    children: tuple["TreeNode", ...] = ()

    def as_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable form of the subtree."""
        data: dict[str, Any] = {"id": self.id, "label": self.label}
        if self.title:
            data["title"] = self.title
        if self.children:
            data["children"] = [child.as_dict() for child in self.children]
        return data


@dataclass(frozen=True)
class FrameEntry:
    """A classification label shown in a range frame."""

    range: str
    name: str | None


@dataclass(frozen=True)
class RangeFrameLevel:
    """One level of the classification context for a shelf window."""

    level: int
    indent: int
    depth_name: str
    first: FrameEntry | None
    last: FrameEntry | None


@dataclass(frozen=True)
class WindowDescription:
    """Human-readable summary of a browse window."""

    first_call_number: str | None
    last_call_number: str | None
    levels: tuple[RangeFrameLevel, ...]
    position: str
