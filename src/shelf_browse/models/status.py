"""Status marker models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StatusMarker:
    """A display badge for a shelf item."""

    key: str
    css_class: str
    label: str = ""
    tooltip: str = ""


@dataclass(frozen=True)
class StatusMarkerSet:
    """Ordered markers plus the style classes to apply to the item."""

    markers: tuple[StatusMarker, ...] = ()
    style_classes: tuple[str, ...] = ()

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(m.key for m in self.markers)

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def is_restyled(self, css_class: str) -> bool:
        """Return True if the item is styled with the given class."""
        return css_class in self.style_classes
