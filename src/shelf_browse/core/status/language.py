"""Language and format classification for status markers."""

import re
from collections.abc import Iterable

# All the ways a language entry can state or imply the item is in English.
_ENGLISH_PATTERNS = tuple(
    re.compile(pattern, re.IGNORECASE)
    for pattern in (
        r"^English$",
        r"English(\s*,| and | \(also in\))",
        r"English (dialog|words)",
        r"(,|and|in|text in|translated into) English",
        r"^(Translated from|Translation in) ",
        r"^Closed?[\s-]+caption(ed)?$",
        r"staff notation",
    )
)
_TRANSLATED_FROM_RE = re.compile(r"\(translated from\)", re.IGNORECASE)

# Citation reference types in order of precedence.
_REFERENCE_TYPES = (
    "MUSIC", "MANSCPT", "NEWS", "THES", "MAP", "VIDEO", "SOUND",
    "ART", "GOVDOC", "JOUR", "BOOK",
)
_FORMAT_RULES: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern), ref_type)
    for pattern, ref_type in (
        (r"^Musical Score$", "MUSIC"),
        (r"^Manuscript$", "MANSCPT"),
        (r"^Newspaper$", "NEWS"),
        (r"Thesis|Dissertation", "THES"),
        (r"^(Map|Atlas|Globe)$", "MAP"),
        (r"Video|^DVD$|^Blu-Ray$", "VIDEO"),
        (r"Audio|^CD$", "SOUND"),
        (r"^Musical|Recording$", "SOUND"),
        (r"Photo|Image|Visual|Physical", "ART"),
        (r"^Government Document$", "GOVDOC"),
        (r"^Journal|Article", "JOUR"),
        (r"^Book$", "BOOK"),
    )
)


def is_english(languages: Iterable[str]) -> bool:
    """Return True if the item is (or may be assumed to be) in English."""
    languages = list(languages)
    if not languages:
        return True
    return any(p.search(lang) for lang in languages for p in _ENGLISH_PATTERNS)


def language_tooltip(languages: Iterable[str]) -> str:
    shown = [lang for lang in languages if not _TRANSLATED_FROM_RE.search(lang)]
    return "Language: " + " / ".join(shown)


def reference_type(formats: Iterable[str]) -> str:
    """Classify an item by its format facets ("SOUND", "VIDEO", "BOOK"...).

    Returns "GEN" when no format is recognized.
    """
    found: set[str] = set()
    for fmt in formats:
        for pattern, ref_type in _FORMAT_RULES:
            if pattern.search(fmt):
                found.add(ref_type)
                break
    return next((t for t in _REFERENCE_TYPES if t in found), "GEN")
