"""Encode call numbers as sortable shelfkeys and decode them again.

A shelfkey is built from fixed-width fields so that plain string comparison
reproduces shelving order::

    QA76.73.C15 S63 2021  ->  "QA  0076.730000 C0.150000 S0.630000 002021"

Changing any of the widths below invalidates every stored key.
"""

import re
import string

from shelf_browse.core.callnum.lcc_number import LccNumber, normalize
from shelf_browse.models.catalog import CallNumber, ShelfKey

CLASS_LETTERS_WIDTH = 3
CLASS_NUMBER_WIDTH = 4
FRACTION_WIDTH = 6
REMAINDER_NUMBER_WIDTH = 6
REVERSE_SHELFKEY_LENGTH = 50

# Sorts after every character a shelfkey can contain.
RANGE_END_MARK = "~"

_ALPHANUMERIC = string.digits + string.ascii_uppercase
_REVERSE_TABLE = str.maketrans(
    {
        **dict(zip(_ALPHANUMERIC, reversed(_ALPHANUMERIC), strict=True)),
        ".": "{",
        "-": "|",
        " ": "}",
    }
)

_REMAINDER_DROP_RE = re.compile(r"[^A-Z0-9.\-]")
_REMAINDER_PERIOD_RE = re.compile(r"\.(?=\d)")
_DIGITS_RE = re.compile(r"\d+")


def encode(call_number: str) -> ShelfKey:
    """Return the forward and reverse shelfkeys of a call number.

    Never raises: a call number that cannot be tokenized yields
    ``ShelfKey("", "", ok=False)``.
    """
    number = LccNumber.parse(call_number)
    if number is None:
        return ShelfKey(shelfkey="", reverse_shelfkey="", ok=False)
    key = shelfkey_for(number)
    return ShelfKey(shelfkey=key, reverse_shelfkey=reverse_shelfkey(key), ok=True)


def make_call_number(raw: str) -> CallNumber:
    """Build a CallNumber with all derived forms."""
    number = LccNumber.parse(raw)
    if number is None:
        return CallNumber(
            raw=raw, normalized=normalize(raw), shelfkey="", reverse_shelfkey="",
            ok=False, lc_format=False,
        )
    key = shelfkey_for(number)
    return CallNumber(
        raw=raw,
        normalized=normalize(raw),
        shelfkey=key,
        reverse_shelfkey=reverse_shelfkey(key),
        ok=True,
        lc_format=number.lc_format,
    )


def shelfkey_for(number: LccNumber) -> str:
    return "".join(_key_parts(number))


def prefix_key(number: LccNumber) -> str:
    """Encode only the fields present in ``number``.

    Every full shelfkey of a call number that starts with these fields
    sorts at or after the prefix key and before ``prefix_key + RANGE_END_MARK``.
    """
    return "".join(_key_parts(number)[: number.field_count])


def reverse_shelfkey(shelfkey: str) -> str:
    """Map a shelfkey to a key that sorts in the opposite order."""
    reverse = shelfkey.translate(_REVERSE_TABLE)
    padding = max(1, REVERSE_SHELFKEY_LENGTH - len(reverse))
    return reverse + RANGE_END_MARK * padding


def decode(shelfkey: str) -> LccNumber | None:
    """Recover the call number components from a full shelfkey."""
    tokens = shelfkey.split()
    if len(tokens) < 4 or not tokens[0].isalpha():
        return None
    letters, class_part, cutter1, cutter2, *rest = tokens

    number, _, decimal = class_part.partition(".")
    if not number.isdigit():
        return None
    c1_letters, c1_digits = _decode_cutter(cutter1)
    c2_letters, c2_digits = _decode_cutter(cutter2)
    remainder = " ".join(rest).replace(". ", ".")
    remainder = _DIGITS_RE.sub(lambda m: str(int(m[0])), remainder)

    return LccNumber(
        class_letters=letters,
        class_number=int(number) or None,
        decimal=decimal.rstrip("0") or None,
        cutter1_letters=c1_letters,
        cutter1_digits=c1_digits,
        cutter2_letters=c2_letters,
        cutter2_digits=c2_digits,
        remainder=remainder or None,
    )


def _key_parts(number: LccNumber) -> list[str]:
    return [
        number.class_letters.ljust(CLASS_LETTERS_WIDTH),
        f" {number.class_number or 0:0{CLASS_NUMBER_WIDTH}d}",
        "." + _fraction_key(number.decimal),
        f" {number.cutter1_letters or ''}0",
        "." + _fraction_key(number.cutter1_digits),
        f" {number.cutter2_letters or ''}0",
        "." + _fraction_key(number.cutter2_digits),
        _remainder_key(number.remainder),
    ]


def _fraction_key(digits: str | None) -> str:
    return (digits or "").ljust(FRACTION_WIDTH, "0")


def _remainder_key(remainder: str | None) -> str:
    if not remainder:
        return ""
    text = _REMAINDER_DROP_RE.sub("", remainder.upper())
    text = _REMAINDER_PERIOD_RE.sub(". ", text)
    text = _DIGITS_RE.sub(lambda m: m[0].zfill(REMAINDER_NUMBER_WIDTH), text)
    return f" {text}" if text else ""


def _decode_cutter(token: str) -> tuple[str | None, str | None]:
    letters, _, digits = token.partition(".")
    # The trailing "0" marks the end of the (possibly empty) cutter letters.
    return letters[:-1] or None, digits.rstrip("0") or None
