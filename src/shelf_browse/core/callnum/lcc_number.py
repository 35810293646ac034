"""Parse call numbers into Library of Congress components."""

import re
from dataclasses import dataclass

MAX_CLASS_NUMBER = 9999
MAX_DECIMAL_DIGITS = 4

# A second cutter made only of digits is a year when it is this long.
YEAR_DIGITS = 4

_LOCATION_PREFIX_RE = re.compile(r"^[^/\s]*/")
_ZERO_PADDING_RE = re.compile(r"\s+0+(?=\d)")
_SPLIT_CLASS_RE = re.compile(r"^([A-Z]+)\s+(\d)")
_WHITESPACE_RE = re.compile(r"\s+")

_CLASS_RE = re.compile(r"^([A-Z]{1,3})$")
_NUMBER_RE = re.compile(
    r"""^
    ([A-Z]{1,3})\s*             # class letters
    (\d*)\s*                    # class number
    \.?(\d*)\s*                 # decimal fraction
    \.?\s*([A-Z]*)(\d*)\s*      # first cutter
    \.?\s*([A-Z]*)(\d*)\s*      # second cutter
    (.*)$                       # volume, year, copy...
    """,
    re.VERBOSE,
)

_NON_LC_LETTERS_RE = re.compile(r"^(MSS|[IOWXY])")
_SUDOC_RE = re.compile(r"^:([A-Z]+-*)?\d+")


@dataclass(frozen=True)
class LccNumber:
    """The components of an LC-style call number.

    Fraction-like fields (decimal and cutter digits) are kept as digit
    strings without trailing zeros so that "05" and "5" stay distinct.
    """

    class_letters: str
    class_number: int | None = None
    decimal: str | None = None
    cutter1_letters: str | None = None
    cutter1_digits: str | None = None
    cutter2_letters: str | None = None
    cutter2_digits: str | None = None
    remainder: str | None = None

    @classmethod
    def parse(cls, call_number: str) -> "LccNumber | None":
        """Parse a call number, returning None if it has no LC structure."""
        text = normalize(call_number)
        if not text:
            return None

        match = _CLASS_RE.match(text)
        if match:
            return cls(class_letters=match[1])

        match = _NUMBER_RE.match(text)
        if match is None:
            return None

        letters, number, decimal, c1_letters, c1_digits, c2_letters, c2_digits, rest = (
            match.groups()
        )
        if not number and not decimal:
            return None
        remainder = rest.strip()

        # "V.1" or a bare year after the first cutter is not a cutter.
        if c2_letters and not c2_digits:
            remainder = c2_letters + remainder
            c2_letters = ""
        elif not c2_letters and len(c2_digits) >= YEAR_DIGITS:
            remainder = c2_digits + (" " + remainder if remainder else "")
            c2_digits = ""

        return cls(
            class_letters=letters,
            class_number=int(number) if number else None,
            decimal=_fraction(decimal),
            cutter1_letters=c1_letters or None,
            cutter1_digits=_fraction(c1_digits),
            cutter2_letters=c2_letters or None,
            cutter2_digits=_fraction(c2_digits),
            remainder=remainder or None,
        )

    @property
    def fields(self) -> tuple[str | int | None, ...]:
        return (
            self.class_letters,
            self.class_number,
            self.decimal,
            self.cutter1_letters,
            self.cutter1_digits,
            self.cutter2_letters,
            self.cutter2_digits,
            self.remainder,
        )

    @property
    def field_count(self) -> int:
        """Number of fields up to and including the last one present."""
        fields = self.fields
        count = len(fields)
        while count > 1 and fields[count - 1] is None:
            count -= 1
        return count

    @property
    def is_class_only(self) -> bool:
        return self.field_count == 1

    @property
    def lc_format(self) -> bool:
        """Return True if this is a genuine Library of Congress call number."""
        if _NON_LC_LETTERS_RE.match(self.class_letters):
            return False
        if self.class_number is None and self.decimal is None:
            return False
        if self.class_number is not None and self.class_number > MAX_CLASS_NUMBER:
            return False
        if self.decimal is not None and len(self.decimal) > MAX_DECIMAL_DIGITS:
            return False
        return not (self.remainder and _SUDOC_RE.match(self.remainder))

    def __str__(self) -> str:
        text = self.class_letters
        if self.class_number is not None:
            text += str(self.class_number)
        if self.decimal:
            text += f".{self.decimal}"
        if self.cutter1_letters or self.cutter1_digits:
            text += f" .{self.cutter1_letters or ''}{self.cutter1_digits or ''}"
        if self.cutter2_letters or self.cutter2_digits:
            text += f" {self.cutter2_letters or ''}{self.cutter2_digits or ''}"
        if self.remainder:
            text += f" {self.remainder}"
        return text


def normalize(call_number: str) -> str:
    """Clean up a call number before parsing.

    Drops a location prefix ("ALD/HB501 .P41"), zero padding left over
    from partial shelfkeys and the space in "QA 76".
    """
    text = call_number.strip().upper()
    text = _LOCATION_PREFIX_RE.sub("", text)
    text = _ZERO_PADDING_RE.sub(" ", text)
    text = _SPLIT_CLASS_RE.sub(r"\1\2", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def _fraction(digits: str) -> str | None:
    return digits.rstrip("0") or None
