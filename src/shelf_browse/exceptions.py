"""Exception hierarchy for shelf-browse."""


class ShelfBrowseError(Exception):
    """Base class for all shelf-browse errors."""


class BrowseInputError(ShelfBrowseError, ValueError):
    """A browse request was malformed (origin, width, offset or start)."""


class OriginNotFoundError(BrowseInputError, LookupError):
    """The origin document does not exist in the document store."""


class StoreError(ShelfBrowseError):
    """The document store or holdings service failed or timed out."""


class LccTableError(ShelfBrowseError):
    """The LCC classification table is malformed."""
