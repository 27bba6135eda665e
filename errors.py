"""Error types raised by spendnote operations."""

from typing import Optional


class SpendnoteError(Exception):
    """Base class for all spendnote errors."""


class ValidationError(SpendnoteError, ValueError):
    """A record or payload failed validation; nothing was applied.

    Attributes:
        index: Position of the first offending record, if known.
    """

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class MalformedPayloadError(SpendnoteError, ValueError):
    """Bulk import text could not be parsed as JSON."""


class ClassificationError(SpendnoteError):
    """A text fragment could not be turned into a transaction draft.

    Attributes:
        fragment: The fragment that failed, if known.
    """

    def __init__(self, message: str, fragment: Optional[str] = None):
        super().__init__(message)
        self.fragment = fragment


class EmptyResultError(SpendnoteError):
    """A report or export range matched no transactions."""
