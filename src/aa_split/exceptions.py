"""Custom exceptions for AA Split."""


class AaSplitError(Exception):
    """Base exception for all AA Split errors."""

    pass


class ConfigurationError(AaSplitError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidStateError(AaSplitError):
    """Raised when a bill cannot be settled or edited as requested.

    Covers an empty roster, payer or assignment ids that reference no
    participant, and editor operations on unknown orders, items or
    participants.
    """

    pass


class ReceiptParseError(AaSplitError):
    """Raised when receipt text cannot be turned into candidate items."""

    def __init__(self, message: str, raw_text: str | None = None):
        self.raw_text = raw_text
        super().__init__(message)
