"""Exception types shared across the drively core.

Parsing and state errors surface to the caller. Storage errors never leave
DocumentStore: it turns them into bool results and default documents.
"""


class ParseError(ValueError):
    """Raised when a time (HH:MM) or date (YYYY-MM-DD) string is malformed."""


class DocumentValidationError(ValueError):
    """Raised when a stored document fails the typed parse."""


class StorageIOError(OSError):
    """Raised by a file storage provider when a read/write/copy/delete fails."""


class StateError(ValueError):
    """Raised when a transition payload is rejected. State is left unchanged."""


class FreezeCapReachedError(StateError):
    """Raised when the monthly freeze-day allowance is already used up."""
