"""
Custom exception classes.

Every failure raised by the ticket table carries a stable ``code`` so callers
can react to a category of failure without matching on class names.
"""

from typing import Optional


class TicketDBError(Exception):
    """Base exception for ticket database operations."""

    code = "UnknownFailure"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.code)
        self.message = message or self.code


class UnknownError(TicketDBError):
    """Raised when an infrastructure failure has no better classification."""
    code = "UnknownError"


# Identifier failures


class IdError(TicketDBError):
    """Base class for ticket ID failures."""
    pass


class IdInvalidError(IdError):
    """Raised when the reserved invalid ticket ID is used."""
    code = "IdInvalid"


class IdGenerationFailedError(IdError):
    """Raised when no free ticket ID could be drawn."""
    code = "IdGenerationFailed"


class IdAlreadyExistsError(IdError):
    """Raised when inserting under a ticket ID that is already taken."""
    code = "IdAlreadyExists"


class IdNotFoundError(IdError):
    """Raised when a ticket ID is not in the table."""
    code = "IdNotFound"


class IdExpiredError(IdError):
    """Raised when committing a generated ticket ID after the table changed."""
    code = "IdExpired"


class IdNotScannableError(IdError):
    """Raised when scanning a ticket flagged as not scannable."""
    code = "IdNotScannable"


class EntryAlreadyExistsError(TicketDBError):
    """Raised when an equivalent entry is already in the table."""
    code = "EntryAlreadyExists"


class IntegerOverflowError(TicketDBError):
    """Raised when checked arithmetic would leave its integer width."""
    code = "IntegerOverflow"


# Validation failures


class ValidationError(TicketDBError):
    """Raised when validation fails."""

    code = "InvalidParameter"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidParameterError(ValidationError):
    """Raised when an argument has the wrong type or shape."""
    code = "InvalidParameter"


class InvalidEntryFieldError(ValidationError):
    """Raised when a grade or grade category is out of range."""
    code = "InvalidEntryField"


class InvalidStringError(ValidationError):
    """Raised when a name contains characters other than letters, spaces and dashes."""
    code = "InvalidString"


class InvalidConfigError(ValidationError):
    """Raised when a config file or environment value cannot be read."""
    code = "InvalidConfig"


# Storage failures


class StorageError(TicketDBError):
    """Raised when storage operations fail."""
    pass


class InvalidFilepathError(StorageError):
    """Raised when a database file cannot be opened."""
    code = "InvalidFilepath"


class InvalidYAMLError(StorageError):
    """Raised when a database document is malformed."""
    code = "InvalidYAML"


# Corruption


class CorruptionError(TicketDBError):
    """Base class for integrity tag mismatches."""
    pass


class CorruptedTableError(CorruptionError):
    """Raised when a corrupted entry is met while walking the table."""
    code = "CorruptedTable"


class CorruptedTableEntryError(CorruptionError):
    """Raised when a single entry that was asked for is corrupted."""
    code = "CorruptedTableEntry"
