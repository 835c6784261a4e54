"""
Custom exceptions for the GTD agent.
"""


class GTDError(Exception):
    """Base exception for all GTD-related errors."""
    pass


class ValidationError(GTDError):
    """Raised when validation fails for a record or request."""
    pass


class NotFoundError(GTDError):
    """Raised when a requested record is not found."""
    pass


class DuplicateError(GTDError):
    """Raised when attempting to add a record whose id already exists."""
    pass


class ConfigurationError(GTDError):
    """Raised when there's a configuration or setup issue."""
    pass


class StorageError(GTDError):
    """Raised when the local object store cannot be read or written."""
    pass


class AIServiceError(GTDError):
    """Raised when the hosted AI backend fails or answers with an error."""
    pass
