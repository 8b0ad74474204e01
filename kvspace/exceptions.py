"""
Storage Exceptions

Error hierarchy raised by the storage. Every error carries a short
machine-readable code and a human message, tagged with the error source
of this system.

Only a few situations are errors at all: reads and deletes treat a
missing space or key as a normal, empty outcome.
"""

ERROR_SOURCE = "KEY_VALUE_STORAGE_SERVICE"


class StorageError(Exception):
    """
    Base exception for all storage errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        source: Error source identifier of the storage
    """

    source = ERROR_SOURCE

    def __init__(self, message: str, code: str):
        super().__init__(message)
        self.message = message
        self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class NotFoundError(StorageError):
    """
    Raised when a point mutation targets a space or key that is missing.

    Callers should treat this as an expected outcome, e.g. when racing
    against a key's natural expiry.
    """

    code = "NOT_FOUND"

    def __init__(self, message: str):
        super().__init__(message=message, code=self.code)


class SpaceNotFoundError(NotFoundError):
    """Raised when the requested space does not exist."""

    def __init__(self, space: str):
        super().__init__("space not found")
        self.space = space


class KeyNotFoundError(NotFoundError):
    """Raised when the key is missing or its entry has expired."""

    def __init__(self, space: str, key: str):
        super().__init__("key not found or expired")
        self.space = space
        self.key = key


class UnexpectedError(StorageError):
    """Raised on internal invariant violations. Not expected in normal operation."""

    code = "UNEXPECTED_ERROR"

    def __init__(self, message: str):
        super().__init__(message=message, code=self.code)
