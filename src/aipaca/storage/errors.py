"""Storage errors."""


class StorageError(Exception):
    """Base exception for profile, backup, and state operations."""


class NotFoundError(StorageError):
    """Raised when a profile or backup does not exist."""


class AlreadyExistsError(StorageError):
    """Raised when creating a profile would clobber an existing one."""


class InvalidInputError(StorageError):
    """Raised when a request cannot be satisfied with the given input."""


class StorageIOError(StorageError):
    """Raised when copying or removing files fails part way through."""


class StateError(StorageError):
    """Raised when the repository state record cannot be read or written."""
