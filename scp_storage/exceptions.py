"""Exception hierarchy for scp storage."""


class ScpStorageError(Exception):
    """Base exception for all scp storage errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(ScpStorageError):
    """Raised when a required binary or setting is missing or invalid."""


class TransferError(ScpStorageError):
    """Raised when a copy command fails or an input stream cannot be staged."""


class FileNotFound(ScpStorageError, FileNotFoundError):
    """Raised when a stored file cannot be retrieved for reading."""
