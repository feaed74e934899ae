"""File storage backend that transfers files with scp, locally or over ssh."""

from scp_storage.base import StorageBackend
from scp_storage.exceptions import (
    ConfigurationError,
    FileNotFound,
    ScpStorageError,
    TransferError,
)
from scp_storage.models import (
    CommandResult,
    LocalTransport,
    ScpStorageConfig,
    SshTransport,
)
from scp_storage.paths import PathResolver
from scp_storage.scp import ScpStorage
from scp_storage.transfer import TransferExecutor

__version__ = "0.1.0"

__all__ = [
    # Contract
    "StorageBackend",
    "ScpStorage",
    # Components
    "PathResolver",
    "TransferExecutor",
    # Models
    "CommandResult",
    "LocalTransport",
    "ScpStorageConfig",
    "SshTransport",
    # Errors
    "ConfigurationError",
    "FileNotFound",
    "ScpStorageError",
    "TransferError",
]
