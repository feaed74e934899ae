"""Storage backend interface."""

from abc import ABC, abstractmethod
from typing import IO, Any, BinaryIO


class StorageBackend(ABC):
    """Abstract storage backend interface.

    This interface defines the contract every storage backend exposes to
    the attachment library, whatever the transport underneath. Calls are
    synchronous and block until the underlying transfer completes.
    """

    @abstractmethod
    def upload(self, io: BinaryIO, id: str, **options: Any) -> IO[bytes]:
        """Store the contents of a byte stream under an identifier.

        Args:
            io: Readable binary stream, consumed to the end
            id: Storage identifier (e.g., "2024/ab12cd.pdf")
            **options: Backend-specific upload options

        Returns:
            Local copy of the uploaded bytes, open and rewound

        Raises:
            TransferError: If the transfer fails
        """

    @abstractmethod
    def download(self, id: str) -> IO[bytes] | None:
        """Fetch a stored file into a local temp file.

        Args:
            id: Storage identifier

        Returns:
            Open temp file, or None if the file could not be fetched
        """

    @abstractmethod
    def open(self, id: str, **options: Any) -> IO[bytes]:
        """Open a stored file for reading.

        Args:
            id: Storage identifier
            **options: Backend-specific open options

        Returns:
            Readable file handle positioned at the start

        Raises:
            FileNotFound: If the file could not be fetched
        """

    @abstractmethod
    def exists(self, id: str) -> bool:
        """Check whether a file is stored under the identifier."""

    @abstractmethod
    def delete(self, id: str) -> None:
        """Delete a stored file. Failures are not reported."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every stored file. Failures are not reported."""

    @abstractmethod
    def url(self, id: str, **options: Any) -> str:
        """Get the public URL of a stored file.

        Args:
            id: Storage identifier
            **options: Backend-specific URL options

        Returns:
            Absolute or root-relative URL
        """
