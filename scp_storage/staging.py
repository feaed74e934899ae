"""Local temporary files used as the buffer for every transfer."""

import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import PurePosixPath
from typing import IO, BinaryIO

import structlog

from scp_storage.exceptions import TransferError

logger = structlog.get_logger()

TEMPFILE_PREFIX = "scp-storage-"


def create_tempfile(identifier: str) -> IO[bytes]:
    """Create a binary temp file named after the identifier's extension.

    The file is deleted when the returned handle is closed.

    Args:
        identifier: Storage identifier, only its extension is used

    Returns:
        Open temp file handle in w+b mode
    """
    return tempfile.NamedTemporaryFile(
        mode="w+b",
        prefix=TEMPFILE_PREFIX,
        suffix=PurePosixPath(identifier).suffix,
    )


def write_io(io: BinaryIO, tmp: IO[bytes]) -> None:
    """Copy an input byte stream into a temp file and rewind it.

    Args:
        io: Readable binary stream, consumed to the end
        tmp: Temp file from create_tempfile

    Raises:
        TransferError: If the stream cannot be read to the end
    """
    try:
        shutil.copyfileobj(io, tmp)
        tmp.flush()
    except (OSError, ValueError, TypeError) as e:
        raise TransferError(f"Failed to stage input stream: {e}") from e
    tmp.seek(0)


class StagedFile:
    """A temp file owned by one operation until it is released."""

    def __init__(self, file: IO[bytes]):
        self.file = file
        self.released = False

    @property
    def path(self) -> str:
        return self.file.name

    def release(self) -> IO[bytes]:
        """Hand the file over to the caller, who becomes responsible for closing it."""
        self.released = True
        self.file.seek(0)
        return self.file


@contextmanager
def staged_file(identifier: str) -> Iterator[StagedFile]:
    """Yield a staged temp file, removing it on exit unless released."""
    staged = StagedFile(create_tempfile(identifier))
    try:
        yield staged
    finally:
        if not staged.released:
            logger.debug("Removing staged file", path=staged.path)
            staged.file.close()
