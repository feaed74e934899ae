"""Storage backend that transfers files with scp."""

import os
import shlex
from typing import IO, Any, BinaryIO

import structlog

from scp_storage.base import StorageBackend
from scp_storage.exceptions import FileNotFound
from scp_storage.models import ScpStorageConfig
from scp_storage.paths import PathResolver
from scp_storage.staging import staged_file, write_io
from scp_storage.transfer import TransferExecutor

logger = structlog.get_logger()


class ScpStorage(StorageBackend):
    """Store files in a directory reached through scp.

    Without ssh_host the directory is local and scp copies between local
    paths; with ssh_host every shell command runs over ssh and every copy
    addresses the remote side as user@host:path.

    Example layout with directory="/var/files" and prefix="uploads":
        /var/files/
            └── uploads/
                └── 2024/ab12cd.pdf

    There is no locking and no atomic rename: concurrent uploads to the
    same identifier race, and readers may see a partially written file.
    """

    def __init__(
        self,
        config: ScpStorageConfig | None = None,
        executor: TransferExecutor | None = None,
        **kwargs: Any,
    ):
        """Initialize the storage.

        Args:
            config: Storage settings; built from kwargs when omitted
            executor: Transfer executor; built from config when omitted
            **kwargs: ScpStorageConfig fields (directory, ssh_host, host,
                prefix, options, permissions, ...)

        Raises:
            ConfigurationError: If scp (or ssh in remote mode) is not found
        """
        self.config = config or ScpStorageConfig(**kwargs)
        self.paths = PathResolver(
            self.config.directory, prefix=self.config.prefix, host=self.config.host
        )
        self.executor = executor or TransferExecutor(
            self.config.transport,
            scp_bin=self.config.scp_bin,
            options=self.config.options,
            shell=self.config.shell,
        )

    @property
    def directory(self) -> str:
        return self.config.directory

    @property
    def prefix(self) -> str | None:
        return self.config.prefix

    def upload(self, io: BinaryIO, id: str, **options: Any) -> IO[bytes]:
        """Stage the stream locally and copy it to <directory>/<prefix>/<id>.

        Permissions are set on the staged file before the copy, so the
        copied file carries them. A failing chmod propagates as OSError.

        Raises:
            TransferError: If the stream cannot be staged or the copy fails
        """
        destination = self.paths.path(id)
        with staged_file(id) as staged:
            write_io(io, staged.file)
            os.chmod(staged.path, self.config.permissions)
            self.executor.mkdir_p(destination)
            self.executor.run_copy(
                staged.path, self.executor.remote_path(destination)
            ).raise_for_status()
            logger.info("Uploaded file", id=id, path=destination)
            return staged.release()

    def download(self, id: str) -> IO[bytes] | None:
        """Copy <directory>/<prefix>/<id> into a fresh temp file.

        Missing files and transfer failures both yield None.
        """
        source = self.paths.path(id)
        with staged_file(id) as staged:
            if not self.executor.copy(self.executor.remote_path(source), staged.path):
                logger.info("Download failed", id=id, path=source)
                return None
            return staged.release()

    def open(self, id: str, **options: Any) -> IO[bytes]:
        file = self.download(id)
        if file is None:
            raise FileNotFound(f"File not found: {id}", details={"id": id})
        return file

    def exists(self, id: str) -> bool:
        return self.executor.shell_exec(f"ls -la {shlex.quote(self.paths.path(id))}")

    def url(self, id: str, **options: Any) -> str:
        return self.paths.url(id)

    def delete(self, id: str) -> None:
        path = self.paths.path(id)
        result = self.executor.run_shell(f"rm -rf {shlex.quote(path)}")
        if result.ok:
            logger.info("Deleted file", id=id, path=path)
        else:
            logger.warning("Delete failed", id=id, path=path, exit_code=result.exit_code)

    def clear(self) -> None:
        base = self.paths.base_path()
        result = self.executor.run_shell(f"rm -rf {shlex.quote(base)}/*")
        if result.ok:
            logger.info("Cleared storage", path=base)
        else:
            logger.warning("Clear failed", path=base, exit_code=result.exit_code)
