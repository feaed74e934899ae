"""Executor for external copy and shell commands.

All contact with the target filesystem goes through two primitives:
running a shell command (locally or through ssh) and running scp. Only
the exit status of either is observable; command output is discarded.
"""

import posixpath
import shlex
import shutil
import subprocess

import structlog

from scp_storage.exceptions import ConfigurationError
from scp_storage.models import CommandResult, LocalTransport, SshTransport

logger = structlog.get_logger()


def resolve_binary(name: str) -> str:
    """Find an executable on PATH.

    Args:
        name: Binary name or path

    Returns:
        Absolute path to the executable

    Raises:
        ConfigurationError: If the binary cannot be found
    """
    path = shutil.which(name)
    if not path:
        raise ConfigurationError(f"{name} could not be found.", details={"binary": name})
    return path


class TransferExecutor:
    """Run scp transfers and shell commands for a storage backend.

    The transport decides where commands run: LocalTransport runs them
    here, SshTransport wraps them in an ssh invocation and prefixes
    remote paths with the endpoint.
    """

    def __init__(
        self,
        transport: LocalTransport | SshTransport | None = None,
        scp_bin: str | None = None,
        options: list[str] | None = None,
        shell: str = "bash",
    ):
        """Initialize the executor and resolve required binaries.

        Args:
            transport: Where commands run, local by default
            scp_bin: Copy binary, "scp" from PATH when unset
            options: Extra arguments placed before source and destination
            shell: Shell that runs commands on the target side

        Raises:
            ConfigurationError: If scp (or ssh in remote mode) is not found
        """
        transport = transport or LocalTransport()
        if isinstance(transport, SshTransport):
            transport = transport.model_copy(
                update={"ssh_bin": resolve_binary(transport.ssh_bin)}
            )
        self.transport = transport
        self.scp_bin = resolve_binary(scp_bin or "scp")
        self.options = list(options or [])
        self.shell = shell

    @property
    def remote(self) -> bool:
        return isinstance(self.transport, SshTransport)

    def remote_path(self, path: str) -> str:
        """Address a target-side path the way scp expects it."""
        return self.transport.remote_path(path)

    def run_shell(self, command: str) -> CommandResult:
        """Run a shell command on the target side.

        The command's own output is discarded and its exit status echoed,
        so the same parsing works for local and ssh execution.

        Args:
            command: Shell command line

        Returns:
            Result carrying the inner command's exit code
        """
        wrapped = f"{self.shell} -c {shlex.quote(command)} > /dev/null 2>&1; echo $?"
        args = self.transport.wrap_command(wrapped)
        logger.debug("Running shell command", command=command, remote=self.remote)

        completed = subprocess.run(args, capture_output=True, text=True, check=False)
        try:
            exit_code = int(completed.stdout.strip().splitlines()[-1])
        except (IndexError, ValueError):
            # ssh failed before the echo ran
            exit_code = completed.returncode or 1

        result = CommandResult(args=args, exit_code=exit_code, stderr=completed.stderr or "")
        if not result.ok:
            logger.debug(
                "Shell command failed",
                command=command,
                exit_code=exit_code,
                stderr=result.stderr.strip(),
            )
        return result

    def shell_exec(self, command: str) -> bool:
        """Run a shell command and report whether it exited zero."""
        return self.run_shell(command).ok

    def run_copy(self, source: str, destination: str) -> CommandResult:
        """Run scp from source to destination.

        Args:
            source: Source path, endpoint-prefixed if remote
            destination: Destination path, endpoint-prefixed if remote

        Returns:
            Result of the scp process
        """
        args = [self.scp_bin, *self.options, source, destination]
        logger.debug("Running copy", source=source, destination=destination)

        completed = subprocess.run(
            args, stdout=subprocess.DEVNULL, stderr=subprocess.PIPE, text=True, check=False
        )
        result = CommandResult(
            args=args, exit_code=completed.returncode, stderr=completed.stderr or ""
        )
        if not result.ok:
            logger.warning(
                "Copy failed",
                source=source,
                destination=destination,
                exit_code=result.exit_code,
                stderr=result.stderr.strip(),
            )
        return result

    def copy(self, source: str, destination: str) -> bool:
        """Run scp and report whether it exited zero."""
        return self.run_copy(source, destination).ok

    def mkdir_p(self, path: str) -> bool:
        """Create the parent directory of a target-side path.

        The result is only logged; a missing directory makes the following
        copy fail instead.
        """
        parent = posixpath.dirname(path)
        created = self.shell_exec(f"mkdir -p {shlex.quote(parent)}")
        if not created:
            logger.warning("Could not create directory", directory=parent)
        return created
