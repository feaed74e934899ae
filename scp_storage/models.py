"""Pydantic models for scp storage."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scp_storage.exceptions import TransferError


class LocalTransport(BaseModel):
    """Run commands and copies on this machine."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["local"] = "local"

    def wrap_command(self, command: str) -> list[str]:
        return ["sh", "-c", command]

    def remote_path(self, path: str) -> str:
        return path


class SshTransport(BaseModel):
    """Run commands through ssh and address files as endpoint:path."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ssh"] = "ssh"
    endpoint: str  # user@hostname
    ssh_bin: str = "ssh"

    def wrap_command(self, command: str) -> list[str]:
        return [self.ssh_bin, self.endpoint, command]

    def remote_path(self, path: str) -> str:
        return f"{self.endpoint}:{path}"


class CommandResult(BaseModel):
    """Outcome of one external command."""

    args: list[str]
    exit_code: int
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def raise_for_status(self) -> None:
        """Raise TransferError if the command exited non-zero."""
        if not self.ok:
            raise TransferError(
                f"Command exited with status {self.exit_code}: {' '.join(self.args)}",
                details={"exit_code": str(self.exit_code), "stderr": self.stderr},
            )


class ScpStorageConfig(BaseModel):
    """Settings for an scp storage backend.

    Attributes:
        directory: Path where files are transferred to
        ssh_host: Optional user@hostname for remote transfers over ssh
        host: URL host override, e.g. a CDN host like //abc123.cloudfront.net
        prefix: Directory relative to `directory` where files are stored,
            also included in the URL
        options: Extra arguments passed to scp
        permissions: Mode bits set on uploaded files
        scp_bin: Explicit copy binary, looked up on PATH when unset
        ssh_bin: Remote shell binary used in ssh mode
        shell: Shell that runs commands on the target side
    """

    model_config = ConfigDict(frozen=True)

    directory: str
    ssh_host: str | None = None
    host: str | None = None
    prefix: str | None = None
    options: list[str] = Field(default_factory=lambda: ["-q"])
    permissions: int = 0o600
    scp_bin: str | None = None
    ssh_bin: str = "ssh"
    shell: str = "bash"

    @field_validator("directory")
    @classmethod
    def _strip_directory(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("host", "prefix")
    @classmethod
    def _strip_trailing_separator(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.rstrip("/")

    @field_validator("permissions", mode="before")
    @classmethod
    def _parse_octal(cls, value: int | str) -> int:
        # "0644" in YAML or env vars means octal
        if isinstance(value, str):
            return int(value, 8)
        return value

    @property
    def transport(self) -> LocalTransport | SshTransport:
        if self.ssh_host:
            return SshTransport(endpoint=self.ssh_host, ssh_bin=self.ssh_bin)
        return LocalTransport()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class Config(BaseModel):
    """Full configuration file contents."""

    storage: ScpStorageConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
