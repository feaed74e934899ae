"""Pytest fixtures for testing."""

import shutil
import subprocess
import tempfile
from pathlib import Path

import pytest

from scp_storage.scp import ScpStorage


class FakeRunner:
    """Stand-in for subprocess.run that records every command.

    Shell commands (run with capture_output) answer with the echoed exit
    code in stdout, copies answer with their return code.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.shell_exit = 0
        self.copy_exit = 0
        self.shell_stdout: str | None = None
        self.shell_returncode = 0

    def __call__(self, args, **kwargs) -> subprocess.CompletedProcess:
        self.calls.append(list(args))
        if kwargs.get("capture_output"):
            stdout = self.shell_stdout
            if stdout is None:
                stdout = f"{self.shell_exit}\n"
            return subprocess.CompletedProcess(
                args, self.shell_returncode, stdout=stdout, stderr=""
            )
        return subprocess.CompletedProcess(args, self.copy_exit, stdout=None, stderr="")

    @property
    def shell_calls(self) -> list[list[str]]:
        return [call for call in self.calls if not call[0].endswith("scp")]

    @property
    def copy_calls(self) -> list[list[str]]:
        return [call for call in self.calls if call[0].endswith("scp")]


@pytest.fixture
def fake_run(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    """Replace subprocess.run and binary lookup in the transfer module."""
    runner = FakeRunner()
    monkeypatch.setattr("scp_storage.transfer.subprocess.run", runner)
    monkeypatch.setattr(
        "scp_storage.transfer.shutil.which", lambda name: f"/usr/bin/{name}"
    )
    return runner


@pytest.fixture
def staging_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point temp file creation at a private directory."""
    directory = tmp_path / "staging"
    directory.mkdir()
    monkeypatch.setattr(tempfile, "tempdir", str(directory))
    return directory


@pytest.fixture
def cp_bin() -> str:
    """Path to cp, used as a reliable local stand-in for scp."""
    path = shutil.which("cp")
    if not path or not shutil.which("bash"):
        pytest.skip("cp and bash are required for local transfers")
    return path


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    """Root directory for a local store."""
    return tmp_path / "store"


@pytest.fixture
def local_storage(store_dir: Path, cp_bin: str) -> ScpStorage:
    """Local storage copying with cp into <store_dir>/uploads."""
    return ScpStorage(
        directory=str(store_dir),
        prefix="uploads",
        scp_bin=cp_bin,
        options=[],
    )
