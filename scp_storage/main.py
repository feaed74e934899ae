"""scp storage entry point.

CLI tool for working with an scp storage directory.

Commands:
    upload       - Upload a local file under an identifier
    download     - Download a stored file to a local path
    exists       - Check whether an identifier is stored
    delete       - Delete a stored file
    clear        - Delete every stored file
    url          - Print the public URL of an identifier
    init-config  - Write a default configuration file
    validate     - Validate a configuration file
"""

import logging
import shutil
import sys
from pathlib import Path

import structlog
import typer
import yaml

from scp_storage.config import get_default_config, get_settings, get_storage, load_config
from scp_storage.exceptions import ScpStorageError
from scp_storage.scp import ScpStorage

app = typer.Typer(
    name="scp-storage",
    help="File storage over scp, local or through ssh",
    add_completion=False,
)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to configuration file (default: $SCP_STORAGE_CONFIG_PATH)",
)


def setup_logging(level: str = "INFO", log_format: str = "json") -> None:
    """Configure structured logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_format: Output format ("json" or "console")
    """
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level.upper())
    logging.getLogger().setLevel(level.upper())

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _open_storage(config_path: Path | None) -> ScpStorage:
    """Load configuration, set up logging and build the storage."""
    settings = get_settings()
    path = config_path or Path(settings.config_path)
    try:
        config = load_config(path)
        setup_logging(
            settings.log_level or config.logging.level,
            settings.log_format or config.logging.format,
        )
        return get_storage(config)
    except FileNotFoundError as e:
        typer.echo(f"Configuration file not found: {e}", err=True)
        raise typer.Exit(1) from None
    except ScpStorageError as e:
        typer.echo(f"Configuration error: {e.message}", err=True)
        raise typer.Exit(1) from None


@app.command()
def upload(
    source: Path = typer.Argument(..., help="Local file to upload"),
    id: str = typer.Argument(..., help="Storage identifier"),
    config_path: Path = ConfigOption,
) -> None:
    """Upload a local file under an identifier."""
    storage = _open_storage(config_path)
    if not source.is_file():
        typer.echo(f"Source file not found: {source}", err=True)
        raise typer.Exit(1)

    try:
        with open(source, "rb") as f:
            storage.upload(f, id).close()
    except ScpStorageError as e:
        typer.echo(f"Upload failed: {e.message}", err=True)
        raise typer.Exit(1) from None

    typer.echo(storage.url(id))


@app.command()
def download(
    id: str = typer.Argument(..., help="Storage identifier"),
    output_path: Path = typer.Argument(..., help="Where to write the file"),
    config_path: Path = ConfigOption,
) -> None:
    """Download a stored file to a local path."""
    storage = _open_storage(config_path)
    file = storage.download(id)
    if file is None:
        typer.echo(f"File not found: {id}", err=True)
        raise typer.Exit(1)

    with file, open(output_path, "wb") as out:
        shutil.copyfileobj(file, out)

    typer.echo(f"Downloaded {id} to {output_path}")


@app.command()
def exists(
    id: str = typer.Argument(..., help="Storage identifier"),
    config_path: Path = ConfigOption,
) -> None:
    """Check whether an identifier is stored.

    Exits with status 1 when it is not, or when the check itself fails.
    """
    storage = _open_storage(config_path)
    found = storage.exists(id)
    typer.echo("true" if found else "false")
    if not found:
        raise typer.Exit(1)


@app.command()
def delete(
    id: str = typer.Argument(..., help="Storage identifier"),
    config_path: Path = ConfigOption,
) -> None:
    """Delete a stored file."""
    storage = _open_storage(config_path)
    storage.delete(id)
    typer.echo(f"Deleted {id}")


@app.command()
def clear(
    config_path: Path = ConfigOption,
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Don't ask for confirmation",
    ),
) -> None:
    """Delete every stored file under the configured directory and prefix."""
    storage = _open_storage(config_path)
    base_path = storage.paths.base_path()
    if not yes:
        typer.confirm(f"Delete everything under {base_path}?", abort=True)

    storage.clear()
    typer.echo(f"Cleared {base_path}")


@app.command()
def url(
    id: str = typer.Argument(..., help="Storage identifier"),
    config_path: Path = ConfigOption,
) -> None:
    """Print the public URL of an identifier."""
    storage = _open_storage(config_path)
    typer.echo(storage.url(id))


@app.command()
def init_config(
    output_path: Path = typer.Option(
        Path("scp-storage.yaml"),
        "--output",
        "-o",
        help="Path to write configuration file",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing file",
    ),
) -> None:
    """Generate a default configuration file.

    Creates a configuration file with default settings that you can
    customize for your environment.
    """
    if output_path.exists() and not force:
        typer.echo(f"File already exists: {output_path}")
        typer.echo("Use --force to overwrite")
        raise typer.Exit(1)

    default_config = get_default_config()

    with open(output_path, "w") as f:
        yaml.dump(default_config, f, default_flow_style=False, sort_keys=False)

    typer.echo(f"Configuration written to: {output_path}")
    typer.echo("Edit the file to customize settings for your environment.")


@app.command()
def validate(
    config_path: Path = ConfigOption,
) -> None:
    """Validate the configuration file.

    Checks that the configuration file is valid and all required
    settings are present. Binaries are not looked up.
    """
    path = config_path or Path(get_settings().config_path)
    try:
        config = load_config(path)
    except FileNotFoundError as e:
        typer.echo(f"Configuration file not found: {e}")
        raise typer.Exit(1) from None
    except ScpStorageError as e:
        typer.echo(f"Configuration error: {e.message}")
        raise typer.Exit(1) from None

    storage = config.storage
    typer.echo("Configuration is valid")
    typer.echo(f"  Directory: {storage.directory}")
    typer.echo(f"  SSH host: {storage.ssh_host or '(local)'}")
    typer.echo(f"  URL host: {storage.host or '(relative)'}")
    typer.echo(f"  Prefix: {storage.prefix or '(none)'}")
    typer.echo(f"  Permissions: {storage.permissions:04o}")


if __name__ == "__main__":
    app()
