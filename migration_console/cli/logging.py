"""CLI logging configuration with file output.

Provides ``configure_cli_logging`` which sets up file logging (and,
when requested, console logging on stderr) for CLI commands. Log files
live under ``~/.local/share/migration-console/logs/`` and are named
after the command::

    replay.log
    demo.log

Progress is drawn in place on stdout, so console logging goes to stderr
and stays off unless ``--verbose`` is given.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

# Standard log directory follows XDG convention
LOG_DIR = Path.home() / ".local" / "share" / "migration-console" / "logs"


def get_log_dir() -> Path:
    """Return the CLI log directory, creating it if needed.

    ``MIGRATION_CONSOLE_LOG_DIR`` overrides the default location.
    """
    log_dir = Path(os.getenv("MIGRATION_CONSOLE_LOG_DIR", LOG_DIR)).expanduser()
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def get_log_file(command: str) -> Path:
    """Return the log file path for a given CLI command."""
    return get_log_dir() / f"{command}.log"


def configure_cli_logging(
    command: str,
    *,
    verbose: bool = False,
    file_level: int = logging.DEBUG,
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 3,
) -> Path:
    """Configure logging for a CLI command.

    Sets up:
    - File handler: DEBUG-level rotating log at
      ``~/.local/share/migration-console/logs/<command>.log``
    - Console handler: INFO on stderr, only when ``verbose``

    Args:
        command: CLI command name (e.g., "replay", "demo")
        verbose: If True, also log INFO and above to stderr
        file_level: File log level (default: DEBUG)
        max_bytes: Max size per log file before rotation
        backup_count: Number of rotated backups to keep

    Returns:
        Path to the log file
    """
    log_file = get_log_file(command)
    root_logger = logging.getLogger("migration_console")

    # Remove handlers from earlier calls to avoid duplicates
    for handler in root_logger.handlers[:]:
        if isinstance(handler, (logging.FileHandler, RichHandler)):
            root_logger.removeHandler(handler)
            handler.close()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(file_level)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(file_handler)

    if verbose:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_path=False,
            markup=False,
        )
        console_handler.setLevel(logging.INFO)
        root_logger.addHandler(console_handler)

    # NOTSET would defer to the root logger's WARNING threshold
    if root_logger.level == logging.NOTSET or root_logger.level > file_level:
        root_logger.setLevel(file_level)

    return log_file
