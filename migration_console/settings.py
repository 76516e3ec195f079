"""Project settings loaded from pyproject.toml [tool.migration-console] section.

Configuration is organized as:
  [tool.migration-console]        : refresh-interval-ms, labels
  [tool.migration-console.styles] : result, progress, header

All settings support environment variable overrides (MIGRATION_CONSOLE_* prefix).
"""

import os
from functools import cache
from pathlib import Path

import tomllib

from migration_console.formatting import (
    DEFAULT_HEADER_STYLE,
    DEFAULT_PROGRESS_STYLE,
    DEFAULT_RESULT_STYLE,
    EmphasisStyles,
)


@cache
def _load_pyproject_settings() -> dict:
    """Load settings from pyproject.toml [tool.migration-console] section.

    Walks up from the working directory to find pyproject.toml.

    Returns:
        Dictionary of settings, empty dict if not found.
    """
    current = Path.cwd().resolve()
    while True:
        candidate = current / "pyproject.toml"
        if candidate.is_file():
            break
        if current == current.parent:
            return {}
        current = current.parent

    try:
        data = tomllib.loads(candidate.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return data.get("tool", {}).get("migration-console", {})


def _get_section(section: str) -> dict:
    """Get a subsection from [tool.migration-console.{section}]."""
    return _load_pyproject_settings().get(section, {})


def get_refresh_interval() -> float:
    """Minimum seconds between redraws of a live progress field.

    Priority: MIGRATION_CONSOLE_REFRESH_INTERVAL_MS env
              → refresh-interval-ms → 200.
    """
    raw = os.getenv("MIGRATION_CONSOLE_REFRESH_INTERVAL_MS")
    if raw is None:
        raw = _load_pyproject_settings().get("refresh-interval-ms", 200)
    try:
        milliseconds = int(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(
            f"Invalid refresh-interval-ms {raw!r}: expected an integer"
        ) from e
    if milliseconds < 0:
        raise ValueError(f"Invalid refresh-interval-ms {milliseconds}: must be >= 0")
    return milliseconds / 1000


def _get_style(name: str, default: str) -> str:
    if env := os.getenv(f"MIGRATION_CONSOLE_{name.upper()}_STYLE"):
        return env
    return str(_get_section("styles").get(name, default))


def get_styles() -> EmphasisStyles:
    """Emphasis styles for results, progress and header values.

    Priority per style: MIGRATION_CONSOLE_<NAME>_STYLE env
                        → [styles].<name> → default.
    """
    return EmphasisStyles(
        result=_get_style("result", DEFAULT_RESULT_STYLE),
        progress=_get_style("progress", DEFAULT_PROGRESS_STYLE),
        header=_get_style("header", DEFAULT_HEADER_STYLE),
    )


def get_labels_path() -> Path | None:
    """Optional YAML file with label overrides.

    Priority: MIGRATION_CONSOLE_LABELS env → labels → None (bundled only).
    """
    if env := os.getenv("MIGRATION_CONSOLE_LABELS"):
        return Path(env).expanduser()
    value = _load_pyproject_settings().get("labels")
    return Path(value).expanduser() if value else None


def get_rich_override() -> bool | None:
    """Explicit cursor-addressing override from MIGRATION_CONSOLE_RICH.

    Returns None when unset or not a recognised boolean.
    """
    override = os.environ.get("MIGRATION_CONSOLE_RICH", "").strip().lower()
    if override in ("0", "false", "no"):
        return False
    if override in ("1", "true", "yes"):
        return True
    return None
