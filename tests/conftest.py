"""Shared fixtures: captured consoles, a fake clock and a tiny screen model.

Renderer output is captured from a Rich console writing to ``StringIO``
with colors disabled, so the stream holds only text, newlines and the
cursor control sequences used for in-place redraws. ``render_screen``
replays that stream onto a grid to obtain what a terminal would show.
"""

from __future__ import annotations

import io
import re
from datetime import datetime, timedelta
from enum import IntEnum

import pytest
from rich.console import Console

from migration_console import settings
from migration_console.labels import LabelCatalog
from migration_console.terminal import Terminal

_CSI = re.compile(r"\x1b\[(\??)(\d*)([A-Za-z])")


class Outcome(IntEnum):
    CREATED = 1
    UPDATED = 2
    DELETED = 3
    FAILED = 4


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWallClock:
    """``datetime.now`` replacement advanced by hand."""

    def __init__(self) -> None:
        self.now = datetime(2024, 5, 1, 9, 30, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def render_screen(output: str) -> list[str]:
    """Replay captured output onto a grid and return the visible lines."""
    lines: list[list[str]] = [[]]
    row = column = 0
    i = 0
    while i < len(output):
        match = _CSI.match(output, i)
        if match:
            private, number, command = match.groups()
            n = int(number) if number else 1
            if not private:
                if command == "A":
                    row -= n
                elif command == "B":
                    row += n
                elif command == "C":
                    column += n
                elif command == "D":
                    column -= n
                elif command == "G":
                    column = n - 1
            i = match.end()
            continue
        char = output[i]
        if char == "\n":
            row += 1
            column = 0
        else:
            while len(lines) <= row:
                lines.append([])
            line = lines[row]
            while len(line) <= column:
                line.append(" ")
            line[column] = char
            column += 1
        i += 1
    while len(lines) <= row:
        lines.append([])
    return ["".join(line).rstrip() for line in lines]


def make_console(force_terminal: bool = True) -> Console:
    return Console(
        file=io.StringIO(),
        force_terminal=force_terminal,
        color_system=None,
        width=200,
        highlight=False,
    )


def output_of(terminal: Terminal) -> str:
    return terminal.console.file.getvalue()


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Isolate tests from the caller's terminal and configuration."""
    monkeypatch.setenv("TERM", "xterm-256color")
    for name in (
        "NO_COLOR",
        "CI",
        "FORCE_COLOR",
        "MIGRATION_CONSOLE_RICH",
        "MIGRATION_CONSOLE_REFRESH_INTERVAL_MS",
        "MIGRATION_CONSOLE_RESULT_STYLE",
        "MIGRATION_CONSOLE_PROGRESS_STYLE",
        "MIGRATION_CONSOLE_HEADER_STYLE",
        "MIGRATION_CONSOLE_LABELS",
    ):
        monkeypatch.delenv(name, raising=False)
    settings._load_pyproject_settings.cache_clear()
    yield
    settings._load_pyproject_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def wall_clock() -> FakeWallClock:
    return FakeWallClock()


@pytest.fixture
def terminal() -> Terminal:
    """Addressable terminal capturing its output."""
    return Terminal(console=make_console(), use_rich=True)


@pytest.fixture
def plain_terminal() -> Terminal:
    """Terminal without cursor addressing (e.g. output piped to a file)."""
    return Terminal(console=make_console(force_terminal=False), use_rich=False)


@pytest.fixture
def labels() -> LabelCatalog:
    return LabelCatalog.load()
