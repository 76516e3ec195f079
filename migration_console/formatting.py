"""Number formatting and emphasis styles for the progress display."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_RESULT_STYLE = "yellow"
DEFAULT_PROGRESS_STYLE = "green"
DEFAULT_HEADER_STYLE = "cyan"


def format_count(count: int) -> str:
    """Format a count with thousands separators: 1,234,567"""
    return f"{count:,}"


def percentage(processed: int, total: int) -> float:
    """Percentage of ``processed`` over ``total`` rounded to two decimals.

    A zero total yields 0.0 so phases with nothing to do still render.
    """
    if total <= 0:
        return 0.0
    return round(processed * 100 / total, 2)


def format_percentage(value: float) -> str:
    """Format a percentage value: 42.50 %"""
    return f"{value:.2f} %"


@dataclass(frozen=True)
class EmphasisStyles:
    """Rich style strings used to emphasise live fields.

    ``result`` highlights nonzero outcome counts, ``progress`` the
    percentage fields and ``header`` the values of the segment header.
    """

    result: str = DEFAULT_RESULT_STYLE
    progress: str = DEFAULT_PROGRESS_STYLE
    header: str = DEFAULT_HEADER_STYLE

    def for_count(self, count: int) -> str | None:
        """Style for an outcome count; zero counts are not emphasised."""
        return self.result if count > 0 else None
