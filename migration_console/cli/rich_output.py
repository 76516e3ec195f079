"""Automatic rich output detection for the console renderer.

Centralizes the decision of whether anchored fields are redrawn in place
(cursor addressing) or written sequentially.

Detection priority:
1. ``MIGRATION_CONSOLE_RICH`` env var: explicit override (``0``/``false``/``no``
   to disable, ``1``/``true``/``yes`` to force enable)
2. ``NO_COLOR`` env var: standard convention, disables rich
3. ``CI`` env var: GitHub Actions / CI, disables rich
4. ``stdout.isatty()``: false in pipes, redirects, cron, disables rich
"""

from __future__ import annotations

import os
import sys

from migration_console.settings import get_rich_override


def should_use_rich() -> bool:
    """Determine whether to redraw progress fields in place.

    Returns True when the terminal supports cursor addressing. Returns
    False for CI, pipes, redirected output, non-TTY, or when explicitly
    disabled.
    """
    # 1. Explicit override via env var
    override = get_rich_override()
    if override is not None:
        return override

    # 2. NO_COLOR convention (https://no-color.org/)
    if os.environ.get("NO_COLOR") is not None:
        return False

    # 3. CI environment
    if os.environ.get("CI"):
        return False

    # 4. TTY check, pipes, redirects, cron all fail this
    try:
        if not sys.stdout.isatty():
            return False
    except (AttributeError, ValueError):
        return False

    return True
