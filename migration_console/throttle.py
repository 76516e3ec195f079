"""Redraw rate limiting for live progress fields."""

from __future__ import annotations

import time
from collections.abc import Callable

DEFAULT_REFRESH_INTERVAL = 0.2  # seconds


def should_redraw(
    last_redraw: float,
    now: float,
    processed: int,
    total: int,
    interval: float = DEFAULT_REFRESH_INTERVAL,
) -> bool:
    """Return True when a progress field may be repainted.

    Repaints are allowed once ``interval`` seconds have passed since the
    last one, and always when ``processed`` has reached ``total`` so the
    final value on screen is exact.

    Elapsed time is compared in whole milliseconds, so float drift in
    the timestamps cannot refuse a redraw at exactly ``interval``.
    """
    if processed == total:
        return True
    return round((now - last_redraw) * 1000) >= round(interval * 1000)


class RedrawThrottle:
    """Clocked wrapper around :func:`should_redraw`.

    Usage::

        throttle = RedrawThrottle()
        throttle.start()
        for item in items:
            processed += 1
            if throttle.poll(processed, total):
                redraw()
    """

    def __init__(
        self,
        interval: float = DEFAULT_REFRESH_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval = interval
        self._clock = clock
        self._last_redraw = clock()

    @property
    def last_redraw(self) -> float:
        return self._last_redraw

    def start(self) -> None:
        """Restart the interval from now."""
        self._last_redraw = self._clock()

    def mark(self) -> None:
        """Record that a redraw just happened."""
        self._last_redraw = self._clock()

    def ready(self, processed: int, total: int) -> bool:
        """Check whether a redraw is allowed without recording one."""
        return should_redraw(
            self._last_redraw, self._clock(), processed, total, self.interval
        )

    def poll(self, processed: int, total: int) -> bool:
        """Check and, when allowed, record the redraw in one step."""
        if self.ready(processed, total):
            self.mark()
            return True
        return False
