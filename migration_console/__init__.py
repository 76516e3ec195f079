"""Live terminal progress reporting for data migration runs."""

from migration_console.counters import (
    AggregateResults,
    CounterScope,
    OutcomeCounters,
)
from migration_console.events import (
    MigrationEventReceiver,
    MigrationRun,
    Segment,
    SegmentType,
)
from migration_console.labels import LabelCatalog
from migration_console.renderer import ConsoleProgressRenderer, RendererState
from migration_console.terminal import Anchor, Terminal
from migration_console.throttle import RedrawThrottle, should_redraw

__version__ = "0.1.0"

__all__ = [
    "AggregateResults",
    "Anchor",
    "ConsoleProgressRenderer",
    "CounterScope",
    "LabelCatalog",
    "MigrationEventReceiver",
    "MigrationRun",
    "OutcomeCounters",
    "RedrawThrottle",
    "RendererState",
    "Segment",
    "SegmentType",
    "Terminal",
    "should_redraw",
    "__version__",
]
