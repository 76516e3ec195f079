"""
Replay recorded lifecycle events into receivers.

An event log is a JSON-lines file, one event per line::

    {"event": "segment_executing", "segment": {"index": 1, "count": 2,
        "segment_type": "migration", "entity_type": "Customer",
        "source_system": "CRM", "destination_system": "ERP"}}
    {"event": "loading"}
    {"event": "loaded", "count": 3}
    {"event": "processing"}
    {"event": "processed", "outcome": "CREATED"}
    {"event": "segment_executed"}

Blank lines and lines starting with ``#`` are ignored. Outcomes are given
by member name of the run's outcome enumeration; segment types by value
or name of :class:`SegmentType`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import fields
from pathlib import Path
from typing import Any

from migration_console.events import (
    CachePopulatedArgs,
    CachePopulatingArgs,
    DeletionProcessedArgs,
    GarbageCollectionInitializedArgs,
    GarbageCollectionInitializingArgs,
    InitializedArgs,
    InitializingArgs,
    LoadedArgs,
    LoadingArgs,
    MappingsCachedArgs,
    MappingsCachingArgs,
    MigrationEventReceiver,
    MigrationRun,
    OrphanMappingProcessedArgs,
    OrphanMappingsProcessingArgs,
    ProcessedArgs,
    ProcessingArgs,
    Segment,
    SegmentExecutedArgs,
    SegmentExecutingArgs,
    SegmentType,
)

logger = logging.getLogger(__name__)

# event name → (receiver method, argument class)
EVENTS: dict[str, tuple[str, type]] = {
    "segment_executing": ("on_segment_executing", SegmentExecutingArgs),
    "segment_executed": ("on_segment_executed", SegmentExecutedArgs),
    "initializing": ("on_initializing", InitializingArgs),
    "initialized": ("on_initialized", InitializedArgs),
    "mappings_caching": ("on_mappings_caching", MappingsCachingArgs),
    "mappings_cached": ("on_mappings_cached", MappingsCachedArgs),
    "cache_populating": ("on_cache_populating", CachePopulatingArgs),
    "cache_populated": ("on_cache_populated", CachePopulatedArgs),
    "loading": ("on_loading", LoadingArgs),
    "loaded": ("on_loaded", LoadedArgs),
    "processing": ("on_processing", ProcessingArgs),
    "processed": ("on_processed", ProcessedArgs),
    "orphan_mappings_processing": (
        "on_orphan_mappings_processing",
        OrphanMappingsProcessingArgs,
    ),
    "orphan_mapping_processed": (
        "on_orphan_mapping_processed",
        OrphanMappingProcessedArgs,
    ),
    "garbage_collection_initializing": (
        "on_garbage_collection_initializing",
        GarbageCollectionInitializingArgs,
    ),
    "garbage_collection_initialized": (
        "on_garbage_collection_initialized",
        GarbageCollectionInitializedArgs,
    ),
    "deletion_processed": ("on_deletion_processed", DeletionProcessedArgs),
}

# Events raised once per item; the demo paces these.
ITEM_EVENTS = frozenset(
    {"processed", "orphan_mapping_processed", "deletion_processed"}
)


class ReplayError(ValueError):
    """Raised when an event log entry cannot be interpreted."""


def read_events(path: Path) -> Iterator[dict[str, Any]]:
    """Yield event entries from a JSON-lines log."""
    with open(path, encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError as e:
                raise ReplayError(f"{path}:{line_number}: invalid JSON: {e}") from e
            if not isinstance(entry, dict):
                raise ReplayError(f"{path}:{line_number}: expected a JSON object")
            yield entry


def parse_segment(data: dict[str, Any]) -> Segment:
    """Build a :class:`Segment` from its JSON form."""
    try:
        segment_type = _parse_segment_type(data.get("segment_type", "migration"))
        return Segment(
            index=int(data["index"]),
            count=int(data["count"]),
            segment_type=segment_type,
            entity_type=data.get("entity_type"),
            source_system=data.get("source_system"),
            destination_system=data.get("destination_system"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ReplayError(f"Invalid segment {data!r}: {e}") from e


def _parse_segment_type(value: str) -> SegmentType:
    try:
        return SegmentType(value)
    except ValueError:
        pass
    try:
        return SegmentType[str(value).upper()]
    except KeyError:
        raise ValueError(f"unknown segment type {value!r}") from None


def parse_args(entry: dict[str, Any], run: MigrationRun) -> tuple[str, Any]:
    """Resolve an entry to (receiver method name, argument bundle)."""
    name = entry.get("event")
    if name not in EVENTS:
        raise ReplayError(f"Unknown event {name!r}")
    method, args_class = EVENTS[name]
    values = {}
    for f in fields(args_class):
        if f.name in entry:
            values[f.name] = entry[f.name]
    if "outcome" in values:
        try:
            values["outcome"] = run.outcomes[values["outcome"]]
        except KeyError:
            raise ReplayError(
                f"Unknown outcome {values['outcome']!r} for {run.outcomes.__name__}"
            ) from None
    try:
        return method, args_class(**values)
    except TypeError as e:
        raise ReplayError(f"Invalid arguments for {name!r}: {e}") from e


def dispatch_entry(
    entry: dict[str, Any],
    run: MigrationRun,
    receivers: Sequence[MigrationEventReceiver],
) -> str:
    """Deliver one entry to every receiver; returns the event name.

    ``segment_executing`` entries carry the segment, which becomes the
    run's current segment before any receiver is called.
    """
    method, args = parse_args(entry, run)
    if entry["event"] == "segment_executing":
        if "segment" not in entry:
            raise ReplayError("segment_executing requires a 'segment' object")
        run.segment = parse_segment(entry["segment"])
    for receiver in receivers:
        getattr(receiver, method)(args)
    return entry["event"]


def dispatch(
    entries: Iterable[dict[str, Any]],
    run: MigrationRun,
    receivers: Sequence[MigrationEventReceiver],
) -> int:
    """Deliver entries in order; returns the number of events dispatched."""
    count = 0
    for entry in entries:
        dispatch_entry(entry, run, receivers)
        count += 1
    logger.debug(f"Dispatched {count} events")
    return count


def replay_file(
    path: Path,
    run: MigrationRun,
    receivers: Sequence[MigrationEventReceiver],
) -> int:
    """Replay a JSON-lines event log into ``receivers``."""
    logger.info(f"Replaying events from {path}")
    return dispatch(read_events(path), run, receivers)
