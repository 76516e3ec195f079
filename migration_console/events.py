"""
Lifecycle events raised by a migration pipeline.

The pipeline drives a run as an ordered sequence of segments. For every
step it calls the matching method of a :class:`MigrationEventReceiver`
with a read-only argument bundle. Receivers override only the events
they care about; the base class ignores everything.

Typical order for a migration segment::

    on_segment_executing
    on_initializing / on_initialized        (repeated per subsystem)
    on_mappings_caching / on_mappings_cached
    on_cache_populating / on_cache_populated
    on_loading / on_loaded
    on_processing / on_processed            (once per entity)
    on_orphan_mappings_processing
    on_orphan_mapping_processed             (once per mapping)
    on_segment_executed

A garbage collection segment replaces loading and processing with
``on_garbage_collection_initializing``, ``on_garbage_collection_initialized``
and one ``on_deletion_processed`` per deleted entity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from migration_console.counters import AggregateResults
from migration_console.terminal import Terminal


class SegmentType(Enum):
    """Kind of work a run segment performs."""

    MIGRATION = "migration"
    GARBAGE_COLLECTION = "garbage_collection"


class EntityTransactionOutcome(IntEnum):
    """Sample outcome enumeration used by the demo and replay commands.

    Pipelines supply their own enumeration; nothing in the renderer
    depends on these members.
    """

    CREATED = 1
    UPDATED = 2
    UNCHANGED = 3
    DELETED = 4
    REJECTED = 5
    FAILED = 6


@dataclass(frozen=True)
class Segment:
    """One phase of a run, as numbered by the pipeline."""

    index: int
    count: int
    segment_type: SegmentType = SegmentType.MIGRATION
    entity_type: str | None = None
    source_system: str | None = None
    destination_system: str | None = None

    @property
    def is_last(self) -> bool:
        return self.index >= self.count


@dataclass
class MigrationRun:
    """Run-scoped state shared by every receiver attached to the run.

    The pipeline sets ``segment`` before raising ``on_segment_executing``.
    ``aggregate_results`` accumulates outcome counts across all segments
    and entity types of the run. ``terminal`` is the output shared by the
    run's renderers, so one lock and one cursor position cover every
    anchored field on screen.
    """

    outcomes: type[Enum]
    segment: Segment | None = None
    terminal: Terminal | None = None
    aggregate_results: AggregateResults = field(init=False)

    def __post_init__(self) -> None:
        self.aggregate_results = AggregateResults(self.outcomes)

    def get_terminal(self) -> Terminal:
        """The run's terminal, created on first use."""
        if self.terminal is None:
            self.terminal = Terminal()
        return self.terminal


# =============================================================================
# Event arguments
# =============================================================================


@dataclass(frozen=True)
class SegmentExecutingArgs:
    pass


@dataclass(frozen=True)
class SegmentExecutedArgs:
    pass


@dataclass(frozen=True)
class InitializingArgs:
    message: str | None = None


@dataclass(frozen=True)
class InitializedArgs:
    message: str | None = None


@dataclass(frozen=True)
class MappingsCachingArgs:
    pass


@dataclass(frozen=True)
class MappingsCachedArgs:
    count: int


@dataclass(frozen=True)
class CachePopulatingArgs:
    pass


@dataclass(frozen=True)
class CachePopulatedArgs:
    count: int


@dataclass(frozen=True)
class LoadingArgs:
    pass


@dataclass(frozen=True)
class LoadedArgs:
    count: int


@dataclass(frozen=True)
class ProcessingArgs:
    entity: Any = None


@dataclass(frozen=True)
class ProcessedArgs:
    outcome: Enum
    entity: Any = None


@dataclass(frozen=True)
class OrphanMappingsProcessingArgs:
    count: int
    behavior: Any = None


@dataclass(frozen=True)
class OrphanMappingProcessedArgs:
    mapping: Any = None


@dataclass(frozen=True)
class GarbageCollectionInitializingArgs:
    pass


@dataclass(frozen=True)
class GarbageCollectionInitializedArgs:
    count: int


@dataclass(frozen=True)
class DeletionProcessedArgs:
    entity: Any = None


# =============================================================================
# Receiver interface
# =============================================================================


class MigrationEventReceiver:
    """Base class for objects notified of run lifecycle events."""

    def on_segment_executing(self, args: SegmentExecutingArgs) -> None:
        """Called when the current run segment is about to be executed."""

    def on_segment_executed(self, args: SegmentExecutedArgs) -> None:
        """Called when the current run segment finishes executing."""

    def on_initializing(self, args: InitializingArgs) -> None:
        """Called when a subsystem is about to be initialized."""

    def on_initialized(self, args: InitializedArgs) -> None:
        """Called when a subsystem has been initialized."""

    def on_mappings_caching(self, args: MappingsCachingArgs) -> None:
        """Called before identifier mappings are loaded into memory."""

    def on_mappings_cached(self, args: MappingsCachedArgs) -> None:
        """Called after identifier mappings have been loaded into memory."""

    def on_cache_populating(self, args: CachePopulatingArgs) -> None:
        """Called before the destination system entity cache is populated."""

    def on_cache_populated(self, args: CachePopulatedArgs) -> None:
        """Called after the destination system entity cache is populated."""

    def on_loading(self, args: LoadingArgs) -> None:
        """Called before entities are loaded from the source system."""

    def on_loaded(self, args: LoadedArgs) -> None:
        """Called after entities have been loaded from the source system."""

    def on_processing(self, args: ProcessingArgs) -> None:
        """Called before a source system entity is processed."""

    def on_processed(self, args: ProcessedArgs) -> None:
        """Called after a source system entity has been processed."""

    def on_orphan_mappings_processing(
        self, args: OrphanMappingsProcessingArgs
    ) -> None:
        """Called before orphan identifier mappings are processed."""

    def on_orphan_mapping_processed(self, args: OrphanMappingProcessedArgs) -> None:
        """Called after one orphan identifier mapping has been processed."""

    def on_garbage_collection_initializing(
        self, args: GarbageCollectionInitializingArgs
    ) -> None:
        """Called before entities to delete are identified."""

    def on_garbage_collection_initialized(
        self, args: GarbageCollectionInitializedArgs
    ) -> None:
        """Called once the entities to delete have been identified."""

    def on_deletion_processed(self, args: DeletionProcessedArgs) -> None:
        """Called after one destination system entity has been deleted."""
