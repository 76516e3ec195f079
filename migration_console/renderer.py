"""
Live console rendering of migration run progress.

:class:`ConsoleProgressRenderer` receives the lifecycle events of a run
and writes a running log to the terminal. Numeric fields that change
while a phase is running (the results table, migration progress, orphan
mapping progress and deletion progress) are written once as labels with
an anchor and then redrawn in place, at most once per refresh interval
and always when a phase completes.

Layout of a migration segment::

    Segment 1 of 2
      Start time: 2024-05-01T09:30:00.123456
      Type: Migration
      Source system: CRM
      Destination system: ERP
      Entity type: Customer

    Loading source system entities ... 1,250 entities loaded.

    Created: 1,180 ( 2,410 )
    Updated: 0 ( 37 )
    Unchanged:
    Failed: 70 ( 70 )

    Migration progress: 100.00 %
    Segment duration: 12.345 s

The number before the parentheses is the count for this segment, the
number inside is the aggregate over the run.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from migration_console import settings
from migration_console.counters import OutcomeCounters
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
from migration_console.formatting import (
    EmphasisStyles,
    format_count,
    format_percentage,
    percentage,
)
from migration_console.labels import LabelCatalog
from migration_console.terminal import Anchor, Terminal
from migration_console.throttle import RedrawThrottle

logger = logging.getLogger(__name__)

SEGMENT_SEPARATOR = " --- "


class RendererState(Enum):
    """Phase of the segment the renderer last heard about."""

    IDLE = "idle"
    SEGMENT_STARTING = "segment_starting"
    INITIALIZING = "initializing"
    LOADING = "loading"
    CACHING = "caching"
    PROCESSING = "processing"
    ORPHAN_MAPPING_PROCESSING = "orphan_mapping_processing"
    GARBAGE_COLLECTION_INITIALIZING = "garbage_collection_initializing"
    DELETING = "deleting"
    SEGMENT_FINISHED = "segment_finished"


@dataclass
class ProgressTrack:
    """Total/processed pair behind one percentage field."""

    total: int = 0
    processed: int = 0
    anchor: Anchor | None = None

    def reset(self, total: int = 0) -> None:
        self.total = total
        self.processed = 0
        self.anchor = None

    @property
    def percentage(self) -> float:
        return percentage(self.processed, self.total)

    @property
    def complete(self) -> bool:
        return self.processed == self.total


class ConsoleProgressRenderer(MigrationEventReceiver):
    """Render run lifecycle events to the terminal with in-place updates.

    One renderer handles one entity type. Renderers created for the same
    :class:`MigrationRun` share its aggregate results, so the aggregate
    column reflects every segment of the run.

    Args:
        run: Run-scoped state (current segment and aggregate results).
        terminal: Output terminal. Defaults to the run's shared terminal.
        labels: Display labels. Defaults to the bundled labels merged with
            the configured override file.
        styles: Emphasis styles. Defaults to configured styles.
        throttle: Redraw throttle. Defaults to the configured interval.
        now: Wall clock used for segment timestamps and durations.
    """

    def __init__(
        self,
        run: MigrationRun,
        terminal: Terminal | None = None,
        labels: LabelCatalog | None = None,
        styles: EmphasisStyles | None = None,
        throttle: RedrawThrottle | None = None,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.run = run
        self.terminal = terminal or run.get_terminal()
        self.labels = labels or LabelCatalog.load(settings.get_labels_path())
        self.styles = styles or settings.get_styles()
        self.throttle = throttle or RedrawThrottle(
            interval=settings.get_refresh_interval()
        )
        self._now = now

        self.counters = OutcomeCounters(run.aggregate_results)
        self.migration = ProgressTrack()
        self.orphan_mappings = ProgressTrack()
        self.deletion = ProgressTrack()
        self.state = RendererState.IDLE

        self._result_anchors: dict[Enum, Anchor] | None = None
        self._segment_started: datetime | None = None
        self._newline_owed = False

    @property
    def segment(self) -> Segment:
        """The run's current segment."""
        if self.run.segment is None:
            raise RuntimeError("Run has no current segment")
        return self.run.segment

    # =========================================================================
    # Segment lifecycle
    # =========================================================================

    def on_segment_executing(self, args: SegmentExecutingArgs) -> None:
        segment = self.segment
        with self.terminal.lock:
            self.state = RendererState.SEGMENT_STARTING
            self._reset_segment()
            self._segment_started = self._now()
            self.terminal.write_line()
            self.terminal.write_line(
                self.labels.format(
                    "SegmentExecuting", index=segment.index, count=segment.count
                )
            )
            self._print_header_field(
                "SegmentStartTime", self._segment_started.isoformat()
            )
            self._print_header_field("Type", self.labels.label(segment.segment_type))
            if segment.source_system is not None:
                self._print_header_field("SourceSystem", segment.source_system)
            if segment.destination_system is not None:
                self._print_header_field(
                    "DestinationSystem", segment.destination_system
                )
            if segment.entity_type is not None:
                self._print_header_field("EntityType", segment.entity_type)
            self.terminal.write_line()
        logger.debug(
            f"Segment {segment.index}/{segment.count} started "
            f"({segment.segment_type.value}, {segment.entity_type})"
        )

    def on_segment_executed(self, args: SegmentExecutedArgs) -> None:
        segment = self.segment
        finished = self._now()
        elapsed = (
            (finished - self._segment_started).total_seconds()
            if self._segment_started
            else 0.0
        )
        with self.terminal.lock:
            if segment.segment_type is SegmentType.MIGRATION:
                self.migration.processed = self.migration.total
                if self.migration.total > 0:
                    self._print_results()
            self.terminal.write_line(
                self.labels.format("SegmentDuration", seconds=elapsed)
            )
            self.terminal.write_line()
            if not segment.is_last:
                self.terminal.write_line(SEGMENT_SEPARATOR)
            self.state = RendererState.SEGMENT_FINISHED
        logger.debug(
            f"Segment {segment.index}/{segment.count} finished in {elapsed:.3f}s"
        )

    # =========================================================================
    # Initialization, caching and loading
    # =========================================================================

    def on_initializing(self, args: InitializingArgs) -> None:
        self.state = RendererState.INITIALIZING
        if args.message is not None:
            self.terminal.write(f"{args.message} ... ")
            self._newline_owed = True

    def on_initialized(self, args: InitializedArgs) -> None:
        self.state = RendererState.INITIALIZING
        if args.message is not None:
            self.terminal.write_line(args.message)
        elif self._newline_owed:
            self.terminal.write_line()
        self._newline_owed = False

    def on_mappings_caching(self, args: MappingsCachingArgs) -> None:
        self.state = RendererState.CACHING
        self.terminal.write(self.labels.label("LoadingEntityIdentifierMappings"))

    def on_mappings_cached(self, args: MappingsCachedArgs) -> None:
        self.state = RendererState.CACHING
        self._print_count_outcome(
            args.count,
            "EntityIdentifierMappingLoaded",
            "EntityIdentifierMappingsLoadedFormat",
        )

    def on_cache_populating(self, args: CachePopulatingArgs) -> None:
        self.state = RendererState.CACHING
        self.terminal.write(self.labels.label("CachingDestinationSystemEntities"))

    def on_cache_populated(self, args: CachePopulatedArgs) -> None:
        self.state = RendererState.CACHING
        self._print_count_outcome(
            args.count,
            "DestinationSystemEntityCached",
            "DestinationSystemEntitiesCachedFormat",
        )

    def on_loading(self, args: LoadingArgs) -> None:
        self.state = RendererState.LOADING
        self.terminal.write(self.labels.label("Loading"))

    def on_loaded(self, args: LoadedArgs) -> None:
        self.state = RendererState.LOADING
        self.migration.reset(total=args.count)
        self._print_count_outcome(args.count, "EntityLoaded", "EntitiesLoadedFormat")
        logger.debug(f"{args.count} entities loaded")

    # =========================================================================
    # Entity processing
    # =========================================================================

    def on_processing(self, args: ProcessingArgs) -> None:
        self.state = RendererState.PROCESSING
        if self._result_anchors is not None:
            return
        with self.terminal.lock:
            self._print_results_table_labels()
            self._print_migration_progress_label()
            self._print_results()
            self.throttle.start()

    def on_processed(self, args: ProcessedArgs) -> None:
        self.state = RendererState.PROCESSING
        with self.terminal.lock:
            self.counters.record(args.outcome)
            self.migration.processed += 1
            if self.throttle.poll(self.migration.processed, self.migration.total):
                self._print_results()

    # =========================================================================
    # Orphan mappings
    # =========================================================================

    def on_orphan_mappings_processing(
        self, args: OrphanMappingsProcessingArgs
    ) -> None:
        self.state = RendererState.ORPHAN_MAPPING_PROCESSING
        with self.terminal.lock:
            self.orphan_mappings.reset(total=args.count)
            self.throttle.start()
            self.terminal.write(
                self.labels.orphan_mappings(args.behavior, args.count)
            )
            self.orphan_mappings.anchor = self.terminal.capture()
            self.terminal.write_line()
            self._print_progress(self.orphan_mappings)
        logger.debug(f"Processing {args.count} orphan mappings ({args.behavior})")

    def on_orphan_mapping_processed(self, args: OrphanMappingProcessedArgs) -> None:
        self.state = RendererState.ORPHAN_MAPPING_PROCESSING
        with self.terminal.lock:
            self.orphan_mappings.processed += 1
            track = self.orphan_mappings
            if self.throttle.poll(track.processed, track.total):
                self._print_progress(track)

    # =========================================================================
    # Garbage collection
    # =========================================================================

    def on_garbage_collection_initializing(
        self, args: GarbageCollectionInitializingArgs
    ) -> None:
        self.state = RendererState.GARBAGE_COLLECTION_INITIALIZING
        self.terminal.write(self.labels.label("IdentifyingEntitiesToDelete"))

    def on_garbage_collection_initialized(
        self, args: GarbageCollectionInitializedArgs
    ) -> None:
        self.state = (
            RendererState.DELETING
            if args.count > 0
            else RendererState.GARBAGE_COLLECTION_INITIALIZING
        )
        with self.terminal.lock:
            self.deletion.reset(total=args.count)
            self.throttle.start()
            self._print_count_outcome(
                args.count, "EntityIdentified", "EntitiesIdentifiedFormat"
            )
            if args.count > 0:
                self.terminal.write_line()
                self.terminal.write(f"{self.labels.label('DeletionProgress')}: ")
                self.deletion.anchor = self.terminal.capture()
                self.terminal.write_line()
                self._print_progress(self.deletion)
        logger.debug(f"{args.count} entities identified for deletion")

    def on_deletion_processed(self, args: DeletionProcessedArgs) -> None:
        self.state = RendererState.DELETING
        with self.terminal.lock:
            self.deletion.processed += 1
            if self.throttle.poll(self.deletion.processed, self.deletion.total):
                self._print_progress(self.deletion)

    # =========================================================================
    # Drawing
    # =========================================================================

    def _reset_segment(self) -> None:
        self.counters.reset()
        self.migration.reset()
        self.orphan_mappings.reset()
        self.deletion.reset()
        self._result_anchors = None
        self._newline_owed = False

    def _print_header_field(self, key: str, value: str) -> None:
        self.terminal.write(f"  {self.labels.label(key)}: ")
        self.terminal.write_line(value, style=self.styles.header)

    def _print_count_outcome(
        self, count: int, singular_key: str, plural_key: str
    ) -> None:
        self.terminal.write_line(
            self.labels.count_message(count, singular_key, plural_key)
        )

    def _print_results_table_labels(self) -> None:
        self.terminal.write_line()
        self._result_anchors = {}
        for outcome in self.counters.outcomes:
            self.terminal.write(f"{self.labels.label(outcome)}: ")
            self._result_anchors[outcome] = self.terminal.capture()
            self.terminal.write_line()
        self.terminal.write_line()

    def _print_migration_progress_label(self) -> None:
        self.terminal.write(f"{self.labels.label('MigrationProgress')}: ")
        self.migration.anchor = self.terminal.capture()
        self.terminal.write_line()

    def _print_results(self) -> None:
        if self._result_anchors is None:
            return
        for outcome, segment_count, aggregate_count in self.counters.pairs():
            if segment_count == 0 and aggregate_count == 0:
                continue
            anchor = self._result_anchors[outcome]
            anchor.write(
                format_count(segment_count),
                style=self.styles.for_count(segment_count),
            )
            anchor.write(" ( ")
            anchor.write(
                format_count(aggregate_count),
                style=self.styles.for_count(aggregate_count),
            )
            anchor.write_and_reset(" ) ")
        self._print_progress(self.migration)

    def _print_progress(self, track: ProgressTrack) -> None:
        if track.anchor is None:
            return
        track.anchor.write_and_reset(
            format_percentage(track.percentage), style=self.styles.progress
        )
