"""Synthetic run used by ``migration-console demo`` to preview the display."""

from __future__ import annotations

import random
from collections.abc import Iterator
from typing import Any

from migration_console.events import EntityTransactionOutcome

# Relative frequency of each sample outcome
OUTCOME_WEIGHTS = {
    EntityTransactionOutcome.CREATED: 60,
    EntityTransactionOutcome.UPDATED: 25,
    EntityTransactionOutcome.UNCHANGED: 10,
    EntityTransactionOutcome.REJECTED: 3,
    EntityTransactionOutcome.FAILED: 2,
}

ENTITY_TYPES = ["Customer", "Order", "Invoice", "Product", "Supplier"]


def generate_run(
    segments: int = 2,
    entities: int = 500,
    seed: int | None = None,
) -> Iterator[dict[str, Any]]:
    """Yield event entries for ``segments`` migration segments and one
    garbage collection segment, in replay format."""
    rng = random.Random(seed)
    outcomes = list(OUTCOME_WEIGHTS)
    weights = list(OUTCOME_WEIGHTS.values())
    count = segments + 1

    for index in range(1, segments + 1):
        entity_type = ENTITY_TYPES[(index - 1) % len(ENTITY_TYPES)]
        yield {
            "event": "segment_executing",
            "segment": {
                "index": index,
                "count": count,
                "segment_type": "migration",
                "entity_type": entity_type,
                "source_system": "Legacy CRM",
                "destination_system": "Cloud ERP",
            },
        }
        yield {"event": "initializing", "message": "Connecting to Legacy CRM"}
        yield {"event": "initialized"}
        yield {"event": "mappings_caching"}
        yield {"event": "mappings_cached", "count": rng.randint(0, entities * 4)}
        yield {"event": "cache_populating"}
        yield {"event": "cache_populated", "count": rng.randint(1, entities)}
        yield {"event": "loading"}
        total = rng.randint(max(1, entities // 2), entities)
        yield {"event": "loaded", "count": total}
        for outcome in rng.choices(outcomes, weights=weights, k=total):
            yield {"event": "processing"}
            yield {"event": "processed", "outcome": outcome.name}
        orphans = rng.randint(0, entities // 10)
        yield {
            "event": "orphan_mappings_processing",
            "count": orphans,
            "behavior": "Delete",
        }
        for _ in range(orphans):
            yield {"event": "orphan_mapping_processed"}
        yield {"event": "segment_executed"}

    yield {
        "event": "segment_executing",
        "segment": {
            "index": count,
            "count": count,
            "segment_type": "garbage_collection",
            "entity_type": ENTITY_TYPES[0],
            "destination_system": "Cloud ERP",
        },
    }
    yield {"event": "garbage_collection_initializing"}
    deletions = rng.randint(1, max(1, entities // 5))
    yield {"event": "garbage_collection_initialized", "count": deletions}
    for _ in range(deletions):
        yield {"event": "deletion_processed"}
    yield {"event": "segment_executed"}
