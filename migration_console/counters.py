"""Per-segment and run-wide outcome counters.

Each renderer owns an :class:`OutcomeCounters` for its current segment.
The run-wide :class:`AggregateResults` is owned by the run and shared by
every renderer attached to it, so the aggregate column of the results
table accumulates across segments and entity types.
"""

from __future__ import annotations

import threading
from enum import Enum
from typing import Generic, TypeVar

OutcomeT = TypeVar("OutcomeT", bound=Enum)


class CounterScope(Enum):
    """Which set of counts to read."""

    SEGMENT = "segment"
    AGGREGATE = "aggregate"


def ordered_outcomes(outcomes: type[OutcomeT]) -> tuple[OutcomeT, ...]:
    """Members of an outcome enumeration in display order.

    Integer-valued enumerations are ordered by value, anything else by
    definition order.
    """
    members = list(outcomes)
    if all(isinstance(member.value, int) for member in members):
        members.sort(key=lambda member: member.value)
    return tuple(members)


class AggregateResults(Generic[OutcomeT]):
    """Outcome counts accumulated over every segment of a run.

    Never reset. Mutations and snapshots are serialized by ``lock``.
    """

    def __init__(self, outcomes: type[OutcomeT]) -> None:
        self.outcomes = ordered_outcomes(outcomes)
        self.lock = threading.RLock()
        self._counts: dict[OutcomeT, int] = dict.fromkeys(self.outcomes, 0)

    def __getitem__(self, outcome: OutcomeT) -> int:
        return self._counts[outcome]

    def increment(self, outcome: OutcomeT) -> None:
        with self.lock:
            self._counts[outcome] += 1

    def snapshot(self) -> dict[OutcomeT, int]:
        with self.lock:
            return dict(self._counts)

    @property
    def total(self) -> int:
        with self.lock:
            return sum(self._counts.values())


class OutcomeCounters(Generic[OutcomeT]):
    """Counts for the current segment paired with the run aggregate."""

    def __init__(self, aggregate: AggregateResults[OutcomeT]) -> None:
        self.aggregate = aggregate
        self.outcomes = aggregate.outcomes
        self._segment: dict[OutcomeT, int] = dict.fromkeys(self.outcomes, 0)

    def reset(self) -> None:
        """Zero the per-segment counts. The aggregate is untouched."""
        with self.aggregate.lock:
            for outcome in self.outcomes:
                self._segment[outcome] = 0

    def record(self, outcome: OutcomeT) -> None:
        """Count one processed entity in both scopes.

        Raises:
            KeyError: If ``outcome`` is not a member of the enumeration.
        """
        with self.aggregate.lock:
            if outcome not in self._segment:
                raise KeyError(outcome)
            self._segment[outcome] += 1
            self.aggregate.increment(outcome)

    def get(
        self, outcome: OutcomeT, scope: CounterScope = CounterScope.SEGMENT
    ) -> int:
        if scope is CounterScope.AGGREGATE:
            return self.aggregate[outcome]
        return self._segment[outcome]

    def pairs(self) -> list[tuple[OutcomeT, int, int]]:
        """(outcome, segment count, aggregate count) in display order."""
        with self.aggregate.lock:
            return [
                (outcome, self._segment[outcome], self.aggregate[outcome])
                for outcome in self.outcomes
            ]
