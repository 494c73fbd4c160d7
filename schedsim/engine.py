"""
Discrete-timestep simulation engine for the preemptive schedulers.

Every timestep is one unit of CPU time. At each step a SelectionStrategy
picks one eligible process (or none, which makes the step idle). The engine
handles everything else: remaining-work bookkeeping, Gantt slices and
completion rows.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from .metrics import append_slice, build_row
from .models import Process, ResultRow, SimulationState, TimeSlice

logger = logging.getLogger(__name__)


class SelectionStrategy(ABC):
    """
    Ordering over eligible processes. The lowest key wins; on equal keys the
    process that comes first in input order wins.
    """

    name: str = ""

    @abstractmethod
    def key(self, state: SimulationState) -> Tuple[int, ...]:
        ...

    def select(self, states: Sequence[SimulationState], time: int) -> Optional[SimulationState]:
        eligible = [s for s in states if s.eligible(time)]
        if not eligible:
            return None
        # min() keeps the first of several equal keys, i.e. the lowest index.
        return min(eligible, key=self.key)


class ShortestRemainingBurst(SelectionStrategy):
    name = "shortest-remaining-burst"

    def key(self, state: SimulationState) -> Tuple[int, ...]:
        return (state.remaining,)


class PriorityThenShortestRemainingBurst(SelectionStrategy):
    name = "priority-then-shortest-remaining-burst"

    def key(self, state: SimulationState) -> Tuple[int, ...]:
        return (state.process.priority, state.remaining)


def simulate(
    processes: Sequence[Process],
    strategy: SelectionStrategy,
) -> Tuple[List[ResultRow], List[TimeSlice]]:
    """
    Run the processes to completion under the given strategy.

    Returns one row per process, in input order, and the merged timeline.
    """
    states = [SimulationState.for_process(i, p) for i, p in enumerate(processes)]
    rows: List[Optional[ResultRow]] = [None] * len(states)
    timeline: List[TimeSlice] = []

    work_left = sum(s.remaining for s in states)
    time = 0
    current: Optional[SimulationState] = None
    slice_start = 0

    while work_left > 0:
        chosen = strategy.select(states, time)

        if chosen is None:
            # Idle: nothing has arrived yet, close the running slice and wait.
            if current is not None:
                append_slice(timeline, current.process.pid, slice_start, time)
                current = None
            logger.debug("%s: t=%d idle", strategy.name, time)
            time += 1
            continue

        if chosen is not current:
            if current is not None:
                append_slice(timeline, current.process.pid, slice_start, time)
            logger.debug("%s: t=%d dispatch %s", strategy.name, time, chosen.process.pid)
            current = chosen
            slice_start = time

        chosen.remaining -= 1
        work_left -= 1
        assert chosen.remaining >= 0, f"negative remaining burst for {chosen.process.pid}"

        if chosen.done:
            rows[chosen.index] = build_row(chosen.process, time + 1)
            logger.debug("%s: %s completed at %d", strategy.name, chosen.process.pid, time + 1)

        time += 1

    if current is not None:
        append_slice(timeline, current.process.pid, slice_start, time)

    assert all(row is not None for row in rows)
    return [row for row in rows if row is not None], timeline
