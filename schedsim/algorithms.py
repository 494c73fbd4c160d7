from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Optional, Sequence

from .engine import PriorityThenShortestRemainingBurst, ShortestRemainingBurst, simulate
from .metrics import append_slice, build_row, compute_aggregate
from .models import Process, ResultRow, ScheduleResult, SimulationState, TimeSlice

logger = logging.getLogger(__name__)


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive).

    Input order is taken as arrival order; the list is not sorted.
    """
    clock = 0
    timeline: List[TimeSlice] = []
    rows: List[ResultRow] = []

    for p in processes:
        waiting_time = max(0, clock - p.arrival_time)
        start_time = p.arrival_time + waiting_time
        completion_time = start_time + p.burst_time

        append_slice(timeline, p.pid, start_time, completion_time)
        rows.append(build_row(p, completion_time))
        logger.debug("fcfs: %s runs %d-%d", p.pid, start_time, completion_time)

        clock = completion_time

    result = ScheduleResult(algorithm="First-come, first-serve", quantum=None, rows=rows, timeline=timeline)
    compute_aggregate(result)
    return result


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (preemptive, shortest remaining burst).
    """
    rows, timeline = simulate(processes, ShortestRemainingBurst())
    result = ScheduleResult(algorithm="Shortest-job-first", quantum=None, rows=rows, timeline=timeline)
    compute_aggregate(result)
    return result


def schedule_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Priority scheduling (preemptive).

    Lower numeric priority value means higher priority. Equal priorities
    fall back to shortest remaining burst, then input order.
    """
    rows, timeline = simulate(processes, PriorityThenShortestRemainingBurst())
    result = ScheduleResult(algorithm="Priority", quantum=None, rows=rows, timeline=timeline)
    compute_aggregate(result)
    return result


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin.

    Processes are stably ordered by arrival time once up front. Without a
    quantum, each pass over that order gives every eligible process one time
    unit. With a quantum, a FIFO ready queue hands out slices of up to
    ``quantum`` units.
    """
    if quantum is not None and quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")

    ordered = sorted(range(len(processes)), key=lambda i: processes[i].arrival_time)
    states = [SimulationState.for_process(i, processes[i]) for i in ordered]

    timeline: List[TimeSlice] = []
    if quantum is None:
        completions = _rr_unit_sweep(states, timeline)
    else:
        completions = _rr_quantum(states, quantum, timeline)

    # Rows are reported in the caller's order, not the arrival order used above.
    rows = [build_row(p, completions[i]) for i, p in enumerate(processes)]

    result = ScheduleResult(algorithm="Round-robin", quantum=quantum, rows=rows, timeline=timeline)
    compute_aggregate(result)
    return result


def _rr_unit_sweep(states: List[SimulationState], timeline: List[TimeSlice]) -> Dict[int, int]:
    """
    Sweep the arrival-ordered states front to back, one unit per eligible
    process, until all are done. The clock advances during a sweep, so a
    process arriving mid-sweep is served in that same sweep.
    """
    completions: Dict[int, int] = {}
    time = 0

    while len(completions) < len(states):
        ran = False
        for s in states:
            if not s.eligible(time):
                continue

            s.remaining -= 1
            assert s.remaining >= 0, f"negative remaining burst for {s.process.pid}"
            append_slice(timeline, s.process.pid, time, time + 1)
            time += 1
            ran = True

            if s.done:
                completions[s.index] = time
                logger.debug("rr: %s completed at %d", s.process.pid, time)

        if not ran:
            logger.debug("rr: t=%d idle", time)
            time += 1

    return completions


def _rr_quantum(states: List[SimulationState], quantum: int, timeline: List[TimeSlice]) -> Dict[int, int]:
    """
    Conventional round robin over a FIFO ready queue with a fixed quantum.
    """
    completions: Dict[int, int] = {}
    ready: Deque[SimulationState] = deque()
    pending: Deque[SimulationState] = deque(states)
    time = 0

    def admit_arrivals(current_time: int) -> None:
        while pending and pending[0].process.arrival_time <= current_time:
            ready.append(pending.popleft())

    admit_arrivals(time)

    while ready or pending:
        if not ready:
            # CPU idle: jump to the next arrival.
            time = pending[0].process.arrival_time
            logger.debug("rr: idle until %d", time)
            admit_arrivals(time)
            continue

        s = ready.popleft()
        run_time = min(quantum, s.remaining)
        append_slice(timeline, s.process.pid, time, time + run_time)
        logger.debug("rr: %s runs %d-%d", s.process.pid, time, time + run_time)

        time += run_time
        s.remaining -= run_time
        assert s.remaining >= 0, f"negative remaining burst for {s.process.pid}"

        # New arrivals queue ahead of the process that was just preempted.
        admit_arrivals(time)

        if s.done:
            completions[s.index] = time
        else:
            ready.append(s)

    return completions


SchedulerFunc = Callable[[Sequence[Process], Optional[int]], ScheduleResult]

ALGORITHMS: Dict[str, SchedulerFunc] = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "priority": schedule_priority,
    "rr": schedule_rr,
}


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum only affects round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown or unimplemented algorithm '{name}'")

    func = ALGORITHMS[name]
    logger.info("running %s on %d processes", name, len(processes))
    return func(processes, quantum)
