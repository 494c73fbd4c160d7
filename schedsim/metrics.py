from __future__ import annotations

from typing import Iterable, List, Sequence

from .models import AggregateStats, Process, ResultRow, ScheduleResult, TimeSlice


def close_slice(pid: str, start: int, stop: int) -> TimeSlice:
    assert stop >= start, f"slice for {pid} ends before it starts ({start} > {stop})"
    return TimeSlice(pid=pid, start=start, stop=stop)


def append_slice(timeline: List[TimeSlice], pid: str, start: int, stop: int) -> None:
    """
    Append a slice, extending the last one instead when it belongs to the
    same process and ends exactly where this one starts. Processes are told
    apart by pid only, so callers that reuse a pid for different processes
    get their back-to-back slices merged.
    """
    if stop == start:
        return
    if timeline:
        last = timeline[-1]
        assert start >= last.stop, f"slice {pid}@{start} overlaps {last.pid}@{last.stop}"
        if last.pid == pid and last.stop == start:
            last.stop = stop
            return
    timeline.append(close_slice(pid, start, stop))


def build_row(process: Process, completion_time: int) -> ResultRow:
    turnaround_time = completion_time - process.arrival_time
    return ResultRow(
        pid=process.pid,
        priority=process.priority,
        burst_time=process.burst_time,
        arrival_time=process.arrival_time,
        wait_time=turnaround_time - process.burst_time,
        turnaround_time=turnaround_time,
        completion_time=completion_time,
    )


def aggregate(
    rows: Sequence[ResultRow],
    last_completion_time: int,
    timeline: Iterable[TimeSlice] = (),
) -> AggregateStats:
    """
    Averages, throughput and utilization for a finished run.

    An empty run, or one whose last completion is at time 0, reports zeros
    rather than dividing by zero.
    """
    if not rows:
        return AggregateStats()

    n = len(rows)
    cpu_busy_time = sum(slice_.duration for slice_ in timeline)
    makespan = last_completion_time

    return AggregateStats(
        average_wait=sum(r.wait_time for r in rows) / n,
        average_turnaround=sum(r.turnaround_time for r in rows) / n,
        throughput=n / makespan if makespan > 0 else 0.0,
        makespan=makespan,
        cpu_busy_time=cpu_busy_time,
        cpu_utilization=cpu_busy_time / makespan if makespan > 0 else 0.0,
    )


def compute_aggregate(result: ScheduleResult) -> AggregateStats:
    """
    Fill in result.stats from its rows and timeline.
    """
    last_completion = max((r.completion_time for r in result.rows), default=0)
    stats = aggregate(result.rows, last_completion, result.timeline)
    result.stats = stats
    return stats
