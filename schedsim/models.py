from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 0

    def __post_init__(self) -> None:
        if self.arrival_time < 0:
            raise ValueError(f"Process {self.pid} has a negative arrival time ({self.arrival_time})")
        if self.burst_time <= 0:
            raise ValueError(f"Process {self.pid} needs a positive burst time ({self.burst_time})")


@dataclass
class SimulationState:
    """
    Per-run working copy of a process. Schedulers own these; the input
    Process is never touched.
    """

    index: int
    process: Process
    remaining: int

    @classmethod
    def for_process(cls, index: int, process: Process) -> "SimulationState":
        return cls(index=index, process=process, remaining=process.burst_time)

    @property
    def done(self) -> bool:
        return self.remaining == 0

    def eligible(self, time: int) -> bool:
        return self.process.arrival_time <= time and self.remaining > 0


@dataclass
class TimeSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: str
    start: int
    stop: int

    @property
    def duration(self) -> int:
        return self.stop - self.start


@dataclass
class ResultRow:
    pid: str
    priority: int
    burst_time: int
    arrival_time: int
    wait_time: int
    turnaround_time: int
    completion_time: int


@dataclass
class AggregateStats:
    average_wait: float = 0.0
    average_turnaround: float = 0.0
    throughput: float = 0.0
    makespan: int = 0
    cpu_busy_time: int = 0
    cpu_utilization: float = 0.0


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int] = None
    rows: List[ResultRow] = field(default_factory=list)
    timeline: List[TimeSlice] = field(default_factory=list)
    stats: AggregateStats = field(default_factory=AggregateStats)
