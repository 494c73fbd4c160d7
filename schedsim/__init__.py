"""
CPU scheduling simulator.

Runs FCFS, preemptive SJF, preemptive Priority and Round-robin scheduling
over an in-memory process list and reports per-process timing, a Gantt
timeline and aggregate statistics.
"""

from .algorithms import ALGORITHMS, run_algorithm, schedule_fcfs, schedule_priority, schedule_rr, schedule_sjf
from .models import AggregateStats, Process, ResultRow, ScheduleResult, TimeSlice

__all__ = [
    "ALGORITHMS",
    "AggregateStats",
    "Process",
    "ResultRow",
    "ScheduleResult",
    "TimeSlice",
    "run_algorithm",
    "schedule_fcfs",
    "schedule_priority",
    "schedule_rr",
    "schedule_sjf",
]
