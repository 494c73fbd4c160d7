import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    run_algorithm,
    schedule_fcfs,
    schedule_priority,
    schedule_rr,
    schedule_sjf,
)
from schedsim.models import AggregateStats, Process


def _procs():
    return [
        Process("1", arrival_time=0, burst_time=5, priority=2),
        Process("2", arrival_time=1, burst_time=3, priority=1),
        Process("3", arrival_time=2, burst_time=2, priority=3),
    ]


def _slices(res):
    return [(s.pid, s.start, s.stop) for s in res.timeline]


def _completions(res):
    return {r.pid: r.completion_time for r in res.rows}


def test_fcfs_simultaneous_arrivals():
    procs = [
        Process("A", arrival_time=0, burst_time=3),
        Process("B", arrival_time=0, burst_time=4),
        Process("C", arrival_time=0, burst_time=2),
    ]
    res = schedule_fcfs(procs)
    assert [r.completion_time for r in res.rows] == [3, 7, 9]
    assert [r.wait_time for r in res.rows] == [0, 3, 7]
    assert _slices(res) == [("A", 0, 3), ("B", 3, 7), ("C", 7, 9)]


def test_fcfs_trusts_input_order():
    procs = [
        Process("late", arrival_time=2, burst_time=1),
        Process("early", arrival_time=0, burst_time=1),
    ]
    res = schedule_fcfs(procs)
    assert _slices(res) == [("late", 2, 3), ("early", 3, 4)]
    assert res.rows[1].wait_time == 3


def test_fcfs_idle_gap_does_not_overlap():
    procs = [
        Process("1", arrival_time=0, burst_time=2),
        Process("2", arrival_time=10, burst_time=3),
        Process("3", arrival_time=11, burst_time=1),
    ]
    res = schedule_fcfs(procs)
    assert _slices(res) == [("1", 0, 2), ("2", 10, 13), ("3", 13, 14)]
    assert [r.wait_time for r in res.rows] == [0, 0, 2]


def test_sjf_preempts_for_shorter_remaining():
    res = schedule_sjf(_procs())
    assert _slices(res) == [("1", 0, 1), ("2", 1, 4), ("3", 4, 6), ("1", 6, 10)]
    assert _completions(res) == {"1": 10, "2": 4, "3": 6}
    assert [r.wait_time for r in res.rows] == [5, 0, 2]
    assert res.stats.average_wait == pytest.approx(7 / 3)
    assert res.stats.throughput == pytest.approx(0.3)


def test_sjf_idle_gap_leaves_no_slice():
    procs = [
        Process("1", arrival_time=0, burst_time=2),
        Process("2", arrival_time=5, burst_time=1),
    ]
    res = schedule_sjf(procs)
    assert _slices(res) == [("1", 0, 2), ("2", 5, 6)]
    assert _completions(res) == {"1": 2, "2": 6}
    assert res.stats.cpu_busy_time == 3
    assert res.stats.makespan == 6


def test_sjf_everything_arrives_late():
    res = schedule_sjf([Process("1", arrival_time=3, burst_time=2)])
    assert _slices(res) == [("1", 3, 5)]
    assert res.rows[0].wait_time == 0


def test_sjf_single_process_keeps_last_unit():
    res = schedule_sjf([Process("solo", arrival_time=0, burst_time=3)])
    assert _slices(res) == [("solo", 0, 3)]


def test_priority_then_remaining_burst():
    procs = [
        Process("1", arrival_time=0, burst_time=4, priority=2),
        Process("2", arrival_time=1, burst_time=2, priority=1),
        Process("3", arrival_time=2, burst_time=1, priority=1),
    ]
    res = schedule_priority(procs)
    assert _slices(res) == [("1", 0, 1), ("2", 1, 3), ("3", 3, 4), ("1", 4, 7)]
    assert _completions(res) == {"1": 7, "2": 3, "3": 4}


def test_priority_prefers_shorter_remaining_within_level():
    procs = [
        Process("long", arrival_time=0, burst_time=5, priority=1),
        Process("short", arrival_time=1, burst_time=2, priority=1),
        Process("low", arrival_time=0, burst_time=1, priority=9),
    ]
    res = schedule_priority(procs)
    assert _slices(res) == [("long", 0, 1), ("short", 1, 3), ("long", 3, 7), ("low", 7, 8)]


@pytest.mark.parametrize("order", [("A", "B"), ("B", "A")])
def test_priority_tie_goes_to_scan_order(order):
    procs = [Process(pid, arrival_time=0, burst_time=3, priority=1) for pid in order]
    for _ in range(3):
        res = schedule_priority(procs)
        assert _slices(res) == [(order[0], 0, 3), (order[1], 3, 6)]


def test_rr_unit_sweep():
    procs = [
        Process("1", arrival_time=0, burst_time=3),
        Process("2", arrival_time=1, burst_time=2),
        Process("3", arrival_time=2, burst_time=1),
    ]
    res = schedule_rr(procs)
    assert res.quantum is None
    assert _slices(res) == [
        ("1", 0, 1),
        ("2", 1, 2),
        ("3", 2, 3),
        ("1", 3, 4),
        ("2", 4, 5),
        ("1", 5, 6),
    ]
    assert _completions(res) == {"1": 6, "2": 5, "3": 3}


def test_rr_unit_sweep_reorders_by_arrival_and_merges():
    procs = [
        Process("late", arrival_time=4, burst_time=1),
        Process("early", arrival_time=0, burst_time=2),
    ]
    res = schedule_rr(procs)
    assert _slices(res) == [("early", 0, 2), ("late", 4, 5)]
    # Rows stay in the caller's order.
    assert [r.pid for r in res.rows] == ["late", "early"]


def test_rr_quantum_2():
    res = schedule_rr(_procs(), quantum=2)
    assert res.quantum == 2
    assert _slices(res) == [
        ("1", 0, 2),
        ("2", 2, 4),
        ("3", 4, 6),
        ("1", 6, 8),
        ("2", 8, 9),
        ("1", 9, 10),
    ]
    assert _completions(res) == {"1": 10, "2": 9, "3": 6}


def test_rr_quantum_idle_jump():
    procs = [
        Process("1", arrival_time=0, burst_time=1),
        Process("2", arrival_time=4, burst_time=3),
    ]
    res = schedule_rr(procs, quantum=2)
    assert _slices(res) == [("1", 0, 1), ("2", 4, 7)]


@pytest.mark.parametrize("quantum", [0, -1])
def test_rr_rejects_non_positive_quantum(quantum):
    with pytest.raises(ValueError):
        schedule_rr(_procs(), quantum=quantum)


@pytest.mark.parametrize("name", sorted(ALGORITHMS))
def test_empty_input(name):
    res = run_algorithm(name, [])
    assert res.rows == []
    assert res.timeline == []
    assert res.stats == AggregateStats()


def test_unknown_algorithm():
    with pytest.raises(ValueError):
        run_algorithm("lottery", _procs())


def test_run_algorithm_is_case_insensitive():
    assert run_algorithm("SJF", _procs()).algorithm == "Shortest-job-first"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"arrival_time": 0, "burst_time": 0},
        {"arrival_time": 0, "burst_time": -2},
        {"arrival_time": -1, "burst_time": 1},
    ],
)
def test_process_rejects_impossible_timing(kwargs):
    with pytest.raises(ValueError):
        Process("z", **kwargs)
