from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import List, Mapping, Sequence

from .models import Process

logger = logging.getLogger(__name__)

# Field order of headerless CSV records: pid,burst,arrival[,priority].
POSITIONAL_FIELDS = ("pid", "burst_time", "arrival_time", "priority")


class WorkloadError(ValueError):
    """A workload file or one of its records could not be turned into processes."""


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        loader = _load_json
    elif suffix == ".csv":
        loader = _load_csv
    else:
        raise WorkloadError(f"Unsupported workload format: {suffix} (use .json or .csv)")

    try:
        processes = loader(path)
    except FileNotFoundError as exc:
        raise WorkloadError(f"Workload not found: {path}") from exc
    except OSError as exc:
        raise WorkloadError(f"Cannot read workload {path}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise WorkloadError(f"Workload {path} is not valid UTF-8: {exc.reason}") from exc

    logger.info("loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise WorkloadError(f"Invalid JSON workload {path}: {exc}") from exc

    if not isinstance(raw, list):
        raise WorkloadError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        records = [row for row in csv.reader(f) if any(cell.strip() for cell in row)]

    if not records:
        return []

    header = [cell.strip().lower() for cell in records[0]]
    if header and header[0] == "pid":
        return [_process_from_mapping(dict(zip(header, row))) for row in records[1:]]

    return [_process_from_record(row) for row in records]


def _process_from_record(record: Sequence[str]) -> Process:
    """
    Build a Process from a positional ``pid,burst,arrival[,priority]`` record.
    """
    if len(record) not in (3, 4):
        raise WorkloadError(f"Invalid process record (expected 3 or 4 fields): {list(record)!r}")
    return _process_from_mapping(dict(zip(POSITIONAL_FIELDS, record)))


def _process_from_mapping(mapping: Mapping) -> Process:
    try:
        pid = str(mapping["pid"]).strip()
        arrival_time = _as_int(mapping["arrival_time"])
        burst_time = _as_int(mapping["burst_time"])
        priority_val = mapping.get("priority")
        if isinstance(priority_val, str):
            priority_val = priority_val.strip()
        priority = _as_int(priority_val) if priority_val not in (None, "") else 0
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise WorkloadError(f"Invalid process entry: {mapping!r}") from exc

    if not pid:
        raise WorkloadError(f"Process entry has an empty pid: {mapping!r}")
    if arrival_time < 0:
        raise WorkloadError(f"Process {pid} has a negative arrival time ({arrival_time})")
    if burst_time <= 0:
        raise WorkloadError(f"Process {pid} needs a positive burst time ({burst_time})")

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )



def _as_int(value) -> int:
    # JSON floats and booleans are not integers, even when int() accepts them.
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"expected an integer, got {value!r}")
    return int(value)
