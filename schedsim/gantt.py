from __future__ import annotations

from typing import Dict, List, Sequence

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import TimeSlice

CELL_WIDTH = 8
COLORS = ["red", "green", "yellow", "blue", "magenta", "cyan"]


def render_gantt(slices: Sequence[TimeSlice]) -> str:
    """
    Plain-text Gantt chart: one boxed cell per slice, start times underneath.
    Idle gaps get an empty cell so the time marks stay readable.
    """
    if not slices:
        return "Gantt schedule\n(no execution)"

    slices = sorted(slices, key=lambda s: (s.start, s.stop))

    cells: List[str] = []
    marks: List[str] = []
    last_stop = slices[0].start

    for sl in slices:
        if sl.start > last_stop:
            cells.append(" " * CELL_WIDTH)
            marks.append(str(last_stop))
        cells.append(sl.pid.center(CELL_WIDTH))
        marks.append(str(sl.start))
        last_stop = sl.stop

    marks.append(str(last_stop))

    return "\n".join(
        [
            "Gantt schedule",
            "|" + "|".join(cells) + "|",
            "".join(m.ljust(CELL_WIDTH + 1) for m in marks).rstrip(),
        ]
    )


def build_rich_gantt(slices: Sequence[TimeSlice], scale: int = 2) -> tuple[Panel, Text]:
    """
    Build a Rich Panel with a colored bar per slice, plus a line of time
    marks aligned to the slice boundaries. Each time unit is ``scale``
    columns wide; idle time shows as dim dots.
    """
    if not slices:
        return Panel("No execution", title="Gantt Chart"), Text()

    slices = sorted(slices, key=lambda s: (s.start, s.stop))

    pid_to_color: Dict[str, str] = {}

    def pid_color(pid: str) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = COLORS[len(pid_to_color) % len(COLORS)]
        return pid_to_color[pid]

    bar = Text()
    labels = Text()
    marks = Text(str(slices[0].start))
    origin = slices[0].start
    last_time = origin

    def mark(t: int) -> None:
        column = (t - origin) * scale
        pad = column - len(marks.plain)
        marks.append(" " * max(1, pad) + str(t))

    for sl in slices:
        idle_gap = sl.start - last_time
        if idle_gap > 0:
            bar.append("." * idle_gap * scale, style="dim")
            labels.append(" " * idle_gap * scale)
            mark(sl.start)

        width = max(1, sl.duration * scale)
        bar.append(" " * width, style=f"on {pid_color(sl.pid)}")
        labels.append(sl.pid[:width].center(width), style="bold")

        last_time = sl.stop
        mark(last_time)

    grid = Table.grid(padding=(0, 0))
    grid.add_row(bar)
    grid.add_row(labels)

    return Panel.fit(grid, title="Gantt Chart"), marks
