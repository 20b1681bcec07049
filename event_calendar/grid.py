from __future__ import annotations

import calendar
import logging
import math
from datetime import datetime
from typing import Callable, Dict, List, Optional

from event_calendar.model import Event

logger = logging.getLogger(__name__)

DAY_IN_SECONDS = 86400
DEFAULT_CELL_MAX = 10

PointerHook = Callable[[Event, int], None]


def noop_pointer(event: Event, cell: int) -> None:
    # Recurring and expiring events will adjust the pointer here.
    return None


class CellGrid:
    def __init__(self):
        self.cells: Dict[int, Dict[str, Event]] = {}

    def add(self, cell: int, event: Event, max: int = DEFAULT_CELL_MAX) -> bool:
        items = self.cells.get(cell)
        if items and len(items) >= max:
            return False
        self.cells.setdefault(cell, {})[event.id] = event
        return True

    def events_for(self, cell: int) -> List[Event]:
        return list(self.cells.get(cell, {}).values())

    def count(self, cell: int) -> int:
        return len(self.cells.get(cell, {}))

    def cells_for_event(self, event_id: str) -> List[int]:
        return sorted(cell for cell, items in self.cells.items() if event_id in items)

    def as_ids(self) -> Dict[int, List[str]]:
        return {cell: list(items.keys()) for cell, items in sorted(self.cells.items())}


def day_offset(start: datetime, anchor: datetime) -> int:
    return math.floor((start - anchor).total_seconds() / DAY_IN_SECONDS)


def hourly_cells(event: Event, anchor: datetime, interval: int = 1) -> range:
    """Cells an event covers in an hour-per-row grid.

    ``interval`` is the number of day columns per hour row: 1 for a day,
    7 for a week. A missing start lands on hour 0 of the anchor day and a
    missing end collapses the event onto its start hour.
    """
    if event.start is not None:
        start_hour = event.start.hour
        offset = day_offset(event.start, anchor)
    else:
        start_hour = 0
        offset = 0

    if event.end is not None:
        end_hour = event.end.hour
    else:
        end_hour = start_hour

    cell = (start_hour * interval) + offset
    end_cell = (end_hour * interval) + offset
    return range(cell, end_cell + 1, interval)


def daily_cells(event: Event, month_start: datetime) -> range:
    """Day-of-month cells an event covers inside the month of ``month_start``."""
    last_day = calendar.monthrange(month_start.year, month_start.month)[1]
    if event.start is None:
        return range(0, 1)

    month_key = (month_start.year, month_start.month)
    start_key = (event.start.year, event.start.month)
    if start_key < month_key:
        start_day = 1
    elif start_key > month_key:
        return range(0)
    else:
        start_day = event.start.day

    if event.end is None:
        end_day = start_day
    else:
        end_key = (event.end.year, event.end.month)
        if end_key > month_key:
            end_day = last_day
        elif end_key < month_key:
            return range(0)
        else:
            end_day = event.end.day
    return range(start_day, end_day + 1)


def place_event(
    grid: CellGrid,
    event: Event,
    cells: range,
    max: int = DEFAULT_CELL_MAX,
    pointer_hook: Optional[PointerHook] = None,
) -> int:
    hook = pointer_hook or noop_pointer
    placed = 0
    for cell in cells:
        hook(event, cell)
        if grid.add(cell, event, max=max):
            placed += 1
    logger.debug("Placed event %s into %d of %d cells", event.id, placed, len(cells))
    return placed
