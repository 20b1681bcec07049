from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Protocol

from event_calendar import render
from event_calendar.grid import (
    DEFAULT_CELL_MAX,
    CellGrid,
    PointerHook,
    daily_cells,
    hourly_cells,
    noop_pointer,
    place_event,
)
from event_calendar.model import Event
from event_calendar.pagination import PaginationArgs, render_pagination
from event_calendar.query import EventQuery, ViewWindow, day_window, main_query_args, month_window, week_window

logger = logging.getLogger(__name__)

HOURS_IN_DAY = 24
DAYS_IN_WEEK = 7
TABLE_PLURAL = "events"


class TableRenderer(Protocol):
    mode: str
    today: date
    window: ViewWindow
    grid: CellGrid

    def get_columns(self) -> Dict[str, str]: ...

    def get_table_classes(self) -> List[str]: ...

    def main_query_args(self, post_type: str, base: Optional[EventQuery] = None) -> EventQuery: ...

    def setup_item(self, event: Event, max: int = DEFAULT_CELL_MAX) -> None: ...

    def pagination_args(self) -> PaginationArgs: ...

    def display_rows(self, now: datetime) -> str: ...

    def display(self, now: datetime, base_url: str = "") -> str: ...


class DayTable:
    mode = "day"
    interval = 1

    def __init__(self, today: date, pointer_hook: Optional[PointerHook] = None):
        self.today = today
        self.window = day_window(today)
        self.day_start = self.window.start
        self.day_end = self.window.end
        self.grid = CellGrid()
        self.pointer_hook = pointer_hook or noop_pointer

    def get_columns(self) -> Dict[str, str]:
        day = self.day_start.strftime("%A").lower()
        return {
            "hour": render.week_number_label(self.today),
            day: render.long_date_label(self.day_start.date()),
        }

    def get_table_classes(self) -> List[str]:
        return ["widefat", "fixed", "striped", "calendar", self.mode, TABLE_PLURAL]

    def main_query_args(self, post_type: str, base: Optional[EventQuery] = None) -> EventQuery:
        # All-day events are kept out of the hourly rows.
        return main_query_args(post_type, self.window, base=base, exclude_all_day=True)

    def setup_pointer(self, event: Event, cell: int) -> None:
        self.pointer_hook(event, cell)

    def setup_item(self, event: Event, max: int = DEFAULT_CELL_MAX) -> None:
        cells = hourly_cells(event, self.day_start, self.interval)
        place_event(self.grid, event, cells, max=max, pointer_hook=self.setup_pointer)

    def pagination_args(self) -> PaginationArgs:
        return PaginationArgs(
            small="1 day",
            large="1 week",
            labels={
                "next_small": "Tomorrow",
                "next_large": "Next Week",
                "prev_small": "Yesterday",
                "prev_large": "Previous Week",
            },
        )

    def get_all_day_row(self) -> str:
        return '<tr class="all-day"><th>All day</th><td></td></tr>'

    def get_row_start(self, time: datetime, now: datetime) -> str:
        hour = f"{time.hour:02d}"
        classes = [f"hour-{hour}"]
        if f"{now.hour:02d}" == hour:
            classes.append("this-hour")
        return f'<tr class="{render.class_attr(classes)}"><th>{render.hour_label(time)}</th>'

    def get_row_end(self) -> str:
        return "</tr>"

    def get_cell_classes(self, cell: int) -> List[str]:
        day = self.day_start.strftime("%A").lower()
        classes = [day, f"column-{day}"]
        if self.grid.count(cell):
            classes.append("has-events")
        return classes

    def get_row_cell(self, cell: int) -> str:
        return (
            f'<td class="{render.class_attr(self.get_cell_classes(cell))}">'
            f'<div class="events-for-hour">{render.render_events(self.grid.events_for(cell))}</div>'
            f"</td>"
        )

    def display_rows(self, now: datetime) -> str:
        rows = [self.get_all_day_row()]
        for hour in range(HOURS_IN_DAY):
            time = self.day_start + timedelta(hours=hour)
            rows.append(self.get_row_start(time, now) + self.get_row_cell(hour) + self.get_row_end())
        return "".join(rows)

    def display(self, now: datetime, base_url: str = "") -> str:
        pagination = render_pagination(
            self.today, self.mode, self.pagination_args(), base_url=base_url, current=now.date()
        )
        return render.render_table(
            self.get_columns(), self.get_table_classes(), self.display_rows(now), pagination, self.mode
        )


class WeekTable:
    mode = "week"
    interval = DAYS_IN_WEEK

    def __init__(self, today: date, pointer_hook: Optional[PointerHook] = None):
        self.today = today
        self.window = week_window(today)
        self.week_start = self.window.start
        self.week_end = self.window.end
        self.grid = CellGrid()
        self.pointer_hook = pointer_hook or noop_pointer

    def _days(self) -> List[date]:
        first = self.week_start.date()
        return [first + timedelta(days=idx) for idx in range(DAYS_IN_WEEK)]

    def get_columns(self) -> Dict[str, str]:
        columns = {"hour": render.week_number_label(self.today)}
        for day in self._days():
            columns[day.strftime("%A").lower()] = f"{day:%a} {day.day}"
        return columns

    def get_table_classes(self) -> List[str]:
        return ["widefat", "fixed", "striped", "calendar", self.mode, TABLE_PLURAL]

    def main_query_args(self, post_type: str, base: Optional[EventQuery] = None) -> EventQuery:
        return main_query_args(post_type, self.window, base=base, exclude_all_day=True)

    def setup_pointer(self, event: Event, cell: int) -> None:
        self.pointer_hook(event, cell)

    def setup_item(self, event: Event, max: int = DEFAULT_CELL_MAX) -> None:
        cells = hourly_cells(event, self.week_start, self.interval)
        place_event(self.grid, event, cells, max=max, pointer_hook=self.setup_pointer)

    def pagination_args(self) -> PaginationArgs:
        return PaginationArgs(
            small="1 week",
            large="1 month",
            labels={
                "next_small": "Next Week",
                "next_large": "Next Month",
                "prev_small": "Previous Week",
                "prev_large": "Previous Month",
            },
        )

    def _day_classes(self, day: date, now: datetime) -> List[str]:
        name = day.strftime("%A").lower()
        classes = [name, f"column-{name}"]
        if day == now.date():
            classes.append("today")
        return classes

    def display_rows(self, now: datetime) -> str:
        days = self._days()
        all_day = "".join(
            f'<td class="{render.class_attr(self._day_classes(day, now))}"></td>' for day in days
        )
        rows = [f'<tr class="all-day"><th>All day</th>{all_day}</tr>']
        for hour in range(HOURS_IN_DAY):
            time = self.week_start + timedelta(hours=hour)
            classes = [f"hour-{hour:02d}"]
            if now.hour == hour:
                classes.append("this-hour")
            cells = []
            for offset, day in enumerate(days):
                cell = (hour * self.interval) + offset
                events = self.grid.events_for(cell)
                day_classes = self._day_classes(day, now) + (["has-events"] if events else [])
                cells.append(
                    f'<td class="{render.class_attr(day_classes)}">'
                    f'<div class="events-for-hour">{render.render_events(events)}</div></td>'
                )
            rows.append(
                f'<tr class="{render.class_attr(classes)}"><th>{render.hour_label(time)}</th>'
                f'{"".join(cells)}</tr>'
            )
        return "".join(rows)

    def display(self, now: datetime, base_url: str = "") -> str:
        pagination = render_pagination(
            self.today, self.mode, self.pagination_args(), base_url=base_url, current=now.date()
        )
        return render.render_table(
            self.get_columns(), self.get_table_classes(), self.display_rows(now), pagination, self.mode
        )


class MonthTable:
    mode = "month"

    def __init__(self, today: date, pointer_hook: Optional[PointerHook] = None):
        self.today = today
        self.window = month_window(today)
        self.month_start = self.window.start
        self.grid = CellGrid()
        self.pointer_hook = pointer_hook or noop_pointer

    def get_columns(self) -> Dict[str, str]:
        first_sunday = self.month_start.date() - timedelta(days=(self.month_start.weekday() + 1) % 7)
        columns = {}
        for idx in range(DAYS_IN_WEEK):
            day = first_sunday + timedelta(days=idx)
            columns[day.strftime("%A").lower()] = day.strftime("%A")
        return columns

    def get_table_classes(self) -> List[str]:
        return ["widefat", "fixed", "striped", "calendar", self.mode, TABLE_PLURAL]

    def main_query_args(self, post_type: str, base: Optional[EventQuery] = None) -> EventQuery:
        return main_query_args(post_type, self.window, base=base, exclude_all_day=False)

    def setup_pointer(self, event: Event, cell: int) -> None:
        self.pointer_hook(event, cell)

    def setup_item(self, event: Event, max: int = DEFAULT_CELL_MAX) -> None:
        cells = daily_cells(event, self.month_start)
        place_event(self.grid, event, cells, max=max, pointer_hook=self.setup_pointer)

    def pagination_args(self) -> PaginationArgs:
        return PaginationArgs(
            small="1 month",
            large="1 year",
            labels={
                "next_small": "Next Month",
                "next_large": "Next Year",
                "prev_small": "Previous Month",
                "prev_large": "Previous Year",
            },
        )

    def get_day_cell(self, day_number: int, now: datetime) -> str:
        day = self.month_start.date().replace(day=day_number)
        classes = ["day", f"day-{day_number}", day.strftime("%A").lower()]
        if day == now.date():
            classes.append("today")
        events = self.grid.events_for(day_number)
        if events:
            classes.append("has-events")
        return (
            f'<td class="{render.class_attr(classes)}">'
            f'<span class="day-number">{day_number}</span>'
            f'<div class="events-for-day">{render.render_events(events)}</div></td>'
        )

    def display_rows(self, now: datetime) -> str:
        last_day = self.window.days
        leading = (self.month_start.weekday() + 1) % 7
        cells = ['<td class="padding"></td>'] * leading
        cells.extend(self.get_day_cell(number, now) for number in range(1, last_day + 1))
        while len(cells) % DAYS_IN_WEEK:
            cells.append('<td class="padding"></td>')
        rows = []
        for idx in range(0, len(cells), DAYS_IN_WEEK):
            rows.append(f'<tr>{"".join(cells[idx: idx + DAYS_IN_WEEK])}</tr>')
        return "".join(rows)

    def display(self, now: datetime, base_url: str = "") -> str:
        pagination = render_pagination(
            self.today, self.mode, self.pagination_args(), base_url=base_url, current=now.date()
        )
        return render.render_table(
            self.get_columns(), self.get_table_classes(), self.display_rows(now), pagination, self.mode
        )


TABLES = {
    DayTable.mode: DayTable,
    WeekTable.mode: WeekTable,
    MonthTable.mode: MonthTable,
}


def get_table(mode: str, today: date, pointer_hook: Optional[PointerHook] = None) -> TableRenderer:
    try:
        table_cls = TABLES[mode]
    except KeyError:
        raise ValueError(f"Unknown calendar mode: {mode!r}")
    return table_cls(today, pointer_hook=pointer_hook)


def setup_items(table: TableRenderer, events: Iterable[Event], max: int = DEFAULT_CELL_MAX) -> TableRenderer:
    count = 0
    for event in events:
        table.setup_item(event, max=max)
        count += 1
    logger.debug("Loaded %d events into %s table", count, table.mode)
    return table
