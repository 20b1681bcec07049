from datetime import datetime

from event_calendar.grid import CellGrid, daily_cells, day_offset, hourly_cells, place_event
from event_calendar.model import Event

DAY_START = datetime(2026, 10, 18)


def _event(event_id, start=None, end=None):
    return Event(id=event_id, title=f"Event {event_id}", start=start, end=end)


def _place(event, anchor=DAY_START, interval=1, max=10, grid=None, hook=None):
    grid = grid or CellGrid()
    place_event(grid, event, hourly_cells(event, anchor, interval), max=max, pointer_hook=hook)
    return grid


def test_event_spans_every_hour_between_start_and_end():
    grid = _place(_event("a", datetime(2026, 10, 18, 9), datetime(2026, 10, 18, 11)))
    assert grid.cells_for_event("a") == [9, 10, 11]


def test_event_without_end_occupies_start_hour_only():
    grid = _place(_event("a", datetime(2026, 10, 18, 14)))
    assert grid.cells_for_event("a") == [14]


def test_end_before_start_is_not_placed():
    grid = _place(_event("a", datetime(2026, 10, 18, 22), datetime(2026, 10, 19, 2)))
    assert grid.cells_for_event("a") == []
    assert grid.as_ids() == {}


def test_missing_start_falls_back_to_hour_zero():
    grid = _place(_event("a"))
    assert grid.cells_for_event("a") == [0]


def test_cell_keeps_first_max_events_in_query_order():
    grid = CellGrid()
    for idx in range(11):
        _place(_event(f"e{idx}", datetime(2026, 10, 18, 10)), grid=grid)
    assert grid.count(10) == 10
    assert grid.as_ids()[10] == [f"e{idx}" for idx in range(10)]
    assert "e10" not in grid.as_ids()[10]


def test_full_cell_does_not_stop_placement_in_other_cells():
    grid = CellGrid()
    for idx in range(3):
        _place(_event(f"e{idx}", datetime(2026, 10, 18, 10)), grid=grid, max=3)
    _place(_event("long", datetime(2026, 10, 18, 9), datetime(2026, 10, 18, 11)), grid=grid, max=3)
    assert grid.count(10) == 3
    assert grid.cells_for_event("long") == [9, 11]


def test_pointer_hook_runs_for_every_walked_cell():
    calls = []
    grid = CellGrid()
    grid.add(10, _event("other"), max=1)
    _place(
        _event("a", datetime(2026, 10, 18, 9), datetime(2026, 10, 18, 11)),
        grid=grid,
        max=1,
        hook=lambda event, cell: calls.append((event.id, cell)),
    )
    assert calls == [("a", 9), ("a", 10), ("a", 11)]


def test_adding_same_event_twice_keeps_one_entry():
    grid = CellGrid()
    event = _event("a", datetime(2026, 10, 18, 8))
    _place(event, grid=grid)
    _place(event, grid=grid)
    assert grid.as_ids() == {8: ["a"]}


def test_offset_counts_whole_days_from_anchor():
    assert day_offset(datetime(2026, 10, 18, 23, 59), DAY_START) == 0
    assert day_offset(datetime(2026, 10, 20, 1), DAY_START) == 2
    assert day_offset(datetime(2026, 10, 17, 23), DAY_START) == -1


def test_week_interval_walks_one_column():
    event = _event("a", datetime(2026, 10, 20, 9), datetime(2026, 10, 20, 10, 30))
    assert list(hourly_cells(event, DAY_START, interval=7)) == [9 * 7 + 2, 10 * 7 + 2]


def test_out_of_range_cells_are_not_clamped():
    event = _event("a", datetime(2026, 10, 19, 23))
    assert list(hourly_cells(event, DAY_START)) == [24]


def test_daily_cells_inside_month():
    month_start = datetime(2026, 10, 1)
    event = _event("a", datetime(2026, 10, 5, 9), datetime(2026, 10, 7, 10))
    assert list(daily_cells(event, month_start)) == [5, 6, 7]


def test_daily_cells_clamp_to_month_edges():
    month_start = datetime(2026, 10, 1)
    spill_in = _event("a", datetime(2026, 9, 29), datetime(2026, 10, 2))
    spill_out = _event("b", datetime(2026, 10, 30), datetime(2026, 11, 3))
    assert list(daily_cells(spill_in, month_start)) == [1, 2]
    assert list(daily_cells(spill_out, month_start)) == [30, 31]


def test_daily_cells_without_start_never_render():
    assert list(daily_cells(_event("a"), datetime(2026, 10, 1))) == [0]
