from datetime import date, datetime, timedelta

import pytest

from event_calendar.query import (
    EventQuery,
    build_order_clause,
    build_where_clause,
    day_window,
    main_query_args,
    month_window,
    week_window,
)


@pytest.mark.parametrize(
    "target",
    [date(2026, 10, 18), date(2026, 3, 8), date(2026, 11, 1), date(2024, 2, 29), date(2026, 12, 31)],
)
def test_day_window_always_spans_one_calendar_day(target):
    window = day_window(target)
    assert window.start == datetime.combine(target, datetime.min.time())
    assert (window.end - window.start).total_seconds() == 86399
    assert window.end.date() == target


def test_day_window_formats_local_strings():
    window = day_window(date(2026, 10, 18))
    assert window.view_start == "2026-10-18 00:00:00"
    assert window.view_end == "2026-10-18 23:59:59"


def test_week_window_starts_on_sunday():
    window = week_window(date(2026, 10, 21))
    assert window.view_start == "2026-10-18 00:00:00"
    assert window.view_end == "2026-10-24 23:59:59"
    assert window.days == 7


def test_month_window_covers_whole_month():
    window = month_window(date(2026, 2, 14))
    assert window.view_start == "2026-02-01 00:00:00"
    assert window.view_end == "2026-02-28 23:59:59"
    assert window.days == 28


def test_event_query_restricts_to_window_and_skips_all_day():
    window = day_window(date(2026, 10, 18))
    query = main_query_args("event", window)
    assert query.time_range == ("2026-10-18 00:00:00", "2026-10-18 23:59:59")
    assert query.exclude_all_day is True


def test_other_post_types_pass_through_unmodified():
    base = EventQuery(category="talks", orderby="title", order="desc")
    query = main_query_args("page", day_window(date(2026, 10, 18)), base=base)
    assert query == base


def test_base_query_repairs_unknown_sorting():
    query = main_query_args("page", day_window(date(2026, 10, 18)), base=EventQuery(orderby="nope", order="up"))
    assert (query.orderby, query.order) == ("start", "asc")


def test_where_clause_uses_inclusive_between_and_missing_marker():
    query = main_query_args("event", day_window(date(2026, 10, 18)))
    where, params = build_where_clause(query)
    assert "start_at BETWEEN :view_start AND :view_end" in where
    assert "all_day IS NULL" in where
    assert params == {"view_start": "2026-10-18 00:00:00", "view_end": "2026-10-18 23:59:59"}


def test_where_clause_with_taxonomy_filters():
    where, params = build_where_clause(
        EventQuery(statuses=("publish", "passed"), event_type="meetup", category="talks", tag="python")
    )
    assert "status IN (:status_0, :status_1)" in where
    assert params["status_1"] == "passed"
    assert params["event_type"] == "meetup"
    assert params["tag_pattern"] == "%,python,%"


def test_empty_query_matches_everything():
    where, params = build_where_clause(EventQuery())
    assert where == "1 = 1"
    assert params == {}


def test_order_clause():
    assert build_order_clause(EventQuery()) == "start_at ASC, id ASC"
    assert build_order_clause(EventQuery(orderby="title", order="DESC")) == "title DESC, id ASC"


def test_week_window_for_a_sunday_is_that_week():
    target = date(2026, 10, 18)
    assert week_window(target).start.date() == target
    assert week_window(target + timedelta(days=6)).start.date() == target


def test_tag_filter_escapes_like_wildcards():
    where, params = build_where_clause(EventQuery(tag="50%_off"))
    assert "ESCAPE" in where
    assert params["tag_pattern"] == "%,50\\%\\_off,%"
