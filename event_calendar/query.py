"""Visible time windows and the storage filters derived from them.

A calendar view first decides which span of local time it shows, then turns
that span into an :class:`EventQuery`. Repositories translate the query into
SQL with :func:`build_where_clause`.
"""
from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from event_calendar.model import DATETIME_FORMAT, EVENT_POST_TYPE

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "start": "start_at",
    "end": "end_at",
    "title": "title",
    "status": "status",
    "created": "created_at",
}


@dataclass(frozen=True)
class ViewWindow:
    start: datetime
    end: datetime

    @property
    def view_start(self) -> str:
        return self.start.strftime(DATETIME_FORMAT)

    @property
    def view_end(self) -> str:
        return self.end.strftime(DATETIME_FORMAT)

    @property
    def days(self) -> int:
        return (self.end.date() - self.start.date()).days + 1


@dataclass(frozen=True)
class EventQuery:
    time_range: Optional[Tuple[str, str]] = None
    exclude_all_day: bool = False
    statuses: Optional[Tuple[str, ...]] = None
    event_type: Optional[str] = None
    category: Optional[str] = None
    tag: Optional[str] = None
    orderby: str = "start"
    order: str = "asc"
    limit: Optional[int] = None


def today_in_timezone(tz_name: str) -> date:
    try:
        return datetime.now(ZoneInfo(tz_name)).date()
    except Exception:
        return date.today()


def now_in_timezone(tz_name: str) -> datetime:
    try:
        return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)
    except Exception:
        return datetime.now()


def _span(first: date, last: date) -> ViewWindow:
    start = datetime.combine(first, time.min)
    end = datetime.combine(last + timedelta(days=1), time.min) - timedelta(seconds=1)
    return ViewWindow(start=start, end=end)


def day_window(target: date) -> ViewWindow:
    return _span(target, target)


def week_window(target: date) -> ViewWindow:
    # Weeks start on Sunday.
    first = target - timedelta(days=(target.weekday() + 1) % 7)
    return _span(first, first + timedelta(days=6))


def month_window(target: date) -> ViewWindow:
    last_day = calendar.monthrange(target.year, target.month)[1]
    return _span(target.replace(day=1), target.replace(day=last_day))


def base_query_args(query: Optional[EventQuery] = None) -> EventQuery:
    query = query or EventQuery()
    if query.orderby not in SORTABLE_FIELDS:
        query = replace(query, orderby="start")
    if query.order.lower() not in {"asc", "desc"}:
        query = replace(query, order="asc")
    return query


def main_query_args(
    post_type: str,
    window: ViewWindow,
    base: Optional[EventQuery] = None,
    exclude_all_day: bool = True,
) -> EventQuery:
    """Restrict ``base`` to events starting inside ``window``.

    Other post types pass through untouched.
    """
    if post_type == EVENT_POST_TYPE:
        base = replace(
            base or EventQuery(),
            time_range=(window.view_start, window.view_end),
            exclude_all_day=exclude_all_day,
        )
        logger.debug(
            "Event window %s..%s exclude_all_day=%s",
            window.view_start,
            window.view_end,
            exclude_all_day,
        )
    return base_query_args(base)


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_where_clause(query: EventQuery) -> tuple[str, dict]:
    clauses = []
    params: dict = {}
    if query.time_range is not None:
        clauses.append("start_at BETWEEN :view_start AND :view_end")
        params["view_start"], params["view_end"] = query.time_range
    if query.exclude_all_day:
        clauses.append("all_day IS NULL")
    if query.statuses:
        names = []
        for idx, status in enumerate(query.statuses):
            key = f"status_{idx}"
            names.append(f":{key}")
            params[key] = status
        clauses.append(f"status IN ({', '.join(names)})")
    if query.event_type:
        clauses.append("event_type = :event_type")
        params["event_type"] = query.event_type
    if query.category:
        clauses.append("category = :category")
        params["category"] = query.category
    if query.tag:
        clauses.append("(',' || COALESCE(tags, '') || ',') LIKE :tag_pattern ESCAPE '\\'")
        params["tag_pattern"] = f"%,{escape_like(query.tag)},%"
    where = " AND ".join(clauses) if clauses else "1 = 1"
    return where, params


def build_order_clause(query: EventQuery) -> str:
    column = SORTABLE_FIELDS.get(query.orderby, "start_at")
    direction = "DESC" if query.order.lower() == "desc" else "ASC"
    return f"{column} {direction}, id ASC"
