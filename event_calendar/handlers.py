from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, time
from typing import Any, Dict, List, Optional

from event_calendar import render, repositories
from event_calendar.model import EVENT_STATUSES, format_event_datetime, parse_event_datetime, split_tags
from event_calendar.query import SORTABLE_FIELDS, EventQuery, now_in_timezone
from event_calendar.settings import get_settings

logger = logging.getLogger(__name__)

STATUS_LABELS = {
    "publish": "Published",
    "draft": "Draft",
    "private": "Private",
    "passed": "Passed",
}

TAXONOMIES = {
    "event_type": "Types",
    "category": "Categories",
    "tag": "Tags",
}

META_CAPS = {
    "read_event": "read",
    "edit_event": "edit_events",
    "delete_event": "delete_events",
}


def register_post_statuses(registry) -> None:
    registry.context["statuses"] = {status: STATUS_LABELS[status] for status in EVENT_STATUSES}


def register_taxonomies(registry) -> None:
    registry.context["taxonomies"] = dict(TAXONOMIES)


TAXONOMY_META_CAPS = {
    taxonomy: {
        f"manage_{plural}": "edit_events",
        f"edit_{plural}": "edit_events",
        f"assign_{plural}": "edit_events",
        f"delete_{plural}": "delete_events",
    }
    for taxonomy, plural in (
        ("event_type", "event_types"),
        ("category", "event_categories"),
        ("tag", "event_tags"),
    )
}


def _map_caps(mapping: Dict[str, str], caps: List[str], cap: str) -> List[str]:
    if cap in mapping:
        return [mapping[cap]]
    return caps


def event_meta_caps(caps: List[str], cap: str, user_email: str) -> List[str]:
    return _map_caps(META_CAPS, caps, cap)


def type_meta_caps(caps: List[str], cap: str, user_email: str) -> List[str]:
    return _map_caps(TAXONOMY_META_CAPS["event_type"], caps, cap)


def category_meta_caps(caps: List[str], cap: str, user_email: str) -> List[str]:
    return _map_caps(TAXONOMY_META_CAPS["category"], caps, cap)


def tag_meta_caps(caps: List[str], cap: str, user_email: str) -> List[str]:
    return _map_caps(TAXONOMY_META_CAPS["tag"], caps, cap)


def metabox_save(payload: Dict[str, Any]) -> Dict[str, Any]:
    clean = dict(payload or {})
    has_start = "start" in clean
    has_end = "end" in clean
    tz_name = get_settings().calendar_timezone
    start = parse_event_datetime(clean.pop("start", None), tz_name)
    end = parse_event_datetime(clean.pop("end", None), tz_name)
    all_day = clean.pop("all_day", None)

    if all_day and start is not None:
        start = datetime.combine(start.date(), time.min)
        end = datetime.combine((end or start).date(), time(23, 59, 59))
        has_end = True
    if start is not None and end is not None and end < start:
        end = start

    if has_start:
        clean["start_at"] = format_event_datetime(start)
    if has_end:
        clean["end_at"] = format_event_datetime(end)
    if all_day is not None:
        clean["all_day"] = 1 if all_day else None
    if "tags" in clean:
        clean["tags"] = ",".join(split_tags(clean["tags"])) or None
    return clean


def manage_posts_columns(columns: Dict[str, str]) -> Dict[str, str]:
    clean = {key: label for key, label in columns.items() if key != "date"}
    clean.update({
        "start": "Starts",
        "end": "Ends",
        "event_type": "Type",
        "category": "Category",
        "tags": "Tags",
        "status": "Status",
    })
    return clean


def _column_datetime(value: Any, all_day: bool) -> str:
    moment = parse_event_datetime(value)
    if moment is None:
        return ""
    label = f"{moment:%B} {moment.day}, {moment.year}"
    if all_day:
        return label
    return f"{label} {render.hour_label(moment)}"


def manage_custom_column_data(value: str, column: str, event: Dict[str, Any]) -> str:
    all_day = bool(event.get("all_day"))
    if column == "start":
        return _column_datetime(event.get("start_at"), all_day)
    if column == "end":
        return _column_datetime(event.get("end_at"), all_day)
    if column == "status":
        status = event.get("status") or ""
        return STATUS_LABELS.get(status, status)
    if column == "tags":
        return ", ".join(split_tags(event.get("tags")))
    if column in {"title", "event_type", "category"}:
        return str(event.get(column) or "")
    return value


def sortable_columns(columns: Dict[str, str]) -> Dict[str, str]:
    return {**columns, "start": "start", "end": "end", "title": "title", "status": "status"}


def maybe_sort_by_fields(query: EventQuery, params: Dict[str, Any]) -> EventQuery:
    orderby = str(params.get("orderby") or "").strip().lower()
    if orderby not in SORTABLE_FIELDS:
        return query
    order = str(params.get("order") or "asc").strip().lower()
    if order not in {"asc", "desc"}:
        order = "asc"
    return replace(query, orderby=orderby, order=order)


def maybe_filter_by_fields(query: EventQuery, params: Dict[str, Any]) -> EventQuery:
    updates: Dict[str, Any] = {}
    for key in ("event_type", "category", "tag"):
        value = str(params.get(key) or "").strip()
        if value:
            updates[key] = value
    status = str(params.get("status") or "").strip()
    if status in EVENT_STATUSES:
        updates["statuses"] = (status,)
    try:
        per_page = int(params.get("per_page") or 0)
    except (TypeError, ValueError):
        per_page = 0
    if per_page > 0:
        updates["limit"] = per_page
    if not updates:
        return query
    return replace(query, **updates)


async def update_post_statuses(now: Optional[datetime] = None) -> int:
    settings = get_settings()
    now = now or now_in_timezone(settings.calendar_timezone)
    changed = await repositories.mark_passed_events(format_event_datetime(now))
    if changed:
        logger.info("Marked %d events as passed", changed)
    return changed
