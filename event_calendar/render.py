from __future__ import annotations

import html
from datetime import date, datetime
from typing import Dict, Iterable, List

from event_calendar.model import Event


def hour_label(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "am" if value.hour < 12 else "pm"
    return f"{hour}:{value.minute:02d} {suffix}"


def long_date_label(value: date) -> str:
    return f"{value:%A}, {value:%B} {value.day}, {value.year}"


def week_number_label(value: date) -> str:
    return f"Wk. {value.isocalendar()[1]:02d}"


def class_attr(classes: Iterable[str]) -> str:
    return html.escape(" ".join(item for item in classes if item))


def render_event(event: Event) -> str:
    title = event.title or "(no title)"
    time_html = ""
    if event.start is not None and not event.all_day:
        time_html = f'<span class="event-time">{hour_label(event.start)}</span> '
    return (
        f'<a class="{class_attr(["event", f"status-{event.status}"])}" '
        f'href="/v1/events/{html.escape(event.id)}" data-event-id="{html.escape(event.id)}">'
        f'{time_html}<span class="event-title">{html.escape(title)}</span></a>'
    )


def render_events(events: List[Event]) -> str:
    return "".join(render_event(event) for event in events)


def render_header(columns: Dict[str, str]) -> str:
    cells = "".join(
        f'<th scope="col" class="{class_attr(["manage-column", f"column-{key}"])}">{html.escape(label)}</th>'
        for key, label in columns.items()
    )
    return f"<thead><tr>{cells}</tr></thead>"


def render_table(
    columns: Dict[str, str],
    classes: List[str],
    rows_html: str,
    pagination_html: str = "",
    mode: str = "",
) -> str:
    return (
        f'<div class="{class_attr(["calendar-view", f"mode-{mode}" if mode else ""])}">'
        f"{pagination_html}"
        f'<table class="{class_attr(classes)}">'
        f"{render_header(columns)}"
        f"<tbody>{rows_html}</tbody>"
        f"</table></div>"
    )
