from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

EVENT_POST_TYPE = "event"

EVENT_STATUSES = ["publish", "draft", "private", "passed"]


def to_wall_time(value: datetime, tz_name: Optional[str] = None) -> datetime:
    if value.tzinfo is None:
        return value
    try:
        local = value.astimezone(ZoneInfo(tz_name)) if tz_name else value.astimezone()
    except Exception:
        local = value.astimezone()
    return local.replace(tzinfo=None)


def parse_event_datetime(value: Any, tz_name: Optional[str] = None) -> Optional[datetime]:
    """Parse a local wall time; anything unreadable becomes None.

    Values carrying a UTC offset are converted to ``tz_name`` first.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_wall_time(value, tz_name)
    value_str = str(value).strip()
    if not value_str:
        return None
    try:
        parsed = datetime.fromisoformat(value_str.replace("T", " ").replace("Z", "+00:00"))
    except ValueError:
        return None
    return to_wall_time(parsed, tz_name)


def format_event_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(DATETIME_FORMAT)


def split_tags(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        items = value
    else:
        items = str(value).split(",")
    return [str(item).strip() for item in items if str(item).strip()]


@dataclass
class Event:
    id: str
    title: str = ""
    status: str = "publish"
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    all_day: bool = False
    event_type: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Event":
        return cls(
            id=str(row.get("id")),
            title=row.get("title") or "",
            status=row.get("status") or "publish",
            start=parse_event_datetime(row.get("start_at")),
            end=parse_event_datetime(row.get("end_at")),
            all_day=bool(row.get("all_day")),
            event_type=row.get("event_type"),
            category=row.get("category"),
            tags=split_tags(row.get("tags")),
        )
