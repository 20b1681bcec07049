from __future__ import annotations

from datetime import date, datetime
from uuid import uuid4

from sqlalchemy import text as sql_text

from event_calendar.db import get_sessionmaker
from event_calendar.model import EVENT_STATUSES, format_event_datetime, split_tags
from event_calendar.query import EventQuery, build_order_clause, build_where_clause

EVENTS_TABLE = "events"

EVENT_SELECT_COLUMNS = [
    "id",
    "user_email",
    "title",
    "status",
    "start_at",
    "end_at",
    "all_day",
    "event_type",
    "category",
    "tags",
    "created_at",
    "updated_at",
]

EVENT_PATCH_COLUMNS = {
    "title",
    "status",
    "start_at",
    "end_at",
    "all_day",
    "event_type",
    "category",
    "tags",
}


def _new_id() -> str:
    return uuid4().hex


def _normalize_status(value):
    if value in EVENT_STATUSES:
        return value
    return "publish"


def _normalize_datetime_value(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return format_event_datetime(value)
    if isinstance(value, date):
        return f"{value.isoformat()} 00:00:00"
    value_str = str(value).strip()
    return value_str or None


def _normalize_all_day(value):
    # NULL is the "not all day" marker.
    return 1 if value else None


def _normalize_tags(value):
    tags = split_tags(value)
    return ",".join(tags) if tags else None


def _normalize_event_row(row) -> dict:
    if not row:
        return {}
    payload = dict(row)
    payload["tags"] = split_tags(payload.get("tags"))
    payload["all_day"] = bool(payload.get("all_day"))
    return payload


async def create_event(user_email: str, payload: dict) -> dict:
    now_iso = datetime.utcnow().isoformat()
    record = {
        "id": _new_id(),
        "user_email": user_email,
        "title": payload.get("title") or "Untitled event",
        "status": _normalize_status(payload.get("status")),
        "start_at": _normalize_datetime_value(payload.get("start_at")),
        "end_at": _normalize_datetime_value(payload.get("end_at")),
        "all_day": _normalize_all_day(payload.get("all_day")),
        "event_type": payload.get("event_type"),
        "category": payload.get("category"),
        "tags": _normalize_tags(payload.get("tags")),
        "created_at": now_iso,
        "updated_at": now_iso,
    }
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        await session.execute(
            sql_text(
                f"""
                INSERT INTO {EVENTS_TABLE}
                ({', '.join(EVENT_SELECT_COLUMNS)})
                VALUES
                ({', '.join(f':{col}' for col in EVENT_SELECT_COLUMNS)})
                """
            ),
            record,
        )
        await session.commit()
    return _normalize_event_row(record)


async def get_event(event_id: str) -> dict | None:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        row = (await session.execute(
            sql_text(
                f"SELECT {', '.join(EVENT_SELECT_COLUMNS)} FROM {EVENTS_TABLE} WHERE id = :id"
            ),
            {"id": event_id},
        )).mappings().fetchone()
    return _normalize_event_row(row) if row else None


async def update_event(event_id: str, patch: dict) -> dict | None:
    updates = []
    params = {"id": event_id}
    for key, value in patch.items():
        if key not in EVENT_PATCH_COLUMNS:
            continue
        updates.append(f"{key} = :{key}")
        if key == "status":
            params[key] = _normalize_status(value)
        elif key in {"start_at", "end_at"}:
            params[key] = _normalize_datetime_value(value)
        elif key == "all_day":
            params[key] = _normalize_all_day(value)
        elif key == "tags":
            params[key] = _normalize_tags(value)
        else:
            params[key] = value
    if not updates:
        return await get_event(event_id)
    updates.append("updated_at = :updated_at")
    params["updated_at"] = datetime.utcnow().isoformat()
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(f"UPDATE {EVENTS_TABLE} SET {', '.join(updates)} WHERE id = :id"),
            params,
        )
        await session.commit()
    if not result.rowcount:
        return None
    return await get_event(event_id)


async def delete_event(event_id: str) -> bool:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(f"DELETE FROM {EVENTS_TABLE} WHERE id = :id"),
            {"id": event_id},
        )
        await session.commit()
    return bool(result.rowcount)


async def query_events(query: EventQuery) -> list[dict]:
    where, params = build_where_clause(query)
    limit_sql = ""
    if query.limit is not None:
        limit_sql = " LIMIT :limit"
        params["limit"] = int(query.limit)
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        rows = (await session.execute(
            sql_text(
                f"""
                SELECT {', '.join(EVENT_SELECT_COLUMNS)}
                FROM {EVENTS_TABLE}
                WHERE {where}
                ORDER BY {build_order_clause(query)}{limit_sql}
                """
            ),
            params,
        )).mappings().all()
    return [_normalize_event_row(row) for row in rows]


async def mark_passed_events(now_str: str) -> int:
    session_factory = get_sessionmaker()
    async with session_factory() as session:
        result = await session.execute(
            sql_text(
                f"""
                UPDATE {EVENTS_TABLE}
                SET status = 'passed', updated_at = :updated_at
                WHERE status = 'publish'
                  AND COALESCE(end_at, start_at) IS NOT NULL
                  AND COALESCE(end_at, start_at) < :now
                """
            ),
            {"now": now_str, "updated_at": datetime.utcnow().isoformat()},
        )
        await session.commit()
    return int(result.rowcount or 0)
