from __future__ import annotations

from sqlalchemy import text as sql_text

from event_calendar.db import get_engine


EVENTS_TABLE = "events"


async def init_db():
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.execute(
            sql_text(
                f"""
                CREATE TABLE IF NOT EXISTS {EVENTS_TABLE} (
                    id TEXT PRIMARY KEY,
                    user_email TEXT NOT NULL,
                    title TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'publish',
                    start_at TEXT,
                    end_at TEXT,
                    all_day INTEGER,
                    event_type TEXT,
                    category TEXT,
                    tags TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT
                )
                """
            )
        )

    async def ensure_index(index_sql: str) -> None:
        try:
            async with engine.begin() as conn:
                await conn.execute(sql_text(index_sql))
        except Exception:
            return

    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{EVENTS_TABLE}_start "
        f"ON {EVENTS_TABLE} (start_at, all_day)"
    )
    await ensure_index(
        f"CREATE INDEX IF NOT EXISTS idx_{EVENTS_TABLE}_status_end "
        f"ON {EVENTS_TABLE} (status, end_at)"
    )
