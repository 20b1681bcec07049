import pytest

from event_calendar.db import _normalize_database_url


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("postgres://u:p@db.example.com/app", "postgresql+asyncpg://u:p@db.example.com/app"),
        ("postgresql://u:p@localhost/app", "postgresql+asyncpg://u:p@localhost/app"),
        ("postgresql+psycopg2://u:p@localhost/app", "postgresql+asyncpg://u:p@localhost/app"),
        ("sqlite:///./events.db", "sqlite+aiosqlite:///./events.db"),
        ("sqlite+aiosqlite:///./events.db", "sqlite+aiosqlite:///./events.db"),
        ("", ""),
    ],
)
def test_database_url_uses_async_drivers(raw, expected):
    assert _normalize_database_url(raw) == expected


def test_sslmode_becomes_asyncpg_ssl_flag():
    url = _normalize_database_url("postgres://u:p@db.example.com/app?sslmode=require&channel_binding=require&application_name=cal")
    assert url == "postgresql+asyncpg://u:p@db.example.com/app?application_name=cal&ssl=true"
