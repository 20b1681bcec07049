import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./event_calendar_test.db")
os.environ.setdefault("BACKEND_SESSION_SECRET", "test-secret")
os.environ.setdefault("CALENDAR_TIMEZONE", "UTC")

import pytest
from fastapi.testclient import TestClient

from event_calendar.settings import reset_settings

SECRET = "test-secret"
EDITOR = "editor@example.com"


def auth_headers(email=EDITOR):
    return {"X-Backend-Token": SECRET, "X-User-Email": email}


@pytest.fixture
def make_client(tmp_path, monkeypatch):
    clients = []

    def _make(**env):
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'events.db'}")
        monkeypatch.setenv("BACKEND_SESSION_SECRET", SECRET)
        monkeypatch.setenv("CALENDAR_TIMEZONE", "UTC")
        for key, value in env.items():
            monkeypatch.setenv(key, value)
        reset_settings()
        from event_calendar.main import create_app

        client = TestClient(create_app())
        client.__enter__()
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.__exit__(None, None, None)
    reset_settings()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def headers():
    return auth_headers()


def tbody_rows(markup):
    body = markup.split("<tbody>", 1)[1].split("</tbody>", 1)[0]
    return body.split("<tr")[1:]
