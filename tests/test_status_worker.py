import asyncio
import logging

from event_calendar.hooks import HookRegistry
from event_calendar.workers.status_worker import process_statuses_once


def test_process_statuses_runs_update_events_action():
    calls = []
    registry = HookRegistry()

    async def _update():
        calls.append("updated")

    registry.add_action("update_events", _update)
    asyncio.run(process_statuses_once(registry))
    assert calls == ["updated"]


def test_process_statuses_logs_failures(caplog):
    registry = HookRegistry()

    async def _boom():
        raise RuntimeError("database unavailable")

    registry.add_action("update_events", _boom)
    with caplog.at_level(logging.ERROR):
        asyncio.run(process_statuses_once(registry))
    assert "Event status update failed" in caplog.text
