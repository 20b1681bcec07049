from __future__ import annotations

import asyncio
import logging

from event_calendar.db_init import init_db
from event_calendar.hooks import HookRegistry, build_registry
from event_calendar.settings import get_settings

logger = logging.getLogger(__name__)


async def process_statuses_once(hooks: HookRegistry) -> None:
    try:
        await hooks.do_action("update_events")
    except Exception as exc:
        logger.exception("Event status update failed: %s", exc)


async def run_forever() -> None:
    settings = get_settings()
    hooks = build_registry()
    await hooks.do_action("init", hooks)
    await init_db()
    while True:
        await process_statuses_once(hooks)
        await asyncio.sleep(max(1, settings.event_status_interval_seconds))


if __name__ == "__main__":
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    asyncio.run(run_forever())
