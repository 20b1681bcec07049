from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from event_calendar.db import dispose_engine
from event_calendar.db_init import init_db
from event_calendar.hooks import build_registry
from event_calendar.routes import calendar, events
from event_calendar.settings import get_settings


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )
    app = FastAPI(title="Event Calendar API", version="0.1.0")
    app.state.hooks = build_registry()

    app.include_router(calendar.router)
    app.include_router(events.router)

    @app.on_event("startup")
    async def _startup():
        await app.state.hooks.do_action("init", app.state.hooks)
        await init_db()

    @app.on_event("shutdown")
    async def _shutdown():
        await dispose_engine()

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception):
        logging.getLogger("event_calendar").exception("Unhandled exception: %s", exc)
        return JSONResponse(status_code=500, content={"detail": "Internal error"})

    @app.get("/health")
    async def health():
        return {"ok": True}

    return app


app = create_app()
