from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse

from event_calendar.auth import require_user_email
from event_calendar import repositories
from event_calendar.model import EVENT_POST_TYPE, Event
from event_calendar.query import now_in_timezone, today_in_timezone
from event_calendar.schemas import CalendarGridResponse
from event_calendar.settings import get_settings
from event_calendar.tables import TableRenderer, get_table, setup_items

logger = logging.getLogger(__name__)

router = APIRouter()


def _target_day(cd: str | None, tz_name: str) -> date:
    if not cd:
        return today_in_timezone(tz_name)
    try:
        return date.fromisoformat(cd)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format")


async def _load_table(request: Request, mode: str, cd: str | None) -> TableRenderer:
    settings = get_settings()
    target = _target_day(cd, settings.calendar_timezone)
    try:
        table = get_table(mode, target)
    except ValueError:
        raise HTTPException(status_code=404, detail="Unknown calendar mode")
    hooks = request.app.state.hooks
    query = table.main_query_args(EVENT_POST_TYPE)
    query = hooks.apply_filters("pre_get_events", query, dict(request.query_params))
    rows = await repositories.query_events(query)
    setup_items(table, (Event.from_row(row) for row in rows), max=settings.calendar_cell_max)
    return table


@router.get("/v1/calendar/{mode}", response_class=HTMLResponse)
async def calendar_view(
    request: Request,
    mode: str,
    cd: str | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    table = await _load_table(request, mode, cd)
    now = now_in_timezone(get_settings().calendar_timezone)
    return HTMLResponse(table.display(now, base_url=request.url.path))


@router.get("/v1/calendar/{mode}/grid", response_model=CalendarGridResponse)
async def calendar_grid(
    request: Request,
    mode: str,
    cd: str | None = Query(None),
    user_email: str = Depends(require_user_email),
):
    table = await _load_table(request, mode, cd)
    return {
        "mode": table.mode,
        "date": table.today.isoformat(),
        "view_start": table.window.view_start,
        "view_end": table.window.view_end,
        "cells": table.grid.as_ids(),
    }
