from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder

from event_calendar.auth import require_capability, require_user_email
from event_calendar.schemas import EventCreate, EventListResponse, EventPatch, EventResponse
from event_calendar import repositories
from event_calendar.query import EventQuery

logger = logging.getLogger(__name__)

router = APIRouter()

BASE_COLUMNS = {"title": "Title", "date": "Date"}


@router.get("/v1/events", response_model=EventListResponse)
async def list_events(request: Request, user_email: str = Depends(require_user_email)):
    hooks = request.app.state.hooks
    query = hooks.apply_filters("pre_get_events", EventQuery(), dict(request.query_params))
    items = await repositories.query_events(query)
    columns = hooks.apply_filters("event_columns", dict(BASE_COLUMNS))
    for item in items:
        item["column_data"] = {
            column: hooks.apply_filters("event_column_data", "", column, item) for column in columns
        }
    return {
        "columns": columns,
        "sortable": hooks.apply_filters("event_sortable_columns", {"title": "title"}),
        "items": jsonable_encoder(items),
    }


def _merge_saved_dates(data: dict, record: dict) -> dict:
    # Dates are normalized together, so a partial change carries the stored ones.
    if not {"start", "end", "all_day"} & set(data):
        return data
    merged = dict(data)
    merged.setdefault("start", record.get("start_at"))
    merged.setdefault("end", record.get("end_at"))
    merged.setdefault("all_day", bool(record.get("all_day")))
    return merged


@router.get("/v1/events/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, user_email: str = Depends(require_user_email)):
    record = await repositories.get_event(event_id)
    if not record:
        raise HTTPException(status_code=404, detail="Event not found")
    return jsonable_encoder(record)


@router.post("/v1/events", response_model=EventResponse)
async def create_event(
    request: Request,
    payload: EventCreate,
    user_email: str = Depends(require_capability("edit_events")),
):
    try:
        clean = request.app.state.hooks.apply_filters("save_event", payload.model_dump())
        record = await repositories.create_event(user_email, clean)
        return jsonable_encoder(record)
    except Exception as exc:
        logger.exception("Failed to create event: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")


@router.patch("/v1/events/{event_id}", response_model=EventResponse)
async def patch_event(
    request: Request,
    event_id: str,
    payload: EventPatch,
    user_email: str = Depends(require_capability("edit_event")),
):
    data = payload.model_dump(exclude_unset=True)
    if not data:
        raise HTTPException(status_code=400, detail="No changes provided")
    existing = await repositories.get_event(event_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Event not found")
    try:
        patch = request.app.state.hooks.apply_filters("save_event", _merge_saved_dates(data, existing))
        record = await repositories.update_event(event_id, patch)
    except Exception as exc:
        logger.exception("Failed to update event: %s", exc)
        raise HTTPException(status_code=500, detail="Internal error")
    if not record:
        raise HTTPException(status_code=404, detail="Event not found")
    return jsonable_encoder(record)


@router.delete("/v1/events/{event_id}")
async def delete_event(event_id: str, user_email: str = Depends(require_capability("delete_event"))):
    deleted = await repositories.delete_event(event_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Event not found")
    return {"ok": True}


@router.post("/v1/events/update-statuses")
async def run_status_update(request: Request, user_email: str = Depends(require_capability("edit_events"))):
    await request.app.state.hooks.do_action("update_events")
    return {"ok": True}
