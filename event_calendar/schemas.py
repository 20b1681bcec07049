from __future__ import annotations

from datetime import datetime
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, Field


class EventCreate(BaseModel):
    title: str
    status: str = "publish"
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    all_day: bool = False
    event_type: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class EventPatch(BaseModel):
    title: Optional[str] = None
    status: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    all_day: Optional[bool] = None
    event_type: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None


class EventResponse(BaseModel):
    id: str
    user_email: str
    title: str
    status: str
    start_at: Optional[str]
    end_at: Optional[str]
    all_day: bool
    event_type: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: str
    updated_at: Optional[str] = None


class EventListResponse(BaseModel):
    columns: Dict[str, str]
    sortable: Dict[str, str]
    items: List[Dict[str, Any]]


class CalendarGridResponse(BaseModel):
    mode: str
    date: str
    view_start: str
    view_end: str
    cells: Dict[int, List[str]]
