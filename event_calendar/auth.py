from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request

from event_calendar.settings import get_settings

EDITOR_CAPS = {"read", "edit_events", "delete_events"}
READER_CAPS = {"read"}


async def require_user_email(
    x_user_email: str | None = Header(default=None, alias="X-User-Email"),
    x_backend_token: str | None = Header(default=None, alias="X-Backend-Token"),
) -> str:
    settings = get_settings()
    if not x_backend_token or x_backend_token != settings.backend_session_secret:
        raise HTTPException(status_code=401, detail="Invalid backend token")
    if not x_user_email:
        raise HTTPException(status_code=401, detail="Missing user email")
    email = x_user_email.strip().lower()
    if settings.allowed_emails and email not in settings.allowed_emails:
        raise HTTPException(status_code=403, detail="User not allowed")
    return email


def user_caps(user_email: str) -> set[str]:
    editors = get_settings().editor_emails
    if not editors or user_email in editors:
        return EDITOR_CAPS
    return READER_CAPS


def user_can(hooks, user_email: str, cap: str) -> bool:
    required = hooks.apply_filters("map_meta_cap", [cap], cap, user_email)
    granted = user_caps(user_email)
    return all(item in granted for item in required)


def require_capability(cap: str):
    async def _dependency(request: Request, user_email: str = Depends(require_user_email)) -> str:
        if not user_can(request.app.state.hooks, user_email, cap):
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user_email

    return _dependency
