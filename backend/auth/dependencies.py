from __future__ import annotations

from fastapi import HTTPException, Request

from ..errors import NotFound
from .users import get_user


def optional_user(request: Request) -> dict | None:
    """Session user re-read from the account registry, or ``None``."""
    session_user = request.session.get("user")
    if not session_user:
        return None
    try:
        return get_user(session_user["id"])
    except NotFound:
        request.session.clear()
        return None


def require_user(request: Request) -> dict:
    """Raise 401 without a session, 403 when the session's account is gone."""
    if not request.session.get("user"):
        raise HTTPException(status_code=401, detail="Access token required")
    user = optional_user(request)
    if user is None:
        raise HTTPException(status_code=403, detail="Invalid or expired session")
    return user
