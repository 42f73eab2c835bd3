# services/session.py
"""
Cookie-backed Supabase sessions.

The browser holds two HttpOnly cookies: the short-lived access token and
the long-lived refresh token. A request is authenticated when the access
token still verifies, or when it can be swapped for a fresh session with
the refresh token.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request, Response, status

from config.settings import (
    ACCESS_COOKIE_MAX_AGE,
    ACCESS_COOKIE_NAME,
    COOKIE_SECURE,
    REFRESH_COOKIE_MAX_AGE,
    REFRESH_COOKIE_NAME,
)
from services.supabase.client import SupabaseClient, SupabaseError, get_supabase

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    user: Optional[Dict[str, Any]] = None
    session: Optional[Dict[str, Any]] = None
    refreshed: bool = False

    @property
    def authenticated(self) -> bool:
        return self.user is not None


def _set_cookie(response: Response, name: str, value: str, max_age: int) -> None:
    response.set_cookie(
        key=name,
        value=value,
        max_age=max_age,
        path="/",
        secure=COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )


def set_session_cookies(response: Response, session: Dict[str, Any]) -> None:
    _set_cookie(response, ACCESS_COOKIE_NAME, session.get("access_token") or "", ACCESS_COOKIE_MAX_AGE)
    _set_cookie(response, REFRESH_COOKIE_NAME, session.get("refresh_token") or "", REFRESH_COOKIE_MAX_AGE)


def clear_session_cookies(response: Response) -> None:
    _set_cookie(response, ACCESS_COOKIE_NAME, "", 0)
    _set_cookie(response, REFRESH_COOKIE_NAME, "", 0)


async def validate_session(request: Request, supabase: SupabaseClient) -> SessionState:
    access_token = request.cookies.get(ACCESS_COOKIE_NAME)
    refresh_token = request.cookies.get(REFRESH_COOKIE_NAME)
    if not access_token or not refresh_token:
        return SessionState()

    try:
        user = await supabase.auth.get_user(access_token)
        return SessionState(
            user=user,
            session={"access_token": access_token, "refresh_token": refresh_token},
        )
    except SupabaseError as exc:
        if not exc.rejected:
            raise
        logger.info("session_access_token_rejected status=%s", exc.status_code)

    try:
        refreshed = await supabase.auth.refresh_session(refresh_token)
    except SupabaseError as exc:
        if not exc.rejected:
            raise
        logger.info("session_refresh_rejected status=%s", exc.status_code)
        return SessionState()

    return SessionState(user=refreshed.get("user"), session=refreshed, refreshed=True)


async def require_session(
    request: Request,
    response: Response,
    supabase: SupabaseClient = Depends(get_supabase),
) -> SessionState:
    """Dependency for cookie-gated routes; re-issues cookies after a refresh."""
    state = await validate_session(request, supabase)
    if not state.authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    if state.refreshed and state.session:
        set_session_cookies(response, state.session)
        # error handlers build their own response; they re-attach from here
        request.state.refreshed_session = state.session
    return state
