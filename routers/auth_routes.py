# routers/auth_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from config.settings import ACCESS_COOKIE_NAME, RATE_LIMIT_AUTH
from middleware.rate_limit import limiter
from schemas.auth import Credentials
from services.session import clear_session_cookies, set_session_cookies, validate_session
from services.supabase.auth_api import split_session
from services.supabase.client import SupabaseClient, SupabaseError, get_supabase

logger = logging.getLogger(__name__)
router = APIRouter(tags=["authentication"])

# GoTrue answers these for a token that is already expired or revoked
_STALE_TOKEN_STATUSES = {401, 403, 404}


def _require_credentials(body: Credentials) -> tuple[str, str]:
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")
    return body.email, body.password


@router.post("/signup")
@limiter.limit(RATE_LIMIT_AUTH)
async def signup(
    body: Credentials,
    request: Request,
    supabase: SupabaseClient = Depends(get_supabase),
):
    email, password = _require_credentials(body)
    data = await supabase.auth.sign_up(email, password)
    user, session = split_session(data)
    logger.info("signup_ok confirmed=%s", session is not None)
    return {"user": user, "session": session}


@router.post("/signin")
@limiter.limit(RATE_LIMIT_AUTH)
async def signin(
    body: Credentials,
    request: Request,
    response: Response,
    supabase: SupabaseClient = Depends(get_supabase),
):
    email, password = _require_credentials(body)
    session = await supabase.auth.sign_in_with_password(email, password)
    set_session_cookies(response, session)
    logger.info("signin_ok user_id=%s", (session.get("user") or {}).get("id"))
    return {"user": session.get("user"), "session": session}


@router.post("/signout")
async def signout(
    request: Request,
    response: Response,
    supabase: SupabaseClient = Depends(get_supabase),
):
    access_token = request.cookies.get(ACCESS_COOKIE_NAME)
    if access_token:
        try:
            await supabase.auth.sign_out(access_token)
        except SupabaseError as exc:
            if exc.status_code not in _STALE_TOKEN_STATUSES:
                raise
            logger.info("signout_stale_token status=%s", exc.status_code)

    clear_session_cookies(response)
    return {"success": True}


@router.get("/user")
async def current_user(
    request: Request,
    response: Response,
    supabase: SupabaseClient = Depends(get_supabase),
):
    state = await validate_session(request, supabase)
    if not state.authenticated:
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"user": None, "session": None},
        )

    if state.refreshed and state.session:
        set_session_cookies(response, state.session)
    return {"user": state.user, "session": state.session}
