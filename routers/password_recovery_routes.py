# routers/password_recovery_routes.py
from fastapi import APIRouter, Depends, HTTPException, Request

from config.settings import RATE_LIMIT_AUTH
from middleware.rate_limit import limiter
from schemas.auth import PasswordResetConfirm, PasswordResetRequest
from services.password_recovery_service import confirm_reset, send_reset_email
from services.supabase.client import SupabaseClient, get_supabase

router = APIRouter(tags=["password-recovery"])


@router.post("")
@limiter.limit(RATE_LIMIT_AUTH)
async def request_password_reset(
    body: PasswordResetRequest,
    request: Request,
    supabase: SupabaseClient = Depends(get_supabase),
):
    if not body.email:
        raise HTTPException(status_code=400, detail="Email is required")

    await send_reset_email(supabase, body.email)
    return {"message": "Password reset instructions sent"}


@router.post("/confirm")
@limiter.limit(RATE_LIMIT_AUTH)
async def confirm_password_reset(
    body: PasswordResetConfirm,
    request: Request,
    supabase: SupabaseClient = Depends(get_supabase),
):
    if not body.email or not body.password or not body.token:
        raise HTTPException(status_code=400, detail="Email, password, and token are required")

    await confirm_reset(supabase, body.email, body.password, body.token)
    return {"message": "Password has been reset successfully"}
