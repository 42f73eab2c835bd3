# services/password_recovery_service.py
from __future__ import annotations

import logging

from fastapi import HTTPException, status

from config.settings import PASSWORD_RESET_REDIRECT_URL
from services.supabase.client import SupabaseClient, SupabaseError

logger = logging.getLogger(__name__)


async def send_reset_email(supabase: SupabaseClient, email: str) -> None:
    await supabase.auth.reset_password_for_email(email, redirect_to=PASSWORD_RESET_REDIRECT_URL)
    logger.info("password_reset_requested")


async def confirm_reset(supabase: SupabaseClient, email: str, password: str, token: str) -> None:
    """
    Set a new password for ``email`` once ``token`` checks out.

    The token is the one Supabase mailed for the recovery flow; it has to
    verify for the same account we are about to update.
    """
    user = await supabase.auth.admin_find_user_by_email(email)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    try:
        verified = await supabase.auth.verify_otp(email, token, "recovery")
    except SupabaseError as exc:
        if not exc.rejected:
            raise
        logger.warning("password_reset_token_rejected status=%s", exc.status_code)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    verified_user = (verified or {}).get("user") or {}
    if verified_user.get("id") != user.get("id"):
        logger.warning("password_reset_token_user_mismatch user_id=%s", user.get("id"))
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

    await supabase.auth.admin_update_user_by_id(user["id"], {"password": password})
    logger.info("password_reset_completed user_id=%s", user["id"])
