# services/supabase/auth_api.py
"""
GoTrue (``/auth/v1``) calls used by the handlers.

Session payloads are returned as Supabase sends them:
``{"access_token", "refresh_token", "expires_in", "token_type", "user", ...}``.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from services.supabase.client import SupabaseClient

AUTH_PREFIX = "/auth/v1"
ADMIN_USERS_PAGE_SIZE = 200


def _bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def split_session(data: Optional[Dict[str, Any]]) -> tuple[Optional[dict], Optional[dict]]:
    """Return ``(user, session)`` from a signup/token response.

    Signup answers with a bare user object when email confirmation is
    required, and with a full session otherwise.
    """
    if not data:
        return None, None
    if "access_token" in data:
        return data.get("user"), data
    return data, None


class AuthAPI:
    def __init__(self, client: "SupabaseClient"):
        self._client = client

    async def sign_up(self, email: str, password: str) -> Dict[str, Any]:
        return await self._client.request(
            "POST", f"{AUTH_PREFIX}/signup", json_body={"email": email, "password": password}
        )

    async def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        return await self._client.request(
            "POST",
            f"{AUTH_PREFIX}/token",
            params={"grant_type": "password"},
            json_body={"email": email, "password": password},
        )

    async def refresh_session(self, refresh_token: str) -> Dict[str, Any]:
        return await self._client.request(
            "POST",
            f"{AUTH_PREFIX}/token",
            params={"grant_type": "refresh_token"},
            json_body={"refresh_token": refresh_token},
        )

    async def get_user(self, access_token: str) -> Dict[str, Any]:
        return await self._client.request("GET", f"{AUTH_PREFIX}/user", headers=_bearer(access_token))

    async def sign_out(self, access_token: str) -> None:
        await self._client.request("POST", f"{AUTH_PREFIX}/logout", headers=_bearer(access_token))

    async def reset_password_for_email(self, email: str, *, redirect_to: Optional[str] = None) -> None:
        params = {"redirect_to": redirect_to} if redirect_to else None
        await self._client.request(
            "POST", f"{AUTH_PREFIX}/recover", params=params, json_body={"email": email}
        )

    async def verify_otp(self, email: str, token: str, type: str = "recovery") -> Dict[str, Any]:
        return await self._client.request(
            "POST",
            f"{AUTH_PREFIX}/verify",
            json_body={"type": type, "email": email, "token": token},
        )

    # ----------------------------
    # Admin (service-role only)
    # ----------------------------

    async def admin_list_users(self, *, page: int = 1, per_page: int = ADMIN_USERS_PAGE_SIZE) -> List[Dict[str, Any]]:
        data = await self._client.request(
            "GET", f"{AUTH_PREFIX}/admin/users", params={"page": page, "per_page": per_page}
        )
        if isinstance(data, dict):
            return list(data.get("users") or [])
        return list(data or [])

    async def admin_find_user_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        wanted = email.strip().lower()
        page = 1
        while True:
            users = await self.admin_list_users(page=page)
            for user in users:
                if (user.get("email") or "").lower() == wanted:
                    return user
            if len(users) < ADMIN_USERS_PAGE_SIZE:
                return None
            page += 1

    async def admin_update_user_by_id(self, user_id: str, attributes: Dict[str, Any]) -> Dict[str, Any]:
        return await self._client.request(
            "PUT", f"{AUTH_PREFIX}/admin/users/{user_id}", json_body=attributes
        )
