# services/supabase/client.py
from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

import httpx
from fastapi import HTTPException

from config.settings import SUPABASE_SERVICE_ROLE_KEY, SUPABASE_TIMEOUT_SEC, SUPABASE_URL
from services.supabase.auth_api import AuthAPI
from services.supabase.storage import StorageAPI
from services.supabase.table import Table

logger = logging.getLogger(__name__)


class SupabaseError(RuntimeError):
    """Raised when a Supabase call fails or cannot be made.

    ``status_code`` is the HTTP status Supabase answered with, or ``None``
    when the request never got an answer (timeout, DNS, refused...).
    A 2xx status means the answer was unreadable, not a refusal.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    @property
    def rejected(self) -> bool:
        """Supabase answered and said no (4xx/5xx)."""
        return self.status_code is not None and self.status_code >= 400


def _error_message(resp: httpx.Response) -> tuple[str, Optional[str]]:
    # GoTrue, PostgREST and Storage each name these fields differently
    try:
        body = resp.json()
    except json.JSONDecodeError:
        return (resp.text[:500] or f"Supabase request failed with status {resp.status_code}"), None

    if isinstance(body, dict):
        message = (
            body.get("msg")
            or body.get("error_description")
            or body.get("message")
            or body.get("error")
        )
        code = body.get("error_code") or body.get("code")
        if message:
            return str(message), (str(code) if code is not None else None)
    return f"Supabase request failed with status {resp.status_code}", None


class SupabaseClient:
    """Service-role client for the auth, REST and storage endpoints of one project."""

    def __init__(
        self,
        url: str,
        service_key: str,
        *,
        timeout: float = SUPABASE_TIMEOUT_SEC,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url.rstrip("/")
        self.service_key = service_key
        self._http = httpx.AsyncClient(
            base_url=self.url,
            timeout=httpx.Timeout(timeout, connect=min(timeout, 5.0)),
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
            },
            transport=transport,
        )
        self.auth = AuthAPI(self)
        self.storage = StorageAPI(self)

    def table(self, name: str) -> Table:
        return Table(self, name)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[bytes] = None,
    ) -> Any:
        kwargs: dict[str, Any] = {"params": params, "headers": headers}
        if content is not None:
            kwargs["content"] = content
        elif json_body is not None:
            kwargs["json"] = json_body

        try:
            resp = await self._http.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            logger.error("supabase_unreachable method=%s path=%s error=%s", method, path, type(exc).__name__)
            raise SupabaseError(f"Supabase is unreachable: {exc}") from exc

        if resp.status_code >= 400:
            message, code = _error_message(resp)
            logger.warning(
                "supabase_error method=%s path=%s status=%s code=%s",
                method, path, resp.status_code, code,
                extra={"supabase_path": path, "supabase_status": resp.status_code},
            )
            raise SupabaseError(message, status_code=resp.status_code, code=code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except json.JSONDecodeError:
            # usually a proxy or gateway page in front of the project
            logger.warning(
                "supabase_non_json_response method=%s path=%s status=%s content_type=%s",
                method, path, resp.status_code, resp.headers.get("content-type"),
            )
            raise SupabaseError(
                "Supabase returned a non-JSON response", status_code=resp.status_code
            )

    async def aclose(self) -> None:
        await self._http.aclose()


_client: SupabaseClient | None = None


def get_supabase() -> SupabaseClient:
    """FastAPI dependency: the shared client, created on first use."""
    global _client
    if _client is None:
        if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
            logger.error(
                "supabase_missing_config url_set=%s service_key_set=%s",
                bool(SUPABASE_URL),
                bool(SUPABASE_SERVICE_ROLE_KEY),
            )
            raise HTTPException(status_code=500, detail="Supabase is not configured")
        _client = SupabaseClient(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
    return _client


async def close_supabase() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
