# services/supabase/storage.py
from __future__ import annotations

from typing import TYPE_CHECKING, List
from urllib.parse import quote

if TYPE_CHECKING:
    from services.supabase.client import SupabaseClient

STORAGE_PREFIX = "/storage/v1"


class StorageAPI:
    def __init__(self, client: "SupabaseClient"):
        self._client = client

    async def upload(self, bucket: str, path: str, data: bytes, *, content_type: str) -> str:
        """Upload ``data`` and return its path inside the bucket."""
        await self._client.request(
            "POST",
            f"{STORAGE_PREFIX}/object/{bucket}/{quote(path)}",
            content=data,
            headers={"Content-Type": content_type, "x-upsert": "false"},
        )
        return path

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self._client.url}{STORAGE_PREFIX}/object/public/{bucket}/{quote(path)}"

    async def remove(self, bucket: str, paths: List[str]) -> None:
        await self._client.request(
            "DELETE", f"{STORAGE_PREFIX}/object/{bucket}", json_body={"prefixes": paths}
        )
