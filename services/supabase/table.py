# services/supabase/table.py
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Mapping, Optional

if TYPE_CHECKING:
    from services.supabase.client import SupabaseClient

REST_PREFIX = "/rest/v1"

_RESERVED = set(',()"\\ ')


def _literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    text = str(value)
    if any(ch in _RESERVED for ch in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def eq(value: Any) -> str:
    return f"eq.{_literal(value)}"


def in_(values: Iterable[Any]) -> str:
    return "in.(" + ",".join(_literal(v) for v in values) + ")"


class Table:
    """PostgREST access to one table. Filters map column -> operator string (see ``eq``/``in_``)."""

    def __init__(self, client: "SupabaseClient", name: str):
        self._client = client
        self.name = name

    @property
    def _path(self) -> str:
        return f"{REST_PREFIX}/{self.name}"

    async def select(
        self,
        *,
        columns: str = "*",
        filters: Optional[Mapping[str, str]] = None,
        order: Optional[str] = None,
        ascending: bool = True,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, str] = {"select": columns}
        params.update(filters or {})
        if order:
            params["order"] = f"{order}.{'asc' if ascending else 'desc'}"
        return await self._client.request("GET", self._path, params=params) or []

    async def insert(self, rows: List[Dict[str, Any]], *, returning: bool = False) -> List[Dict[str, Any]]:
        prefer = "return=representation" if returning else "return=minimal"
        data = await self._client.request(
            "POST", self._path, json_body=rows, headers={"Prefer": prefer}
        )
        return data or []

    async def update(self, values: Dict[str, Any], *, filters: Mapping[str, str]) -> List[Dict[str, Any]]:
        if not filters:
            raise ValueError("update requires at least one filter")
        data = await self._client.request(
            "PATCH",
            self._path,
            params=dict(filters),
            json_body=values,
            headers={"Prefer": "return=representation"},
        )
        return data or []

    async def delete(self, *, filters: Mapping[str, str]) -> List[Dict[str, Any]]:
        if not filters:
            raise ValueError("delete requires at least one filter")
        data = await self._client.request(
            "DELETE",
            self._path,
            params=dict(filters),
            headers={"Prefer": "return=representation"},
        )
        return data or []
