# services/incident_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import HTTPException

from schemas.incident import IncidentRequest
from services.artifacts import build_artifact, discard_artifact
from services.supabase.client import SupabaseClient, SupabaseError
from services.supabase.table import eq, in_

logger = logging.getLogger(__name__)

ORDER_COLUMN = "incident_date"


async def list_incidents(supabase: SupabaseClient, table: str) -> List[Dict[str, Any]]:
    return await supabase.table(table).select(order=ORDER_COLUMN, ascending=True)


async def create_incident(supabase: SupabaseClient, table: str, body: IncidentRequest) -> List[Dict[str, Any]]:
    if body.addition is None:
        raise HTTPException(status_code=400, detail="Incident data is required")

    artifact = await build_artifact(supabase, body)
    row = dict(body.addition)
    if body.artifact_type is not None:
        row["artifact"] = artifact.data

    try:
        await supabase.table(table).insert([row])
    except SupabaseError:
        await discard_artifact(supabase, artifact)
        raise

    logger.info("incident_created table=%s artifact=%s", table, body.artifact_type or "-")
    return await list_incidents(supabase, table)


async def update_incident(supabase: SupabaseClient, table: str, body: IncidentRequest) -> List[Dict[str, Any]]:
    if body.id is None:
        raise HTTPException(status_code=400, detail="Incident id is required")

    if not body.update and body.artifact_type is None:
        raise HTTPException(status_code=400, detail="Nothing to update")

    values = dict(body.update or {})
    artifact = await build_artifact(supabase, body, is_update=True)
    if body.artifact_type is not None:
        values["artifact"] = artifact.data

    try:
        updated = await supabase.table(table).update(values, filters={"id": eq(body.id)})
    except SupabaseError:
        await discard_artifact(supabase, artifact)
        raise

    logger.info("incident_updated table=%s id=%s rows=%d", table, body.id, len(updated))
    return await list_incidents(supabase, table)


async def delete_incidents(supabase: SupabaseClient, table: str, body: IncidentRequest) -> List[Dict[str, Any]]:
    if body.ids:
        filters = {"id": in_(body.ids)}
    elif body.id is not None:
        filters = {"id": eq(body.id)}
    else:
        raise HTTPException(status_code=400, detail="No valid ID(s) provided")

    deleted = await supabase.table(table).delete(filters=filters)
    logger.info("incidents_deleted table=%s rows=%d", table, len(deleted))
    return await list_incidents(supabase, table)
