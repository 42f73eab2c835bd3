# routers/incident_routes.py
from fastapi import APIRouter, Depends

from schemas.incident import IncidentRequest
from services.incident_service import create_incident, delete_incidents, list_incidents, update_incident
from services.supabase.client import SupabaseClient, get_supabase


def build_incident_router(table: str) -> APIRouter:
    """CRUD over one incidents table; every write answers with the full, re-read list."""
    router = APIRouter(tags=["incidents"])

    @router.get("")
    async def get_incidents(supabase: SupabaseClient = Depends(get_supabase)):
        return await list_incidents(supabase, table)

    @router.post("")
    async def add_incident(body: IncidentRequest, supabase: SupabaseClient = Depends(get_supabase)):
        return await create_incident(supabase, table, body)

    @router.put("")
    async def edit_incident(body: IncidentRequest, supabase: SupabaseClient = Depends(get_supabase)):
        return await update_incident(supabase, table, body)

    @router.delete("")
    async def remove_incidents(body: IncidentRequest, supabase: SupabaseClient = Depends(get_supabase)):
        return await delete_incidents(supabase, table, body)

    return router
