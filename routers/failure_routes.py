# routers/failure_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException

from config.settings import FAILURES_TABLE
from schemas.reports import FailureReportCreate
from services.supabase.client import SupabaseClient, get_supabase

logger = logging.getLogger(__name__)
router = APIRouter(tags=["technology-failures"])


@router.get("")
async def list_failure_reports(supabase: SupabaseClient = Depends(get_supabase)):
    return await supabase.table(FAILURES_TABLE).select(order="incident_date", ascending=True)


@router.post("")
async def submit_failure_report(
    body: FailureReportCreate,
    supabase: SupabaseClient = Depends(get_supabase),
):
    if body.addition is None or (isinstance(body.addition, str) and not body.addition.strip()):
        raise HTTPException(status_code=400, detail="Message is required")

    await supabase.table(FAILURES_TABLE).insert([{"addition": body.addition}])
    logger.info("failure_report_submitted")
    return {"success": True, "message": "Message sent!"}
