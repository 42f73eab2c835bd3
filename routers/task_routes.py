# routers/task_routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from config.settings import TASKS_TABLE
from schemas.reports import TaskCreate
from services.session import SessionState, require_session
from services.supabase.client import SupabaseClient, get_supabase
from services.supabase.table import eq

logger = logging.getLogger(__name__)
router = APIRouter(tags=["tasks"])


@router.get("")
async def list_tasks(
    state: SessionState = Depends(require_session),
    supabase: SupabaseClient = Depends(get_supabase),
):
    rows = await supabase.table(TASKS_TABLE).select(
        filters={"user_id": eq(state.user["id"])},
        order="created_at",
        ascending=False,
    )
    return {"tasks": rows}


async def _read_task(request: Request) -> TaskCreate:
    # Parsed by hand so the session check answers before body errors do
    try:
        payload = await request.json()
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid JSON body")
    try:
        return TaskCreate.model_validate(payload if isinstance(payload, dict) else {})
    except ValidationError:
        raise HTTPException(status_code=400, detail="Task must be a string")


@router.post("")
async def create_task(
    request: Request,
    state: SessionState = Depends(require_session),
    supabase: SupabaseClient = Depends(get_supabase),
):
    body = await _read_task(request)
    if not body.task or not body.task.strip():
        raise HTTPException(status_code=400, detail="Task is required")

    rows = await supabase.table(TASKS_TABLE).insert(
        [{"user_id": state.user["id"], "task": body.task, "completed": False}],
        returning=True,
    )
    logger.info("task_created user_id=%s", state.user["id"])
    return {"task": rows[0] if rows else None}
