# middleware/error_handlers.py
"""
Every failure leaves the API as ``{"error": "<message>"}``.

- HTTPException (explicit checks, routing 404/405): its own status.
- Request body validation: 400.
- ArtifactError: 400.
- SupabaseError: 500 with the message Supabase gave us.
- Anything else: 500.

Cookies re-issued by a session refresh earlier in the request are kept
on the error response.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from services.artifacts import ArtifactError
from services.session import set_session_cookies
from services.supabase.client import SupabaseError

logger = logging.getLogger(__name__)


def error_response(request: Request, status_code: int, message: str, headers=None) -> JSONResponse:
    response = JSONResponse(status_code=status_code, content={"error": message}, headers=headers)
    refreshed = getattr(request.state, "refreshed_session", None)
    if refreshed:
        set_session_cookies(response, refreshed)
    return response


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(request, exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Invalid request")
        if field:
            message = f"{field}: {message}"
    else:
        message = "Invalid request"
    return error_response(request, 400, message)


async def artifact_exception_handler(request: Request, exc: ArtifactError) -> JSONResponse:
    return error_response(request, 400, str(exc))


async def supabase_exception_handler(request: Request, exc: SupabaseError) -> JSONResponse:
    logger.error(
        "supabase_call_failed path=%s status=%s code=%s",
        request.url.path, exc.status_code, exc.code,
    )
    return error_response(request, 500, exc.message)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error path=%s", request.url.path)
    return error_response(request, 500, str(exc) or "Unknown error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ArtifactError, artifact_exception_handler)
    app.add_exception_handler(SupabaseError, supabase_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
