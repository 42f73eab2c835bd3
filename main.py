# main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from config.logging_config import configure_logging
from config.settings import CORS_ORIGINS, INCIDENTS_ALT_TABLE, INCIDENTS_TABLE
from middleware.error_handlers import register_exception_handlers
from middleware.rate_limit import limiter
from middleware.request_logging import RequestLoggingMiddleware
from routers.auth_routes import router as auth_router
from routers.failure_routes import router as failure_router
from routers.incident_routes import build_incident_router
from routers.password_recovery_routes import router as password_recovery_router
from routers.task_routes import router as task_router
from services.supabase.client import close_supabase

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_supabase()


app = FastAPI(title="incident-desk", lifespan=lifespan)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
register_exception_handlers(app)

# default limits (RATE_LIMIT_DEFAULT) only apply through the middleware
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Include routers
app.include_router(auth_router, prefix="/authentication")
app.include_router(password_recovery_router, prefix="/password-recovery")
app.include_router(build_incident_router(INCIDENTS_TABLE), prefix="/tech-incidents")
app.include_router(build_incident_router(INCIDENTS_ALT_TABLE), prefix="/incidents")
app.include_router(failure_router, prefix="/technology-failures")
app.include_router(task_router, prefix="/validate-auth")
