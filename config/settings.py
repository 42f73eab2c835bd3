# config/settings.py
import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "0") -> bool:
    return (os.getenv(name, default) or "").strip().lower() in ("1", "true", "yes")


# ─── Supabase ──────────────────────────────────────────────────────
SUPABASE_URL = os.getenv("SUPABASE_URL", "").rstrip("/")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_TIMEOUT_SEC = float(os.getenv("SUPABASE_TIMEOUT_SEC", "10"))

# Supabase appends the recovery token to this URL in the reset email
PASSWORD_RESET_REDIRECT_URL = os.getenv(
    "PASSWORD_RESET_REDIRECT_URL", "http://localhost:3000/reset_password/confirm"
)

# ─── Tables / buckets ──────────────────────────────────────────────
INCIDENTS_TABLE = os.getenv("INCIDENTS_TABLE", "tech-incidents")
INCIDENTS_ALT_TABLE = os.getenv("INCIDENTS_ALT_TABLE", "tech_incidents")
FAILURES_TABLE = os.getenv("FAILURES_TABLE", "technology-failures")
TASKS_TABLE = os.getenv("TASKS_TABLE", "user_tasks")
ARTIFACT_BUCKET = os.getenv("ARTIFACT_BUCKET", "incident-artifacts")

# ─── Session cookies ───────────────────────────────────────────────
ACCESS_COOKIE_NAME = "sb-access-token"
REFRESH_COOKIE_NAME = "sb-refresh-token"
ACCESS_COOKIE_MAX_AGE = int(os.getenv("ACCESS_COOKIE_MAX_AGE", "3600"))
REFRESH_COOKIE_MAX_AGE = int(os.getenv("REFRESH_COOKIE_MAX_AGE", "7776000"))  # 90 days
COOKIE_SECURE = _env_flag("COOKIE_SECURE", "1")

# ─── HTTP surface ──────────────────────────────────────────────────
CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if o.strip()
]

RATE_LIMIT_ENABLED = _env_flag("RATE_LIMIT_ENABLED", "1")
RATE_LIMIT_DEFAULT = os.getenv("RATE_LIMIT_DEFAULT", "60/minute")
RATE_LIMIT_AUTH = os.getenv("RATE_LIMIT_AUTH", "10/minute")
