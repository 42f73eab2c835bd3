"""
Central logging configuration for the handlers.

- Lambda-friendly: JSON logs when LOG_JSON=1 or AWS_LAMBDA_FUNCTION_NAME is set.
- LOG_LEVEL from env (default INFO).
- Never log credentials: no emails, passwords, access/refresh tokens or
  cookie values. Log ids and counts instead.
"""
import json
import logging
import os
import sys
from typing import Any


def _json_serial(obj: Any):
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


# Attributes every LogRecord carries; anything else came in through ``extra=``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "taskName"}

# Never let these reach the log stream, even if someone passes them in extra
_REDACTED_FIELDS = frozenset({
    "email", "password", "token", "access_token", "refresh_token", "cookie", "authorization",
})


def record_fields(record: logging.LogRecord) -> dict:
    """The ``extra=`` fields of a record, with credential-like keys masked."""
    fields = {}
    for key, value in record.__dict__.items():
        if key in _RECORD_ATTRS or key.startswith("_") or value is None:
            continue
        fields[key] = "[redacted]" if key.lower() in _REDACTED_FIELDS else value
    return fields


class JsonFormatter(logging.Formatter):
    """One JSON object per line, for CloudWatch and friends.

    Fields passed with ``logger.info(..., extra={...})`` become top-level
    keys (``aws_request_id`` included), so the ``event key=value`` text and
    the structured fields travel together.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            payload["exception"] = self.formatException(record.exc_info)
        for key, value in record_fields(record).items():
            payload.setdefault(key, value)
        return json.dumps(payload, default=_json_serial)


def configure_logging() -> None:
    """Configure root logger: level from LOG_LEVEL, JSON format on Lambda."""
    level_name = (os.getenv("LOG_LEVEL") or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    use_json = (
        os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")
        or bool(os.getenv("AWS_LAMBDA_FUNCTION_NAME"))
    )

    root = logging.getLogger()
    root.setLevel(level)
    # Lambda pre-installs a handler; replace it so lines aren't duplicated
    for h in root.handlers[:]:
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    if use_json:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("mangum").setLevel(logging.WARNING)
