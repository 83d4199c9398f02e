"""Logging setup shared by the service modules and the HTTP surface.

Plain text by default; structured JSON lines when ``json_logs`` is enabled.
"""

from __future__ import annotations

import contextvars
import datetime
import json
import logging
import sys

from anisub.settings import settings

# Per-request context for correlation
REQUEST_ID: contextvars.ContextVar[str] = contextvars.ContextVar("request_id", default="")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s]%(rid)s %(message)s"
DATE_FORMAT = "%H:%M:%S"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload = {
            "ts": datetime.datetime.now(datetime.timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        rid = REQUEST_ID.get("")
        if rid:
            payload["rid"] = rid
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


class RequestIdFilter(logging.Filter):
    """Attach the active request id as ``record.rid`` for the text format."""

    def filter(self, record: logging.LogRecord) -> bool:
        rid = REQUEST_ID.get("")
        record.rid = f" [rid={rid}]" if rid else ""
        return True


def _build_handler(json_logs: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))
        handler.addFilter(RequestIdFilter())
    return handler


def setup_logging(level: str | None = None, json_logs: bool | None = None) -> logging.Logger:
    level = (level or settings.log_level).upper()
    if json_logs is None:
        json_logs = settings.json_logs

    root = logging.getLogger("anisub")
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.addHandler(_build_handler(json_logs))
    root.propagate = False
    return root
