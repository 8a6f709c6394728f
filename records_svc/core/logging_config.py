"""
Structured logging for the Patient Records API.

Every record is written to stdout, either as one JSON object per line or
as a plain text line for local runs. The request id set by
LoggingMiddleware travels in a ContextVar; FastAPI copies the context into
the threadpool that runs sync endpoints, so repository and unit-of-work
logs carry it as well.

    {"timestamp": "2024-01-15T10:30:00.123Z", "level": "INFO",
     "logger": "repositories.unit_of_work",
     "message": "Committed 1 staged change(s)",
     "request_id": "abc12345", "extra": {"affected_rows": 1}}

Level and format come from RECORDS_SVC_LOG_LEVEL / RECORDS_SVC_LOG_JSON.
"""
import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Top-level packages of this service
APP_LOGGERS = ("main", "core", "api", "services", "repositories", "models", "schemas")
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# LogRecord attributes that are never copied into "extra"
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def get_request_id() -> Optional[str]:
    return _request_id.get()


def set_request_id(request_id: str) -> None:
    _request_id.set(request_id)


def clear_request_id() -> None:
    _request_id.set(None)


class JSONFormatter(logging.Formatter):
    """One JSON object per record, UTC timestamps with millisecond precision."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            entry["request_id"] = request_id
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra = {
            key: value
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Install a single stdout handler on the root logger.

    Application and uvicorn loggers drop their own handlers and propagate
    to it. Called once from the lifespan in main.py.
    """
    level = level.upper()

    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for name in APP_LOGGERS + UVICORN_LOGGERS:
        logger = logging.getLogger(name)
        logger.handlers = []
        logger.propagate = True
    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"level": level, "format": "json" if json_format else "text"}
    )
