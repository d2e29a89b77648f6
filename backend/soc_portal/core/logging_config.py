"""
SOC Portal - Logging

Every record is stamped with the request id and the session's correlation
values (eid, socPortalId) taken from context variables, so one login can be
followed across handlers and audit rows.

Production writes one JSON object per line; development writes a readable
line. A rotating file handler is added when LOG_FILE is set.
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from soc_portal.core.config import settings


# Correlation fields, in the order they are printed
_CONTEXT: Dict[str, ContextVar] = {
    "request_id": ContextVar("request_id", default=""),
    "eid": ContextVar("eid", default=""),
    "soc_portal_id": ContextVar("soc_portal_id", default=""),
}


def set_request_id(value: str) -> None:
    _CONTEXT["request_id"].set(value or "")


def set_eid(value: str) -> None:
    _CONTEXT["eid"].set(value or "")


def set_portal_id(value: str) -> None:
    _CONTEXT["soc_portal_id"].set(value or "")


def clear_context() -> None:
    for var in _CONTEXT.values():
        var.set("")


def current_context() -> Dict[str, str]:
    """Non-empty correlation values for the running request"""
    return {name: var.get() for name, var in _CONTEXT.items() if var.get()}


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


# Present on every LogRecord; anything else arrived through `extra`
_RECORD_FIELDS = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log shipping"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(current_context())

        for key, value in record.__dict__.items():
            if key not in _RECORD_FIELDS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info and record.exc_info[0]:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Readable lines; `extra` correlation values win over the request context"""

    def format(self, record: logging.LogRecord) -> str:
        context = current_context()
        for name in _CONTEXT:
            if not getattr(record, name, None):
                setattr(record, name, context.get(name, "-"))
        return super().format(record)


class SocPortalLogger(logging.Logger):
    """Logger with helpers for the portal's recurring events"""

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.log(
            level,
            f"{method} {path} - {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": round(duration_ms, 2),
                **kwargs
            }
        )

    def log_auth_event(self, event: str, success: bool, user_email: str = None,
                       reason: str = None, severity: str = None, **kwargs) -> None:
        """Login, logout and gate decisions"""
        parts = [f"Auth {event}: {'success' if success else 'failed'}"]
        if user_email:
            parts.append(user_email)
        if reason:
            parts.append(reason)
        self.log(
            logging.INFO if success else logging.WARNING,
            " - ".join(parts),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "user_email": user_email,
                "failure_reason": reason,
                "severity": severity or ("LOW" if success else "MEDIUM"),
                **kwargs
            }
        )

    def log_audit_event(self, action: str, actor: str, description: str,
                        **kwargs) -> None:
        self.info(
            f"Audit {action} by {actor}: {description}",
            extra={"event_type": "audit", "audit_action": action, "actor": actor, **kwargs}
        )

    def log_error_with_context(self, error: Exception, context: str = None,
                               critical: bool = False, **kwargs) -> None:
        self.log(
            logging.CRITICAL if critical else logging.ERROR,
            f"Error in {context}: {type(error).__name__}: {error}",
            exc_info=error,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_message": str(error),
                "error_context": context,
                **kwargs
            }
        )


DEV_CONSOLE_FORMAT = "%(levelname)-8s | %(message)s"
DEV_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | "
    "[%(request_id)s] [%(eid)s] [%(soc_portal_id)s] | "
    "%(funcName)s:%(lineno)d | %(message)s"
)


def _file_handler(formatter: logging.Formatter) -> Optional[RotatingFileHandler]:
    if not settings.LOG_FILE:
        return None
    path = Path(settings.LOG_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=10 * 1024 * 1024, backupCount=5)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> SocPortalLogger:
    logging.setLoggerClass(SocPortalLogger)
    logger = logging.getLogger("soc_portal")
    logger.__class__ = SocPortalLogger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.handlers.clear()

    if settings.is_production:
        console_formatter = file_formatter = JSONFormatter()
    else:
        console_formatter = ContextualFormatter(DEV_CONSOLE_FORMAT)
        file_formatter = ContextualFormatter(DEV_FILE_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(console_formatter)
    logger.addHandler(console)

    file_handler = _file_handler(file_formatter)
    if file_handler:
        logger.addHandler(file_handler)

    for noisy in ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.debug(
        "Logging initialized",
        extra={"environment": settings.ENVIRONMENT, "json_logging": settings.is_production}
    )
    return logger


logger: SocPortalLogger = setup_logging()
