"""
Logging setup with correlation IDs and a dedicated audit trail.
Every record carries the request correlation ID so a single flow can be traced end to end.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from simulafin.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(correlation_id)s | %(message)s"


class CorrelationIdFilter(logging.Filter):
    """Guarantees the correlation_id attribute exists so the formatter never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = "-"
        return True


def _build_logger(name: str) -> logging.Logger:
    built = logging.getLogger(name)
    if not built.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(CorrelationIdFilter())
        built.addHandler(handler)
    built.setLevel(settings.LOG_LEVEL.upper())
    built.propagate = False
    return built


logger = _build_logger("simulafin")
audit_logger = _build_logger("simulafin.audit")


class CorrelationAdapter(logging.LoggerAdapter):
    """Stamps a fixed correlation ID on every record emitted through it."""

    def process(self, msg: Any, kwargs: Any) -> Any:
        extra = kwargs.setdefault("extra", {})
        extra.setdefault("correlation_id", self.extra["correlation_id"])
        return msg, kwargs


def get_logger_with_correlation(correlation_id: Optional[str]) -> CorrelationAdapter:
    """Returns a logger bound to the given correlation ID."""
    return CorrelationAdapter(logger, {"correlation_id": correlation_id or "-"})


def audit_log(action: str, user: str, resource: str, details: Optional[Dict[str, Any]] = None) -> None:
    """
    Emits an audit event as a single JSON line.
    Callers are responsible for masking sensitive values before passing them in.
    """
    details = details or {}
    event = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "action": action,
        "user": user,
        "resource": resource,
        "details": details,
    }
    audit_logger.info(
        json.dumps(event, default=str, ensure_ascii=False),
        extra={"correlation_id": details.get("correlation_id", "-")}
    )
