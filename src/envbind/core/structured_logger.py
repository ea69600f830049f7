"""
Structured Logging with Bind Trace IDs
======================================

Emits JSON log lines so a single bind call can be followed through every
nested schema it visits. Values read from a source are never logged, only
key names; messages still pass through secret redaction in case a caller
formats a value into one.
"""

import json
import logging
import re
import uuid
from contextvars import ContextVar
from datetime import UTC, datetime

# trace_id of the bind call currently running in this context
_trace_id_var: ContextVar[str | None] = ContextVar('envbind_trace_id', default=None)

_SECRET_PATTERNS = re.compile(
    r"(xoxb-[A-Za-z0-9-]+|sk-[A-Za-z0-9]+|ghp_[A-Za-z0-9]+|"
    r"Bearer\s+[A-Za-z0-9._~+/=-]+|[a-z][a-z0-9+.-]*://[^:/\s]+:[^@\s]+@)",
    re.IGNORECASE,
)


def _redact_secrets(text: str) -> str:
    return _SECRET_PATTERNS.sub("[REDACTED]", text)


def current_trace_id() -> str | None:
    """Trace id of the bind call in progress, if any"""
    return _trace_id_var.get()


class StructuredLogger:
    """
    Structured logger that outputs JSON logs with trace IDs

    Example output:
    {
        "timestamp": "2026-10-17T10:30:45.123Z",
        "level": "DEBUG",
        "component": "envbind.binder",
        "message": "Resolved key",
        "trace_id": "1f0c2a9e",
        "key": "DB_PORT",
        "origin": "default"
    }
    """

    def __init__(self, component: str, logger: logging.Logger | None = None) -> None:
        """
        Initialize structured logger

        Args:
            component: Component name, also used as the logger name
            logger: Optional existing logger (creates new if not provided)
        """
        self.component = component
        self.logger = logger or logging.getLogger(component)

    def _log(self, level: str, message: str, **kwargs) -> None:
        log_method = getattr(self.logger, level.lower())
        if not self.logger.isEnabledFor(getattr(logging, level)):
            return

        log_entry = {
            'timestamp': datetime.now(tz=UTC).isoformat(),
            'level': level,
            'component': self.component,
            'message': _redact_secrets(message),
        }

        trace_id = _trace_id_var.get()
        if trace_id:
            log_entry['trace_id'] = trace_id

        for k, v in kwargs.items():
            log_entry[k] = _redact_secrets(v) if isinstance(v, str) else v

        log_method(_redact_secrets(json.dumps(log_entry, default=str)))

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message"""
        self._log('DEBUG', message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        """Log info message"""
        self._log('INFO', message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message"""
        self._log('WARNING', message, **kwargs)


class TraceContext:
    """
    Context manager tagging every log line of one bind call

    Nested binds reuse the outer trace id, so a whole resolution tree
    shares one id.

    Usage:
        with TraceContext() as trace_id:
            logger.info("Binding configuration")
    """

    def __init__(self, trace_id: str | None = None) -> None:
        self.trace_id = trace_id or _trace_id_var.get() or self._generate_trace_id()
        self.token = None

    def __enter__(self) -> str:
        self.token = _trace_id_var.set(self.trace_id)
        return self.trace_id

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        _trace_id_var.reset(self.token)

    @staticmethod
    def _generate_trace_id() -> str:
        return str(uuid.uuid4())[:8]
