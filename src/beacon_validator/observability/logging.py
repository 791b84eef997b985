"""
Structured Logging Configuration.

Every log event of a validation run carries the run ID and, while a check is
executing, the check name. Logs are written to stderr so that stdout holds
only the JSON report.
"""

import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

# Fields bound by LogContext (run_id, check)
_run_context: ContextVar[dict[str, Any]] = ContextVar("run_context", default={})

_service_name: str = "beacon-validator"

# Event keys whose string values never reach the log output
REDACTED_KEYS = ("api_token", "authorization", "token", "secret", "password", "bearer")


class LogContext:
    """
    Bind fields to every log event emitted inside a ``with`` block.

    Nested contexts add to the enclosing one and restore it on exit:

        with LogContext(run_id="a1b2c3d4"):
            with LogContext(check="paging.concepts"):
                logger.info("Running check")   # run_id and check
            logger.info("Run completed")       # run_id only
    """

    def __init__(self, **fields: Any):
        self._fields = fields
        self._token = None

    def __enter__(self):
        self._token = _run_context.set({**_run_context.get(), **self._fields})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token:
            _run_context.reset(self._token)
        return False


def add_run_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add LogContext fields without overriding keys passed to the log call."""
    for key, value in _run_context.get().items():
        event_dict.setdefault(key, value)
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return event_dict


def add_service_info(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["service"] = _service_name
    return event_dict


def _redact(key: str, value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _redact(k, v) for k, v in value.items()}
    if isinstance(value, str) and any(name in key.lower() for name in REDACTED_KEYS):
        return "***REDACTED***"
    return value


def redact_credentials(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Redact beacon credentials, including inside logged query params."""
    return {key: _redact(key, value) for key, value in event_dict.items()}


def configure_logging(
    level: str = "INFO",
    format: Literal["json", "console"] = "console",
    service_name: str = "beacon-validator",
) -> None:
    """
    Configure structlog for a validation run.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: "json" for CI pipelines, "console" for terminals
        service_name: Value of the ``service`` field on every event
    """
    global _service_name
    _service_name = service_name

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_timestamp,
        add_service_info,
        add_run_context,
        redact_credentials,
        structlog.processors.StackInfoRenderer(),
    ]
    if format == "json":
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper()),
        force=True,
    )

    # Per-request logs come from BeaconClient at DEBUG
    for name in ("httpx", "httpcore", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)
