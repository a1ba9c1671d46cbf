"""structlog setup.

Every event carries the service name and environment. Events emitted while a
request is being served also carry its request id, method and path, bound
through contextvars so concurrent requests never see each other's fields.
"""

import logging
import sys
from contextlib import AbstractContextManager

import structlog
from structlog.typing import EventDict, Processor

SERVICE_NAME = "pointbank"


def service_fields(env: str) -> Processor:
    def add_service_fields(_logger, _method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", SERVICE_NAME)
        event_dict.setdefault("env", env)
        return event_dict

    return add_service_fields


def configure_logging(debug: bool = False, env: str = "development") -> None:
    log_level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        service_fields(env),
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def request_context(request_id: str, method: str, path: str) -> AbstractContextManager:
    """Bind request fields for the body of a `with` block; previous values come back on exit."""
    return structlog.contextvars.bound_contextvars(request_id=request_id, method=method, path=path)
