"""
Logging Setup
=============
Structured logging for the gateway.

Library modules log through ``structlog.get_logger(__name__)``. This module
wires structlog and the stdlib root logger to a single stdout handler, JSON
in production and human-readable in development.

Usage:
    from authgate_core.log_config import setup_logging, bind_request_context

    setup_logging(service_name="authgate")
    bind_request_context(request_id="req_123")
"""

import logging
import sys
import uuid
from typing import Optional

import structlog


def setup_logging(
    service_name: str,
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """
    Configure structlog and stdlib logging.

    Args:
        service_name: Name of the service, added to every record
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Whether to output JSON (for production)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Stdlib records (httpx, tenacity, uvicorn) go through the same renderer
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(service=service_name)

    structlog.get_logger(__name__).info("Logging configured", service=service_name)


def bind_request_context(request_id: Optional[str] = None, **kwargs) -> str:
    """Bind a request id (generated if absent) to all logs of this task."""
    request_id = request_id or f"req_{uuid.uuid4().hex[:16]}"
    structlog.contextvars.bind_contextvars(request_id=request_id, **kwargs)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.unbind_contextvars("request_id")
