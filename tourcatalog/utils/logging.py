"""Structured logging setup using structlog.

Two renderers share one processor chain: a coloured ConsoleRenderer for
local development and a JSONRenderer for production (``APP_ENV=production``
or ``json_output=True``).  Standard-library ``logging`` is routed through
the same chain so uvicorn access logs look like ours.

httpx logs every request at INFO.  During a failing refresh cycle that is
four lines per second of noise, so the HTTP client loggers are held at
WARNING unless the application itself runs at DEBUG.

Ingestion runs bind a ``run_id`` into structlog's context variables
(:func:`bind_ingestion_run`) so every line emitted by the four concurrent
fetch tasks of one run can be correlated.
"""

import logging
import os
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

_HTTP_CLIENT_LOGGERS = ("httpx", "httpcore")


def configure_logging(log_level: str = "INFO", json_output: bool = False) -> structlog.BoundLogger:
    """Configure structlog with environment-appropriate rendering.

    Args:
        log_level: Logging level string (DEBUG, INFO, WARNING, ERROR, FATAL).
        json_output: Force JSON output. When False, uses console rendering in
                     development and JSON in production (detected via APP_ENV).

    Returns:
        A configured structlog BoundLogger.
    """
    level_name = log_level.upper()
    use_json = json_output or os.environ.get("APP_ENV", "development") == "production"

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level_name)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *shared_processors,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level_name)

    client_level = logging.DEBUG if level_name == "DEBUG" else logging.WARNING
    for name in _HTTP_CLIENT_LOGGERS:
        logging.getLogger(name).setLevel(client_level)

    return structlog.get_logger()


def get_logger(name: str) -> structlog.BoundLogger:
    """Return a structlog logger bound with ``logger_name``.

    Configures logging with defaults on first use if nothing else has.
    """
    if not structlog.is_configured():
        configure_logging()

    return structlog.get_logger(logger_name=name)


@contextmanager
def bind_ingestion_run(run_id: str | None = None) -> Iterator[str]:
    """Bind a ``run_id`` to every log line emitted inside the block.

    asyncio tasks copy the current context when they are created, so tasks
    spawned inside the block inherit the binding.

    Yields:
        The run id that was bound (generated when not supplied).
    """
    run_id = run_id or uuid.uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(run_id=run_id):
        yield run_id
