"""Structured logging for carousel engines and the session service.

Every module logs through structlog with snake_case event names and
key/value context (``carousel_id``, ``index``, ``slot``). Development output
is a colored console, production output is one JSON object per line.

Engine modules under ``carousel_engine.core`` emit a debug event for most
inputs (``slide_changed``, ``wrap_transition``, ``click_suppressed``), so
they get their own level: turn them up with ``ENGINE_LOG_LEVEL=DEBUG``
without also getting debug output from uvicorn.

Usage:
    from carousel_engine.core.logging import configure_logging, get_logger, session_context

    configure_logging()  # ENVIRONMENT, LOG_LEVEL, ENGINE_LOG_LEVEL

    logger = get_logger(__name__)
    with session_context("abc123"):
        logger.info("event_applied", event_type="next")  # carries session_id
"""

import logging
import sys
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from os import getenv
from typing import Any, cast

import structlog
from structlog.types import Processor

SERVICE_NAME = "carousel-engine"

# Parent logger of the engine modules
ENGINE_LOGGER = "carousel_engine.core"

# Loggers from the HTTP stack that are too chatty at INFO
NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "websockets")


def _level(name: str | None, default: int) -> int:
    if not name:
        return default
    return getattr(logging, name.upper(), default)


def add_service_name(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Tag every event with the service so shipped JSON lines can be filtered."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(
    development: bool | None = None,
    log_level: str | None = None,
    engine_log_level: str | None = None,
) -> None:
    """Configure structlog and the standard library root logger.

    Args:
        development: Console output if True, JSON if False. None reads
            ENVIRONMENT; anything but "production" counts as development.
        log_level: Root level name. None reads LOG_LEVEL (default INFO).
        engine_log_level: Level for ``carousel_engine.core`` loggers. None
            reads ENGINE_LOG_LEVEL and falls back to the root level.
    """
    if development is None:
        development = getenv("ENVIRONMENT", "development").lower() != "production"

    root_level = _level(log_level or getenv("LOG_LEVEL"), logging.INFO)
    engine_level = _level(engine_log_level or getenv("ENGINE_LOG_LEVEL"), root_level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.extend(
            [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # force=True overrides any handler installed by uvicorn or pytest
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=root_level, force=True)
    logging.getLogger().setLevel(root_level)
    logging.getLogger(ENGINE_LOGGER).setLevel(engine_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, typically ``get_logger(__name__)``."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


@contextmanager
def session_context(session_id: str, **extra: Any) -> Iterator[None]:
    """Attach ``session_id`` (and ``extra``) to every log call inside the block.

    Previously bound keys are restored on exit, so blocks can nest.
    """
    with structlog.contextvars.bound_contextvars(session_id=session_id, **extra):
        yield
