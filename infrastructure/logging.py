"""Structured logging for the object index service."""

import logging
import logging.handlers
import sys

import structlog

from infrastructure.config import settings

_configured = False


def _add_service_name(
    _logger: object,
    _method_name: str,
    event_dict: structlog.typing.EventDict,
) -> structlog.typing.EventDict:
    event_dict.setdefault("service", settings.app_name)
    return event_dict


def setup_logging() -> None:
    """Route upload, resolve and listing events through one set of handlers.

    Every record carries the service name. Development renders to the console,
    other environments emit JSON lines to stdout and to a daily rotated file
    under ``LOG_DIR``. Only the first call installs handlers.
    """
    global _configured  # noqa: PLW0603
    if _configured:
        return

    settings.log_dir.mkdir(parents=True, exist_ok=True)
    log_file = settings.log_dir / f"{settings.app_env}.log"

    common_processors = [
        structlog.contextvars.merge_contextvars,
        _add_service_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if settings.app_env == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            *common_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=common_processors,
        processor=renderer,
    )

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    file_handler = logging.handlers.TimedRotatingFileHandler(
        log_file,
        when="midnight",
        interval=1,
        backupCount=7,
    )
    file_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.addHandler(stream_handler)
    root_logger.addHandler(file_handler)
    root_logger.setLevel(settings.log_level.upper())

    # request logs from the server land next to the upload events
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi"):
        logging_logger = logging.getLogger(logger_name)
        logging_logger.handlers = [stream_handler, file_handler]
        logging_logger.propagate = False

    _configured = True
