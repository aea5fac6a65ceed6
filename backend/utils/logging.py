"""Structured logging for Orphanage Admin: structlog events to stdout and a rotating file."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import structlog

from ..config import OrphanageConfig

# Third-party loggers that are too chatty at INFO for an admin service
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "uvicorn.access")


def _add_service(app_name: str):
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", app_name)
        return event_dict
    return processor


def _file_handler(config: OrphanageConfig, level: int) -> logging.Handler | None:
    """Rotating handler for ``config.log_file``, or None when the directory is not writable."""
    log_dir = Path(config.log_dir)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_dir / config.log_file,
            maxBytes=config.log_max_bytes,
            backupCount=config.log_backup_count,
            encoding="utf-8",
        )
    except OSError:
        return None
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    return handler


def setup_logging(config: OrphanageConfig) -> None:
    """Configure structlog and the root logger from the application config.

    Debug mode renders console output; otherwise each event is one JSON line
    tagged with the service name.
    """
    level = logging.DEBUG if config.debug else logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _add_service(config.app_name),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.ConsoleRenderer() if config.debug else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(stdout_handler)

    file_handler = _file_handler(config, level)
    if file_handler is not None:
        root_logger.addHandler(file_handler)
    else:
        root_logger.warning("Log directory %s is not writable; logging to stdout only", config.log_dir)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if config.debug else logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a named structured logger."""
    return structlog.get_logger(name)
