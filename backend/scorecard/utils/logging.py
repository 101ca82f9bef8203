from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

from pythonjsonlogger import jsonlogger
import structlog

ENGINE_LOGGER = "scorecard.services.report"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _setting(app: Any | None, key: str, env_name: str) -> Any:
    if app is not None:
        return app.config.get(key)
    return os.getenv(env_name)


def configure_logging(app: Any | None = None) -> None:
    """JSON lines on stderr for every logger, with structlog wired through the stdlib."""
    log_level = _setting(app, "LOG_LEVEL", "SCORECARD_LOG_LEVEL") or "INFO"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler()
    handler.setFormatter(jsonlogger.JsonFormatter(JSON_FORMAT))
    # Reloads must not stack handlers.
    root_logger.handlers = [handler]

    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    engine_logger = logging.getLogger(ENGINE_LOGGER)
    engine_logger.setLevel(_setting(app, "REPORT_ENGINE_LOG_LEVEL", "SCORECARD_ENGINE_LOG_LEVEL") or log_level)

    log_file = _setting(app, "REPORT_LOG_FILE", "SCORECARD_REPORT_LOG_FILE")
    if log_file:
        configure_engine_file_logging(Path(log_file))


def configure_engine_file_logging(log_file: Path) -> None:
    """Also keep the report engine's records in a rotating file."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(str(log_file), maxBytes=10_000_000, backupCount=5)
    file_handler.setFormatter(jsonlogger.JsonFormatter(JSON_FORMAT))

    engine_logger = logging.getLogger(ENGINE_LOGGER)
    engine_logger.handlers = [
        existing for existing in engine_logger.handlers if not isinstance(existing, RotatingFileHandler)
    ]
    engine_logger.addHandler(file_handler)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
