"""Logging configuration for the application.

Production gets one ``key="value"`` line per record so that the ``extra``
context passed by services (model, id, user_id, ...) is machine-parseable.
Development keeps the plain human-readable format.
"""

import logging
import sys
from typing import Any, Dict

from app.config import get_settings

# Third-party loggers and the level they are capped at
NOISY_LOGGERS: Dict[str, int] = {
    "uvicorn": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "passlib": logging.ERROR,
    "alembic": logging.INFO,
}


class StructuredFormatter(logging.Formatter):
    """Formatter emitting ``key="value"`` pairs including extra fields."""

    # LogRecord attributes that are not user-provided context
    _STANDARD_ATTRS = frozenset(
        logging.LogRecord("", 0, "", 0, "", (), None).__dict__
    ) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with structured information.

        Args:
            record: Log record to format

        Returns:
            Formatted log string
        """
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in self._STANDARD_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return " ".join(f'{key}="{value}"' for key, value in log_data.items())


def setup_logging() -> None:
    """Install a single stdout handler on the root logger.

    Level and formatter follow the current settings; calling it again
    replaces the previous handler.
    """
    settings = get_settings()

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.LOG_LEVEL)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.LOG_LEVEL)

    if settings.is_production:
        formatter: logging.Formatter = StructuredFormatter(
            datefmt="%Y-%m-%dT%H:%M:%S%z"
        )
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    for name, level in NOISY_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    root_logger.info(
        "Logging configured",
        extra={
            "log_level": settings.LOG_LEVEL,
            "environment": settings.ENVIRONMENT,
        },
    )
