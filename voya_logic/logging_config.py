"""Logging setup driven by ObservabilityConfig.

Library modules only create loggers with ``logging.getLogger(__name__)``
and pass context through ``extra``. The host application calls
configure_logging() once at startup.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import ObservabilityConfig, get_config

# Attributes every LogRecord has; anything else came in through ``extra``.
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with ``extra`` fields inlined."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(
    config: Optional[ObservabilityConfig] = None,
    logger_name: str = "voya_logic",
) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Calling it again replaces the handler instead of stacking a new one.

    Args:
        config: Observability settings; defaults to the global config.
        logger_name: Logger to configure.

    Returns:
        The configured logger.
    """
    config = config or get_config().observability
    logger = logging.getLogger(logger_name)

    handler = logging.StreamHandler()
    if config.structured:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(config.format))

    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(config.level.upper())
    return logger
