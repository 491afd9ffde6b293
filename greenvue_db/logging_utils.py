from __future__ import annotations

import logging
import os

LOGGER_NAME = "greenvue_db"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | int | None = None) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    if level is None:
        level = os.getenv("GREENVUE_LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level}")
        level = resolved

    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
