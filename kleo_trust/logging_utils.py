from __future__ import annotations

import logging
import os
from typing import Final

_LOGGER_PREFIX: Final[str] = "kleo"
LOG_LEVEL_ENV: Final[str] = "KLEO_LOG_LEVEL"


def get_logger(name: str) -> logging.Logger:
    """Return a shared logger under the ``kleo.`` namespace."""

    logger = logging.getLogger(f"{_LOGGER_PREFIX}.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s %(message)s", "%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(handler)
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    logger.propagate = False
    return logger
