from __future__ import annotations

import logging
from typing import Optional

from file_converter.config import settings


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-scoped logger configured for console output.

    In development mode the logger is opened up to DEBUG so that the
    diagnostic records emitted by the dispatcher become visible.
    """

    logger_name = name or "file-converter"
    logger = logging.getLogger(logger_name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    return logger
