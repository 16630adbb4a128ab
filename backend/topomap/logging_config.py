"""Process-wide logging setup.

Every module logs through ``logging.getLogger(__name__)``; this only decides
where the records go and how they look.
"""
from __future__ import annotations

import logging
import sys

from . import config

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> None:
    log_level = getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(log_level)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)

    # third-party noise
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging configured: level=%s", logging.getLevelName(log_level))
