"""Logging setup shared by the API process and the maintenance scripts."""
from __future__ import annotations

import logging
import sys

from .config import get_settings

_HANDLER_NAME = "catalog_api"


def configure_logging(level: str | None = None) -> None:
    """Install a single stream handler on the root logger (idempotent)."""
    settings = get_settings()
    log_level = getattr(logging, (level or settings.log_level).upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(log_level)
    if not any(getattr(h, "name", None) == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(name)-32s %(levelname)-8s %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root.addHandler(handler)

    # Third-party chatter
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    if settings.app_env == "prod":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
