"""Logging configuration shared by the backend and the headless dashboard."""

import logging
import sys
from typing import Optional

from etf_tracker.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty below WARNING: per-request lines from the HTTP client and the
# yfinance scraper, SQL echo from the engine
_QUIET_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "yfinance", "peewee")


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging once per process; level defaults to settings.log_level."""
    level_name = (level or get_settings().log_level).upper()

    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)
