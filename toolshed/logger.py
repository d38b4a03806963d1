# toolshed/logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from .config import get_settings

_configured = False

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging():
    global _configured
    if _configured:
        return

    settings = get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    # Avoid duplicate handlers (uvicorn or pytest may have installed some)
    if not root.handlers:
        ch = logging.StreamHandler(sys.stdout)
        ch.setLevel(level)
        ch.setFormatter(formatter)
        root.addHandler(ch)

        if settings.log_file:
            try:
                os.makedirs(os.path.dirname(settings.log_file) or ".", exist_ok=True)
                fh = RotatingFileHandler(
                    settings.log_file,
                    maxBytes=2 * 1024 * 1024,
                    backupCount=3,
                )
                fh.setLevel(level)
                fh.setFormatter(formatter)
                root.addHandler(fh)
            except OSError as e:
                root.warning("Failed to initialize file logging: %s", e)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
