import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from .config import DEFAULT_DATA_DIR

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
ROOT_LOGGER = "decisiondesk"


def configure_logging(log_dir: Optional[str] = None, level: str = "INFO") -> logging.Logger:
    """Attach file + console handlers to the app logger (idempotent).

    Streamlit re-executes the script on every interaction, so this is called
    many times per session; handlers are only added the first time.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        return logger

    log_dir = log_dir or os.path.join(DEFAULT_DATA_DIR, "log")
    formatter = logging.Formatter(LOG_FORMAT)

    try:
        os.makedirs(log_dir, exist_ok=True)
        handler = RotatingFileHandler(
            os.path.join(log_dir, "app.log"),
            maxBytes=1_000_000,
            backupCount=3,
            encoding="utf-8",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    except OSError:
        # read-only checkout: keep console logging only
        pass

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    logger.addHandler(console)
    return logger


def get_logger(name: str) -> logging.Logger:
    if name == ROOT_LOGGER or name.startswith(ROOT_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
