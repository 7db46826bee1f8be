import os
import traceback
from typing import Optional

from .logs import get_logger


class DecisionDeskError(Exception):
    """Base class for errors raised by DecisionDesk itself."""


class InvalidInputError(DecisionDeskError, ValueError):
    """User input a screen cannot accept; shown to the user as a dismissible alert."""


class DecisionInputError(InvalidInputError):
    pass


class ProfileInputError(InvalidInputError):
    pass


def format_traceback(exc: BaseException) -> str:
    return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))


def write_error_log(text: str, log_dir: str, filename: str = "error.log") -> None:
    if not text:
        return
    os.makedirs(log_dir, exist_ok=True)
    with open(os.path.join(log_dir, filename), "a", encoding="utf-8") as f:
        f.write(text)
        if not text.endswith("\n"):
            f.write("\n")
        f.write("\n")


def report_exception(
    exc: BaseException,
    *,
    where: str,
    environment: str = "production",
    log_dir: Optional[str] = None,
) -> str:
    """Send an exception to the diagnostic sink and return its traceback text.

    Always logs through the app logger. In production the full traceback is
    also appended to <log_dir>/error.log.
    """
    logger = get_logger("errors")
    tb = format_traceback(exc)
    logger.error("%s: %s\n%s", where, exc, tb)

    if log_dir and environment == "production":
        try:
            write_error_log(f"[{where}] {tb}", log_dir)
        except OSError:
            logger.warning("could not write error log under %s", log_dir)
    return tb
