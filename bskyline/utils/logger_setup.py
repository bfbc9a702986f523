#!/usr/bin/env python

"""Logging module.

Logging is silent below WARNING by default, and can be made more
verbose by users (e.g., to see cache rebuilds or group adjustments)
by calling:

bskyline.set_log_level("DEBUG")
"""

from typing import Optional
from pathlib import Path
import io
import sys
from loguru import logger
import bskyline


LOGFORMAT = (
    "<level>{level: <7}</level> <white>|</white> "
    "<cyan>{file: <14}</cyan> <white>|</white> "
    "<level>{message}</level>"
)


def colorize():
    """check whether terminal/tty supports color."""
    try:
        import IPython
        tty1 = bool(IPython.get_ipython())
    except ImportError:
        tty1 = False
    tty2 = sys.stderr.isatty()
    return tty1 or tty2


def _is_bskyline(record) -> bool:
    """Filter records to those bound by bskyline modules."""
    return record["extra"].get("name") == "bskyline"


LOGGERS = [0]
def set_log_level(
    log_level: str="INFO",
    log_out: Optional[io.TextIOBase]=sys.stderr,
    log_file: Optional[Path]=None,
    ):
    """Set the log level for loguru logger.

    This removes the handlers added by previous calls (and the
    default loguru handler) and adds new ones that only print logs
    from bskyline modules, which use `logger.bind(name='bskyline')`.

    Parameters
    ----------
    log_level: str
        Level of logging output: DEBUG, INFO, WARNING, ERROR.
    log_out: io.TextIOBase
        Stream to log to (e.g., sys.stderr, sys.stdout), or None.
    log_file: Path
        Option to also log to a file, or None.
    """
    while LOGGERS:
        idx = LOGGERS.pop()
        try:
            logger.remove(idx)
        except ValueError:
            pass

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        log_file.touch(exist_ok=True)
        LOGGERS.append(logger.add(
            sink=log_file,
            level=log_level,
            colorize=False,
            format=LOGFORMAT,
            filter=_is_bskyline,
            rotation="50 MB",
            backtrace=True,
            diagnose=True,
        ))
    if log_out:
        LOGGERS.append(logger.add(
            sink=log_out,
            level=log_level,
            colorize=colorize(),
            format=LOGFORMAT,
            filter=_is_bskyline,
        ))
    logger.enable("bskyline")
    logger.bind(name="bskyline").debug(
        f"bskyline v.{bskyline.__version__} logging enabled"
    )
