from __future__ import annotations

import logging
import sys
from typing import Union


class _AccessNoiseFilter(logging.Filter):
    """
    Keep task_api logs, but only let uvicorn's per-request access lines
    through at WARNING+ unless the configured level is DEBUG.
    """

    def __init__(self, verbose: bool) -> None:
        super().__init__()
        self._verbose = verbose

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "uvicorn.access" and not self._verbose:
            return record.levelno >= logging.WARNING
        return True


# PUBLIC_INTERFACE
def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure a single stderr handler on the root logger.

    Call this once, before the server starts. Pre-existing root handlers are
    removed so repeated calls do not duplicate output.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_AccessNoiseFilter(verbose=level <= logging.DEBUG))
    root.addHandler(ch)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)

    # pymongo logs topology chatter at DEBUG
    logging.getLogger("pymongo").setLevel(max(level, logging.INFO))
