"""Logging setup for the CLI and cron runs.

Unattended runs have no interactive failure surface, so the log (stream plus
an optional file) is where diagnostics end up.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_TAG = "_meeting_audit_handler"


def configure_logging(
    verbose: bool = False,
    quiet: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Install handlers on the package logger; safe to call more than once."""
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logger = logging.getLogger("meeting_audit")
    logger.setLevel(level)

    for h in list(logger.handlers):
        if getattr(h, _HANDLER_TAG, False):
            logger.removeHandler(h)
            h.close()

    stream = logging.StreamHandler()
    stream.setFormatter(logging.Formatter(LOG_FORMAT))
    setattr(stream, _HANDLER_TAG, True)
    logger.addHandler(stream)

    if log_file:
        d = os.path.dirname(log_file)
        if d:
            os.makedirs(d, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        setattr(fh, _HANDLER_TAG, True)
        logger.addHandler(fh)

    logger.propagate = False
    return logger
