# app/core/log.py
from __future__ import annotations

import logging
import sys
from typing import Optional

from app.core.config import settings

_HANDLER_TAG = "_admission_reports_handler"


def configure_logging(level: Optional[str] = None,
                      log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach console (+ optional file) handlers to the root logger.
    Safe to call more than once: our own handlers are replaced, not stacked.
    """
    level_name = (level or settings.LOG_LEVEL or "INFO").upper()
    log_file = settings.LOG_FILE if log_file is None else log_file

    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for h in list(root.handlers):
        if getattr(h, _HANDLER_TAG, False):
            root.removeHandler(h)
            h.close()

    # Console handler
    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(
        logging.Formatter("[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
                          datefmt="%Y-%m-%d %H:%M:%S"))
    setattr(ch, _HANDLER_TAG, True)
    root.addHandler(ch)

    # File handler
    if log_file:
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            ))
        setattr(fh, _HANDLER_TAG, True)
        root.addHandler(fh)

    return root
