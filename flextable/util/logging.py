"""Package logging: a single stdout handler on the ``flextable`` logger.

Module loggers are children of it, so records are printed once whatever
the number of modules asking for a logger.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

ROOT = "flextable"
_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def _package_logger() -> logging.Logger:
    root = logging.getLogger(ROOT)
    if root.handlers:  # already configured
        return root
    root.setLevel(logging.INFO)
    h = logging.StreamHandler(sys.stdout)
    h.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(h)
    return root


def get_logger(name: str = ROOT, level: Optional[int] = None) -> logging.Logger:
    """Return the logger ``name``, placed under the package logger."""
    _package_logger()
    if name != ROOT and not name.startswith(ROOT + "."):
        name = f"{ROOT}.{name}"
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
