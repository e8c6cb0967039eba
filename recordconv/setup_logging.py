import logging
import os
import sys
from typing import Optional


def debug_enabled() -> bool:
    flag = os.getenv("DEBUG", "")
    return bool(flag) and flag.lower() not in ("false", "0")


def setup_logging(level: Optional[str] = None):
    # stderr: stdout carries converted output
    logger = logging.getLogger()
    if logger.handlers:  # don't double add on repeated calls
        return
    level = "DEBUG" if debug_enabled() else (level or os.getenv("RECORDCONV_LOG_LEVEL", "INFO"))
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    h = logging.StreamHandler(sys.stderr)
    fmt = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s :: %(message)s"
    )
    h.setFormatter(fmt)
    logger.addHandler(h)
