"""
ekstester/utils/log_outputs.py

Maps the config's log settings onto stdlib logging handlers. Each entry in
log_outputs is "stderr", "stdout", or a file path.
"""

from __future__ import annotations

import logging
import sys
from typing import List

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# zap-style level names => stdlib levels
LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "dpanic": logging.CRITICAL,
    "panic": logging.CRITICAL,
    "fatal": logging.CRITICAL,
}


def build_handlers(log_outputs: List[str]) -> List[logging.Handler]:
    """Build one handler per log output."""
    handlers: List[logging.Handler] = []
    for output in log_outputs:
        if output in ("stderr", "default"):
            handlers.append(logging.StreamHandler(sys.stderr))
        elif output == "stdout":
            handlers.append(logging.StreamHandler(sys.stdout))
        else:
            handlers.append(logging.FileHandler(output, encoding="utf-8"))
    return handlers


def configure_logging(log_level: str, log_outputs: List[str]) -> None:
    """
    Replace the root logger's handlers with the configured outputs.

    Unknown level names fall back to INFO.
    """
    logging.basicConfig(
        level=LEVELS.get(log_level, logging.INFO),
        format=LOG_FORMAT,
        handlers=build_handlers(log_outputs),
        force=True,
    )
