"""Console logging setup for evaluation runs.

Log records go to stderr so the report printed on stdout stays clean.

Usage:
    from jeopardy_eval.logging_config import setup_logging
    setup_logging("INFO")  # Call once at startup
"""
from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Libraries that are chatty at INFO
NOISY_LOGGERS = ("opentelemetry",)


def setup_logging(level: str | int = "WARNING") -> None:
    """Configure the root logger with a plain text handler on stderr.

    Args:
        level: Level name (``"DEBUG"``, ``"INFO"``, ...) or numeric level.

    Raises:
        ValueError: If *level* is not a known level name.
    """
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr, force=True)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
