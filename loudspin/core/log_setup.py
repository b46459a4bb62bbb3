"""Logging configuration driven by the LOUDSPIN_LOG environment variable."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

LOG_ENV_VAR = "LOUDSPIN_LOG"
DEFAULT_LEVEL = "WARNING"
LOG_FORMAT = "[%(levelname)s %(name)s] %(message)s"


def resolve_level(value: str | None) -> int:
    if not value:
        return logging.WARNING
    level = logging.getLevelName(value.strip().upper())
    if isinstance(level, int):
        return level
    return logging.WARNING


def configure_logging(env: Mapping[str, str] | None = None) -> int:
    environ = os.environ if env is None else env
    level = resolve_level(environ.get(LOG_ENV_VAR, DEFAULT_LEVEL))
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return level
