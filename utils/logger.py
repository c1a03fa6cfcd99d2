"""Logging setup shared by the engine, loader and pipeline modules.

Every module asks for ``get_logger(__name__)`` and writes pipe-separated
``event | key=value`` lines to stdout.
"""

import logging
import os
import sys
from typing import Optional

from config.defaults import DEFAULT_LOG_LEVEL, LOG_FORMAT, LOG_LEVEL_ENV_VAR


_configured = False


def resolve_log_level(level: Optional[str] = None) -> str:
    """Explicit level, else HOUSEKEEPING_LOG_LEVEL, else the package default."""
    return (level or os.environ.get(LOG_LEVEL_ENV_VAR) or DEFAULT_LOG_LEVEL).upper()


def configure_logging(level: Optional[str] = None) -> None:
    """Install the housekeeping log format on the root logger. Later calls are no-ops."""
    global _configured
    if _configured:
        return
    logging.basicConfig(level=resolve_log_level(level), format=LOG_FORMAT, stream=sys.stdout)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
