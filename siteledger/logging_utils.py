"""Mini README: Logging for the siteledger console and CLI.

Structure:
    * configure_root_logger - installs the process-wide handler; accepts the
      ``SITELEDGER_LOG_LEVEL`` string as well as numeric levels.
    * get_logger - module logger factory used as ``LOGGER = get_logger(__name__)``.

Backend traffic is reported by ``sources.client`` at DEBUG (request line) and
ERROR (mapped failures). The per-request INFO lines that ``httpx`` emits on
its own would duplicate those, so its logger is held at WARNING. Malformed
amounts and dates from the backend surface as WARNING records from
``records.models`` and ``metrics.calculator``.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"
QUIET_LOGGERS = ("httpx", "httpcore")

_configured = False


def _as_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Install the console handler once per process; later calls only adjust the level."""

    global _configured
    root_logger = logging.getLogger()
    root_logger.setLevel(_as_level(level))
    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module logger, installing the handler on first use."""

    if not _configured:
        configure_root_logger()
    return logging.getLogger(name)
