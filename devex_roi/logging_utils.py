"""
Structured logging helpers.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from devex_roi.config.env import get_logging_config

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Install a basic root handler at LOG_LEVEL (or the given level).
    """

    name = (level or get_logging_config().level).upper()
    logging.basicConfig(level=getattr(logging, name, logging.INFO), format=_FORMAT)


def log_event(
    logger: logging.Logger,
    level: int,
    event: str,
    **fields: Any,
) -> None:
    """
    Emit one structured log line as compact JSON.
    """

    payload = {"event": event, **fields}
    logger.log(level, json.dumps(payload, default=str, sort_keys=True))
