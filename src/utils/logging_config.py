"""Central logging configuration.

Usage:
    from utils.logging_config import configure_logging
    configure_logging(json_logs=False, level="INFO")

Library modules log through ``loguru.logger`` and never install sinks
themselves. Idempotent: safe to call multiple times; pass ``force=True`` to
reconfigure.
"""
from __future__ import annotations
import os
import sys
from typing import Optional

from loguru import logger

from utils.settings import get_settings

_CONFIGURED = False

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {name} | {message}"


def configure_logging(json_logs: Optional[bool] = None, level: Optional[str] = None,
                      force: bool = False) -> None:
    global _CONFIGURED
    if _CONFIGURED and not force:
        return
    settings = get_settings()
    json_logs = settings.json_logs if json_logs is None else json_logs
    level = (level or settings.log_level).upper()

    logger.remove()
    logger.add(sys.stderr, level=level, format=_FORMAT, serialize=json_logs)

    # Optional rotating file sink controlled by env CONSERVATION_LOG_FILE
    log_file = settings.log_file
    if log_file:
        directory = os.path.dirname(log_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        logger.add(log_file, level=level, format=_FORMAT, serialize=json_logs,
                   rotation="5 MB", retention=3)
    _CONFIGURED = True
