"""Logging configuration for the application and the scripts."""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ('apscheduler', 'urllib3', 'sqlalchemy.engine', 'httpx')

# Our loggers that always report progress, whatever the root level
PROGRESS_LOGGERS = (
    'cultureradar.services.ingestion',
    'cultureradar.services.scheduler',
    'cultureradar.source_manager',
    'cultureradar.new_event_handler',
)

_configured = False


def setup_logging(level: Optional[int] = None):
    """
    Send log records to stdout, once per process.

    The level defaults to the LOG_LEVEL environment variable (INFO if unset).
    """
    global _configured
    if _configured:
        return

    if level is None:
        level = logging.getLevelName(os.environ.get('LOG_LEVEL', 'INFO').upper())
        if not isinstance(level, int):
            level = logging.INFO

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    for name in PROGRESS_LOGGERS:
        logging.getLogger(name).setLevel(min(level, logging.INFO))

    _configured = True
