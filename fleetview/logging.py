"""
Logging helpers for FleetView.

All loggers live under the ``fleetview`` namespace.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'


def get_logger(name: str) -> logging.Logger:
    """Get a logger, prefixing bare names with the package namespace."""
    if name != 'fleetview' and not name.startswith('fleetview.'):
        name = f'fleetview.{name}'
    return logging.getLogger(name)


def configure_logging(level: str = 'INFO') -> None:
    """Attach a stderr handler to the package logger."""
    logger = logging.getLogger('fleetview')
    logger.setLevel(level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
        logger.addHandler(handler)
