"""
Structured event sink injected into the FleetView core.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .logging import get_logger


class EventSink:
    """Receives leveled, structured events. The base class discards them."""

    def info(self, event: str, **fields: Any) -> None:
        pass

    def warning(self, event: str, **fields: Any) -> None:
        pass

    def error(self, event: str, **fields: Any) -> None:
        pass


class LoggingEventSink(EventSink):
    """Renders events as ``event key=value ...`` lines on a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or get_logger('fleetview.events')

    def info(self, event: str, **fields: Any) -> None:
        self._logger.info(format_event(event, fields))

    def warning(self, event: str, **fields: Any) -> None:
        self._logger.warning(format_event(event, fields))

    def error(self, event: str, **fields: Any) -> None:
        self._logger.error(format_event(event, fields))


def format_event(event: str, fields: dict[str, Any]) -> str:
    """Format an event name and its fields into a single log line."""
    if not fields:
        return event
    parts = ' '.join(f'{key}={value!r}' if isinstance(value, str) else f'{key}={value}'
                     for key, value in fields.items())
    return f'{event} {parts}'
