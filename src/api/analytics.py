"""
Dixit Sync - Analytics Sink

Named events with an attribute mapping.
"""

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class AnalyticsSink(Protocol):
    def log_event(self, name: str, attributes: dict[str, Any]) -> None: ...


class LoggingAnalyticsSink:
    """Writes analytics events to the log."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    def log_event(self, name: str, attributes: dict[str, Any]) -> None:
        if not self.enabled:
            return
        logger.info("analytics event %s %s", name, attributes)
