"""Structured logging utilities for the reveal engine.

Every record emitted through :class:`RevealLogger` carries the component name
and the correlation ID of the run that produced it, so that output from
several engines animating side by side can be told apart.
"""

import logging
from typing import Any, Dict, Optional


class RevealLogger:
    """Logger that tags records with a component and a run correlation ID."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize the reveal logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID identifying one reveal run
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def child(self, component: str) -> "RevealLogger":
        """Return a logger for a sub-component sharing this correlation ID."""
        return RevealLogger(self.logger.name, self.correlation_id, component)

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined.update(extra)
        return combined

    def is_enabled_for(self, level: int) -> bool:
        """Check whether records at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with run context."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with run context."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with run context."""
        self.logger.warning(message, extra=self._get_extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = True
    ) -> None:
        """Log error message with run context."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log exception message with run context and traceback."""
        self.logger.exception(message, extra=self._get_extra(extra))


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> RevealLogger:
    """Get a run-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID identifying one reveal run
        component: Component name for structured logging

    Returns:
        RevealLogger instance
    """
    return RevealLogger(name, correlation_id, component)
