"""Shared utilities for the reveal engine.

This module provides configuration objects, diagnostic and metric types,
and the run-aware logger used across all layers.
"""

from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    RevealMetrics,
)
from .config import (
    BITS_PER_CHARACTER,
    ConfigError,
    ConfigValidationError,
    RevealConfig,
    parse_number,
)
from .clock import Clock, ManualClock, SystemClock
from .logging import (
    RevealLogger,
    get_logger,
)

__all__ = [
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "RevealMetrics",
    "BITS_PER_CHARACTER",
    "ConfigError",
    "ConfigValidationError",
    "RevealConfig",
    "parse_number",
    "Clock",
    "ManualClock",
    "SystemClock",
    "RevealLogger",
    "get_logger",
]
