"""Diagnostics and run metrics for the reveal engine.

The engine never raises into its host from a timer callback. Anything worth
reporting is recorded here instead and can be inspected after (or during)
a run.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()      # Debug-level information
    INFO = auto()       # Informational messages
    WARNING = auto()    # Skipped nodes, ignored attributes
    ERROR = auto()      # Run stopped because of an unexpected failure


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")


@dataclass
class RevealMetrics:
    """Counters describing the progress of one reveal run."""

    ticks: int = 0
    steps: int = 0
    characters_emitted: int = 0
    scopes_opened: int = 0
    scopes_closed: int = 0
    processor_ticks: int = 0
    processors_completed: int = 0
    nodes_skipped: int = 0
    rate_changes: int = 0
    started_at_ms: Optional[float] = None
    finished_at_ms: Optional[float] = None

    @property
    def elapsed_ms(self) -> float:
        """Wall time between the first start and the end of the run."""
        if self.started_at_ms is None or self.finished_at_ms is None:
            return 0.0
        return self.finished_at_ms - self.started_at_ms

    @property
    def characters_per_second(self) -> float:
        """Observed character throughput of a finished run."""
        elapsed = self.elapsed_ms
        if elapsed <= 0:
            return 0.0
        return (self.characters_emitted * 1000.0) / elapsed

    def to_dict(self) -> Dict[str, Any]:
        """Convert metrics to a plain dictionary."""
        return {
            "ticks": self.ticks,
            "steps": self.steps,
            "characters_emitted": self.characters_emitted,
            "scopes_opened": self.scopes_opened,
            "scopes_closed": self.scopes_closed,
            "processor_ticks": self.processor_ticks,
            "processors_completed": self.processors_completed,
            "nodes_skipped": self.nodes_skipped,
            "rate_changes": self.rate_changes,
            "elapsed_ms": self.elapsed_ms,
        }
