"""Developer tools: source analysis and output checking helpers."""

from .analysis import SourceSummary, analyze_source
from .testing import (
    character_count,
    children_signature,
    count_markers,
    run_for,
    structure_signature,
)

__all__ = [
    "SourceSummary",
    "analyze_source",
    "character_count",
    "children_signature",
    "count_markers",
    "run_for",
    "structure_signature",
]
