"""Traversal and scheduling engine.

Key Components:
    RevealEngine: Dual-stack traversal driven by a repeating timer
    RunState: Lifecycle states of a reveal run
    NodeScope, ProcessorScope: Output stack entries
    AsyncioScheduler, ManualScheduler: Timer providers
"""

from .reveal import RevealEngine, RunState
from .scheduler import AsyncioScheduler, ManualScheduler, Scheduler, TimerHandle
from .scopes import NodeScope, ProcessorScope, Scope

__all__ = [
    "RevealEngine",
    "RunState",
    "AsyncioScheduler",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    "NodeScope",
    "ProcessorScope",
    "Scope",
]
