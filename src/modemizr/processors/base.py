"""Processor extension point.

A processor is a unit of multi-tick work that sits on the engine's output
stack in place of a structural scope. It has no pending list of its own:
the engine calls :meth:`Processor.tick` once per emission step while the
processor is on top, and pops it as soon as :attr:`Processor.done` is true.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from typing import Protocol

    from modemizr.render.target import RenderTarget
    from modemizr.shared.clock import Clock
    from modemizr.tree.nodes import ElementNode

    class ProcessorHost(Protocol):
        """What a processor may read from the engine that owns it."""

        clock: Clock
        render: RenderTarget
        rate: float
        image_speedup: float


class Processor(ABC):
    """Abstract unit of multi-tick work."""

    done: bool = True

    def __init__(
        self, master: "ProcessorHost", parent_node: Optional["ElementNode"]
    ) -> None:
        """Initialize the processor.

        Args:
            master: Engine the processor runs under
            parent_node: Output element the processor works on; the cursor
                marker is placed inside it while the processor is active
        """
        self.master = master
        self.parent_node = parent_node

    @abstractmethod
    def tick(self) -> None:
        """Perform one emission step worth of work. Must not block."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(done={self.done})"
