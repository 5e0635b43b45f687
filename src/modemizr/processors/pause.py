"""Timed and counted pauses in a reveal."""

from typing import TYPE_CHECKING, Optional

from .base import Processor

if TYPE_CHECKING:
    from modemizr.tree.nodes import ElementNode

    from .base import ProcessorHost


class PauseProcessor(Processor):
    """Holds the reveal for a number of emission steps and/or seconds.

    With both thresholds set the pause lasts until both have been met.
    """

    def __init__(
        self,
        master: "ProcessorHost",
        parent_node: Optional["ElementNode"],
        chars: Optional[float] = None,
        secs: Optional[float] = None
    ) -> None:
        super().__init__(master, parent_node)
        self.char_threshold = chars
        self.seconds_threshold = secs
        self.elapsed_ticks = 0
        self.start_ms = master.clock.now_ms()
        self.done = self.is_complete()

    def pending(self) -> bool:
        if self.char_threshold is not None and self.elapsed_ticks < self.char_threshold:
            return True
        if self.seconds_threshold is not None:
            elapsed_ms = self.master.clock.now_ms() - self.start_ms
            if elapsed_ms < 1000.0 * self.seconds_threshold:
                return True
        return False

    def is_complete(self) -> bool:
        return not self.pending()

    def tick(self) -> None:
        self.elapsed_ticks += 1
        self.done = self.is_complete()
