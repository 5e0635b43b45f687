"""Rate-limited, structure-preserving tree reveal.

The engine keeps two stacks that mirror the tree as it is being rebuilt:

* the *output stack* holds scopes: cloned nodes already inserted into the
  target (the top one is where content goes next) and active processors;
* the *input stack* holds pending lists: the not yet processed children
  belonging to each structural scope.

With ``<p>yet <b>another</b> test</p>`` as the source and a ``div`` as the
target, opening the paragraph leaves::

    input  = [[], [#text("yet "), <b>another</b>, #text(" test")]]
    output = [div, p]

The first text node becomes a string work item under an empty text clone,
and every following step moves one character from the string into that
clone. When a pending list runs dry its scope is closed and traversal
continues in the parent. Processors (image reveal, pauses) are pushed onto
the output stack alone and are ticked instead of consulting the input
stack until they are done.
"""

import math
import uuid
from collections import deque
from enum import Enum, auto
from typing import Any, Callable, Deque, Dict, Iterable, List, Mapping, Optional, Union

from modemizr.processors.base import Processor
from modemizr.processors.image import ImageRevealProcessor
from modemizr.processors.pause import PauseProcessor
from modemizr.render.target import RenderTarget, TreeRenderTarget
from modemizr.shared import (
    BITS_PER_CHARACTER,
    Clock,
    DiagnosticEntry,
    DiagnosticSeverity,
    RevealConfig,
    RevealMetrics,
    SystemClock,
    get_logger,
    parse_number,
)
from modemizr.tree.nodes import CommentNode, ElementNode, Node, TextNode

from .scheduler import AsyncioScheduler, Scheduler, TimerHandle
from .scopes import NodeScope, ProcessorScope, Scope

WorkItem = Union[Node, str]
PendingList = Deque[WorkItem]
SourceType = Union[ElementNode, Node, Iterable[Node], None]
FinishCallback = Callable[["RevealEngine"], None]


class RunState(Enum):
    """Lifecycle of a reveal run."""

    IDLE = auto()       # Constructed or restarting, no timer
    RUNNING = auto()    # Emission timer active
    DRAINING = auto()   # Input exhausted, unwinding output scopes
    STOPPED = auto()    # Timer cancelled


class RevealEngine:
    """Reveals a source tree into a target container one step at a time.

    Args:
        target: Container the structure is rebuilt into
        source: Element whose children are revealed, a sequence of nodes,
            or ``None`` to reveal (after removing) the target's own children
        options: :class:`RevealConfig` or a mapping of option names
        render: Render target mirroring the reveal, in-memory by default
        scheduler: Timer provider, asyncio by default
        clock: Millisecond clock; defaults to the scheduler's clock when it
            has one, otherwise the monotonic system clock
    """

    def __init__(
        self,
        target: ElementNode,
        source: SourceType = None,
        options: Union[RevealConfig, Mapping[str, Any], None] = None,
        *,
        render: Optional[RenderTarget] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Clock] = None
    ) -> None:
        if not isinstance(target, ElementNode):
            raise TypeError("Reveal target must be an ElementNode")

        self.config = RevealConfig.from_options(options)
        self.correlation_id = self.config.correlation_id or uuid.uuid4().hex[:12]
        self.logger = get_logger(__name__, self.correlation_id, "reveal_engine")

        self.render = render if render is not None else TreeRenderTarget()
        self.scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        if clock is None:
            clock = getattr(self.scheduler, "clock", None) or SystemClock()
        self.clock = clock

        self.root = target
        self.image_speedup = self.config.image_speedup
        self._rate = float(self.config.rate)

        self.output_stack: List[Scope] = [NodeScope(target)]
        self.input_stack: List[PendingList] = [deque(self._resolve_source(target, source))]

        self.timer: Optional[TimerHandle] = None
        self.blinker: Optional[TimerHandle] = None
        self.last_emission_ms = self.clock.now_ms()
        self.state = RunState.IDLE

        self.metrics = RevealMetrics()
        self.diagnostics: List[DiagnosticEntry] = []
        self._finish_callbacks: List[FinishCallback] = []
        self._finish_notified = False

        if self.config.reveal_immediately:
            self.render.show(target)

        self.logger.debug(
            "Reveal engine created",
            extra={
                "pending_nodes": len(self.input_stack[0]),
                "rate": self._rate,
                "cursor": self.config.cursor_enabled,
            }
        )

    @staticmethod
    def _resolve_source(target: ElementNode, source: SourceType) -> List[Node]:
        if source is None or source is target:
            return target.detach_children()
        if isinstance(source, ElementNode):
            return list(source.children)
        if isinstance(source, Node):
            return [source]
        return list(source)

    # Properties

    @property
    def rate(self) -> float:
        """Line rate in bits per second. Changes apply from the next tick."""
        return self._rate

    @rate.setter
    def rate(self, value: float) -> None:
        number = parse_number(value)
        if number is None or number <= 0:
            raise ValueError("rate must be a number > 0")
        self._rate = number

    @property
    def characters_per_second(self) -> float:
        return self._rate / BITS_PER_CHARACTER

    @property
    def tick_interval_ms(self) -> float:
        return 1000.0 / self.characters_per_second

    @property
    def running(self) -> bool:
        return self.timer is not None

    @property
    def finished(self) -> bool:
        """True once every scope has been closed."""
        return not self.input_stack and not self.output_stack

    @property
    def cursor_class(self) -> str:
        return self.config.cursor_class

    def add_finish_callback(self, callback: FinishCallback) -> None:
        """Call ``callback(engine)`` once the run has ended.

        The run ends when the reveal completes or when an error inside a tick
        stops it; ``finished`` tells the two apart.
        """
        if self._finish_notified:
            callback(self)
        else:
            self._finish_callbacks.append(callback)

    # Control surface

    def start(self) -> "RevealEngine":
        """Start (or resume) the reveal. No-op while running or when finished."""
        if self.timer is not None:
            return self
        if self.finished or self._finish_notified:
            self.logger.debug("Start ignored, reveal already ended")
            return self

        self.last_emission_ms = self.clock.now_ms()
        if self.metrics.started_at_ms is None:
            self.metrics.started_at_ms = self.last_emission_ms
        self.timer = self.scheduler.call_repeatedly(self.tick_interval_ms, self.tick)
        if self.config.blink:
            self.blinker = self.scheduler.call_repeatedly(
                self.config.blink_interval_ms, self._blink
            )
        self.state = RunState.RUNNING

        self.logger.info(
            "Reveal started",
            extra={"rate": self._rate, "interval_ms": self.tick_interval_ms}
        )
        return self

    def stop(self) -> "RevealEngine":
        """Cancel the timers, leaving the stacks in place. Idempotent."""
        if self.timer is None and self.blinker is None:
            return self
        if self.timer is not None:
            self.scheduler.cancel(self.timer)
            self.timer = None
        if self.blinker is not None:
            self.scheduler.cancel(self.blinker)
            self.blinker = None
            self.render.remove_class(self.root, self.config.blink_class)
        self.state = RunState.STOPPED
        self.logger.debug("Reveal stopped", extra={"finished": self.finished})
        return self

    def restart(self) -> "RevealEngine":
        """Stop and start again, recomputing the timer period from ``rate``."""
        self.stop()
        if not self.finished:
            self.state = RunState.IDLE
        return self.start()

    def push_processor(self, processor: Processor) -> None:
        """Make ``processor`` the active scope until it reports done."""
        if not isinstance(processor, Processor):
            raise TypeError("push_processor expects a Processor instance")
        self._push_output(processor)

    def _blink(self) -> None:
        self.render.toggle_class(self.root, self.config.blink_class)

    # Scheduling

    def due_steps(self, now_ms: float) -> int:
        """Emission steps owed for the time elapsed since the last emission."""
        elapsed = now_ms - self.last_emission_ms
        return int(math.floor(elapsed * self.characters_per_second / 1000.0 + 0.5))

    def tick(self) -> None:
        """Timer callback: perform every emission step that is due."""
        try:
            self.metrics.ticks += 1
            if not self.input_stack:
                self.stop()
                self._notify_finished()
                return

            now = self.clock.now_ms()
            steps = self.due_steps(now)
            if steps <= 0:
                return
            self.last_emission_ms = now
            for _ in range(steps):
                self.step()
                if self.finished:
                    break
        except Exception as e:
            self.logger.exception("Reveal tick failed, stopping run")
            self._diagnose(
                DiagnosticSeverity.ERROR,
                f"Reveal stopped after unexpected error: {e}",
                {"exception_type": type(e).__name__},
            )
            self.stop()
            self._notify_finished()

    # Traversal

    def step(self) -> None:
        """Advance the reveal by one emission step.

        Structural transitions (opening, closing and skipping scopes) do not
        count as visible progress, so the loop keeps going until a character
        has been appended, a processor has ticked without finishing, or the
        reveal is over.
        """
        self.metrics.steps += 1
        while True:
            if not self.input_stack or not self.output_stack:
                self._drain()
                return

            scope = self.output_stack[-1]
            if isinstance(scope, ProcessorScope):
                processor = scope.processor
                processor.tick()
                self.metrics.processor_ticks += 1
                if not processor.done:
                    return
                self._pop_output()
                self.metrics.processors_completed += 1
                continue

            pending = self.input_stack[-1]
            if not pending:
                self._pop_both()
                continue

            head = pending[0]
            if isinstance(head, str):
                if not head:
                    pending.popleft()
                    continue
                self._emit(scope, head[0])
                pending[0] = head[1:]
                return

            pending.popleft()
            self._open(head)

    def _emit(self, scope: NodeScope, char: str) -> None:
        if not isinstance(scope.node, TextNode):
            raise TypeError(f"Cannot append text to {scope.node!r}")
        self.render.append_char(scope.node, char)
        self.metrics.characters_emitted += 1

    def _open(self, node: WorkItem) -> None:
        """Handle one source node removed from the current pending list."""
        if isinstance(node, CommentNode):
            return

        if isinstance(node, TextNode):
            self._push_both(node.empty_clone(), deque([node.value]))
            return

        if isinstance(node, ElementNode):
            if node.name not in self.config.recognized_tags:
                self._skip(node, f"Unrecognized element <{node.tag}>, skipping")
                return
            self._apply_rate_override(node)

            clone = node.shallow_clone()
            self._push_both(clone, deque(node.children))
            if clone.name in self.config.image_tags:
                self._push_output(ImageRevealProcessor(self, clone))

            chars = self._numeric_attribute(clone, self.config.pause_chars_attribute)
            secs = self._numeric_attribute(clone, self.config.pause_secs_attribute)
            if chars is not None or secs is not None:
                self._push_output(PauseProcessor(self, clone, chars, secs))
            return

        self._skip(node, f"Unrecognized node type {type(node).__name__}, skipping")

    def _numeric_attribute(self, node: ElementNode, name: str) -> Optional[float]:
        raw = node.get_attribute(name)
        if raw is None:
            return None
        value = parse_number(raw)
        if value is None:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                f"Ignoring non-numeric {name}={raw!r} on <{node.tag}>",
                {"attribute": name, "value": raw},
            )
        return value

    def _apply_rate_override(self, node: ElementNode) -> None:
        value = self._numeric_attribute(node, self.config.rate_attribute)
        if value is None:
            return
        if value <= 0:
            self._diagnose(
                DiagnosticSeverity.WARNING,
                f"Ignoring non-positive {self.config.rate_attribute} on <{node.tag}>",
                {"value": value},
            )
            return

        self.logger.debug("Rate override", extra={"old": self._rate, "new": value})
        self._rate = value
        self.metrics.rate_changes += 1
        if self.timer is not None:
            self.restart()

    def _skip(self, node: Any, message: str) -> None:
        self.metrics.nodes_skipped += 1
        self.logger.warning(message, extra={"node_type": type(node).__name__})
        self._diagnose(DiagnosticSeverity.WARNING, message)

    def _drain(self) -> None:
        if self._finish_notified:
            return
        self.state = RunState.DRAINING
        while self.output_stack:
            self._pop_output()
        self.input_stack.clear()
        self.stop()
        self.state = RunState.STOPPED
        self._notify_finished()

    def _notify_finished(self) -> None:
        if self._finish_notified:
            return
        self._finish_notified = True
        self.state = RunState.STOPPED
        self.metrics.finished_at_ms = self.clock.now_ms()
        if self.finished:
            self.logger.info("Reveal finished", extra=self.metrics.to_dict())
        else:
            self.logger.warning("Reveal ended early", extra=self.metrics.to_dict())

        callbacks, self._finish_callbacks = self._finish_callbacks, []
        for callback in callbacks:
            try:
                callback(self)
            except Exception:
                self.logger.exception("Finish callback failed")

    # Stack manipulation

    def _current_element(self) -> ElementNode:
        scope = self.output_stack[-1]
        element = scope.element
        if not isinstance(scope, NodeScope) or scope.is_text or element is None:
            raise TypeError(f"Cannot insert children into {scope!r}")
        return element

    def _push_both(self, node: Node, pending: PendingList) -> None:
        self._remove_cursor()
        self.render.insert_clone(self._current_element(), node)
        self.output_stack.append(NodeScope(node))
        self.input_stack.append(pending)
        self.metrics.scopes_opened += 1
        self._place_cursor()

    def _push_output(self, processor: Processor) -> None:
        self._remove_cursor()
        self.output_stack.append(ProcessorScope(processor))
        self._place_cursor()

    def _pop_output(self) -> Scope:
        self._remove_cursor()
        scope = self.output_stack.pop()
        self._place_cursor()
        return scope

    def _pop_both(self) -> None:
        self._pop_output()
        self.input_stack.pop()
        self.metrics.scopes_closed += 1

    # Cursor

    def _remove_cursor(self) -> None:
        if not self.config.cursor_enabled or not self.output_stack:
            return
        element = self.output_stack[-1].element
        if element is not None:
            self.render.remove_markers(element, self.cursor_class)

    def _place_cursor(self) -> None:
        if not self.config.cursor_enabled or not self.output_stack:
            return
        scope = self.output_stack[-1]
        if isinstance(scope, ProcessorScope):
            if scope.processor.parent_node is not None:
                self.render.insert_marker(
                    scope.processor.parent_node, None, self.cursor_class
                )
        elif scope.is_text and scope.node.parent is not None:
            self.render.insert_marker(scope.node.parent, scope.node, self.cursor_class)

    # Diagnostics

    def _diagnose(
        self,
        severity: DiagnosticSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component="reveal_engine",
                details=details,
                correlation_id=self.correlation_id,
            )
        )
