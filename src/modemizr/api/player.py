"""Convenience entry points for running reveals.

Progressive disclosure, from simplest to most control:

- :func:`reveal_now`: run a reveal to completion instantly on a manual clock
- :func:`reveal`: build and start an engine on the running asyncio loop
- :func:`play`: coroutine that starts an engine and waits for it to finish
- :class:`~modemizr.engine.RevealEngine`: full control
"""

import asyncio
from typing import Any, Mapping, Optional, Union

from modemizr.engine.reveal import RevealEngine, SourceType
from modemizr.engine.scheduler import AsyncioScheduler, ManualScheduler, Scheduler
from modemizr.render.target import RenderTarget
from modemizr.shared import RevealConfig, get_logger
from modemizr.tree.nodes import ElementNode

Options = Union[RevealConfig, Mapping[str, Any], None]


def _merge_options(options: Options, overrides: Mapping[str, Any]) -> RevealConfig:
    config = RevealConfig.from_options(options)
    return config.override(**overrides) if overrides else config


def reveal(
    target: ElementNode,
    source: SourceType = None,
    options: Options = None,
    *,
    render: Optional[RenderTarget] = None,
    scheduler: Optional[Scheduler] = None,
    **overrides: Any
) -> RevealEngine:
    """Create a reveal engine and start it.

    Extra keyword arguments override individual options.

    Example:
        >>> engine = reveal(screen, page, rate=1200, cursor=True)
    """
    config = _merge_options(options, overrides)
    engine = RevealEngine(target, source, config, render=render, scheduler=scheduler)
    return engine.start()


async def play(
    target: ElementNode,
    source: SourceType = None,
    options: Options = None,
    *,
    render: Optional[RenderTarget] = None,
    **overrides: Any
) -> RevealEngine:
    """Reveal on the running event loop and return once the run has ended.

    The run ends when the reveal completes or an error stops it; check
    ``engine.finished`` and ``engine.diagnostics`` to tell which.
    """
    loop = asyncio.get_running_loop()
    finished: "asyncio.Future[RevealEngine]" = loop.create_future()

    def _on_finish(engine: RevealEngine) -> None:
        if not finished.done():
            finished.set_result(engine)

    config = _merge_options(options, overrides)
    engine = RevealEngine(
        target, source, config, render=render, scheduler=AsyncioScheduler(loop)
    )
    engine.add_finish_callback(_on_finish)
    engine.start()
    try:
        return await finished
    finally:
        engine.stop()


def reveal_now(
    target: ElementNode,
    source: SourceType = None,
    options: Options = None,
    *,
    render: Optional[RenderTarget] = None,
    limit_ms: float = 86_400_000.0,
    **overrides: Any
) -> RevealEngine:
    """Run a whole reveal on a simulated clock and return the engine.

    Pauses and image reveals are honoured in simulated time, so the result
    is the same structure a real-time reveal would have produced.
    """
    logger = get_logger(__name__, None, "reveal_now")
    scheduler = ManualScheduler()
    config = _merge_options(options, overrides)
    engine = RevealEngine(target, source, config, render=render, scheduler=scheduler)
    engine.start()
    scheduler.run_until_idle(limit_ms)
    if not engine.finished:
        logger.warning(
            "Simulated reveal did not finish within limit",
            extra={"limit_ms": limit_ms}
        )
        engine.stop()
    return engine
