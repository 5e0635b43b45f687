"""Tests for the convenience runners."""

import asyncio

import pytest

from modemizr.api import play, reveal, reveal_now
from modemizr.engine import ManualScheduler, RunState
from modemizr.render import TreeRenderTarget
from modemizr.shared import ConfigValidationError, DiagnosticSeverity, RevealConfig
from modemizr.tools import children_signature
from modemizr.tree import ElementNode, element, fragment


def sample_page():
    return element(
        "div",
        element("h1", "Welcome"),
        element("p", "yet ", element("b", "another"), " test"),
    )


class TestRevealNow:
    """Test reveal_now on a simulated clock."""

    def test_completes(self):
        """Test that the whole structure is rebuilt."""
        source = sample_page()
        target = ElementNode("div")
        engine = reveal_now(target, source)

        assert engine.finished
        assert engine.state == RunState.STOPPED
        assert children_signature(target) == children_signature(source)

    def test_overrides(self):
        """Test keyword overrides on top of options."""
        engine = reveal_now(ElementNode("div"), sample_page(), {"rate": 600}, cursor=True)

        assert engine.rate == 600
        assert engine.config.cursor is True

    def test_simulated_duration(self):
        """Test that simulated time follows the rate."""
        engine = reveal_now(ElementNode("div"), element("div", "x" * 30))

        assert engine.metrics.elapsed_ms == pytest.approx(31 * 1000 / 30)

    def test_limit_stops_unfinished_run(self):
        """Test that a reveal longer than the limit is stopped."""
        engine = reveal_now(ElementNode("div"), element("div", "x" * 100), limit_ms=1000)

        assert not engine.finished
        assert not engine.running
        assert 0 < engine.metrics.characters_emitted < 100

    def test_invalid_override(self):
        """Test that invalid options raise before anything runs."""
        with pytest.raises(ConfigValidationError):
            reveal_now(ElementNode("div"), sample_page(), rate=0)


class TestReveal:
    """Test the reveal starter."""

    def test_returns_started_engine(self):
        """Test that reveal starts the engine on the given scheduler."""
        scheduler = ManualScheduler()
        engine = reveal(ElementNode("div"), sample_page(), RevealConfig(rate=1200), scheduler=scheduler)

        assert engine.running
        scheduler.run_until_idle()
        assert engine.finished

    def test_on_running_loop(self):
        """Test that the default scheduler uses the running loop."""

        async def main():
            target = ElementNode("div")
            engine = reveal(target, element("p", "hi"), rate=100000)
            while not engine.finished:
                await asyncio.sleep(0.01)
            return target

        target = asyncio.run(asyncio.wait_for(main(), timeout=5))
        assert target.text_content == "hi"


class TestPlay:
    """Test the play coroutine."""

    def test_play_to_completion(self):
        """Test that play returns once the reveal has finished."""
        source = sample_page()
        target = ElementNode("div")

        engine = asyncio.run(asyncio.wait_for(play(target, source, rate=100000), timeout=5))

        assert engine.finished
        assert children_signature(target) == children_signature(source)

    def test_render_failure_ends_play(self):
        """Test that play returns when an error stops the run."""

        class BrokenTarget(TreeRenderTarget):
            def append_char(self, text, char):
                raise RuntimeError("display went away")

        engine = asyncio.run(asyncio.wait_for(
            play(ElementNode("div"), fragment("abc"), render=BrokenTarget(), rate=100000),
            timeout=2,
        ))

        assert not engine.finished
        assert not engine.running
        assert engine.diagnostics[-1].severity == DiagnosticSeverity.ERROR

    def test_cancelled_play_stops_engine(self):
        """Test that cancelling the coroutine cancels the timers."""
        engines = []

        async def main():
            target = ElementNode("div")
            task = asyncio.ensure_future(play(target, element("p", "x" * 1000)))
            await asyncio.sleep(0.05)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task
            engines.append(target)

        asyncio.run(main())

        assert engines
        assert len(engines[0].text_content) < 1000
