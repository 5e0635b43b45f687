"""Tests for the pause processor."""

from types import SimpleNamespace

import pytest

from modemizr.processors import PauseProcessor, Processor
from modemizr.render import TreeRenderTarget
from modemizr.shared import ManualClock
from modemizr.tree import ElementNode


@pytest.fixture
def master():
    return SimpleNamespace(
        clock=ManualClock(), render=TreeRenderTarget(), rate=300.0, image_speedup=100.0
    )


class TestProcessorBase:
    """Test the abstract Processor."""

    def test_cannot_instantiate(self, master):
        """Test that tick must be implemented."""
        with pytest.raises(TypeError):
            Processor(master, None)

    def test_repr(self, master):
        """Test the processor representation."""
        pause = PauseProcessor(master, None, chars=1)
        assert repr(pause) == "PauseProcessor(done=False)"


class TestPauseProcessor:
    """Test character and time based pauses."""

    def test_character_pause(self, master):
        """Test a pause lasting a number of ticks."""
        pause = PauseProcessor(master, ElementNode("span"), chars=5)
        assert not pause.done

        for _ in range(4):
            pause.tick()
            assert not pause.done

        pause.tick()
        assert pause.done
        assert pause.elapsed_ticks == 5

    def test_seconds_pause(self, master):
        """Test a pause lasting an amount of time."""
        pause = PauseProcessor(master, None, secs=1)

        for _ in range(100):
            pause.tick()
        assert not pause.done

        master.clock.advance(999)
        pause.tick()
        assert not pause.done

        master.clock.advance(1)
        pause.tick()
        assert pause.done

    def test_fractional_seconds(self, master):
        """Test sub-second pauses."""
        pause = PauseProcessor(master, None, secs=0.25)
        master.clock.advance(250)
        pause.tick()

        assert pause.done

    def test_both_thresholds_must_clear(self, master):
        """Test that a combined pause waits for the character count."""
        pause = PauseProcessor(master, None, chars=5, secs=1)
        master.clock.advance(1000)

        for _ in range(4):
            pause.tick()
            assert not pause.done

        pause.tick()
        assert pause.done

    def test_both_thresholds_wait_for_time(self, master):
        """Test that a combined pause waits for the time threshold."""
        pause = PauseProcessor(master, None, chars=5, secs=1)

        for _ in range(5):
            pause.tick()
        assert not pause.done

        master.clock.advance(1000)
        pause.tick()
        assert pause.done

    def test_start_time_is_construction_time(self, master):
        """Test that time before construction does not count."""
        master.clock.advance(5000)
        pause = PauseProcessor(master, None, secs=1)

        pause.tick()
        assert not pause.done
        assert pause.start_ms == 5000

    @pytest.mark.parametrize("kwargs", [{}, {"chars": 0}, {"secs": 0}, {"chars": 0, "secs": 0}])
    def test_empty_pause_done_immediately(self, master, kwargs):
        """Test that zero or missing thresholds complete at construction."""
        pause = PauseProcessor(master, None, **kwargs)
        assert pause.done
