"""Tests for reveal configuration."""

import dataclasses
import json
import math

import pytest

from modemizr.shared import (
    ConfigError,
    ConfigValidationError,
    RevealConfig,
    parse_number,
)


class TestParseNumber:
    """Test lenient attribute number parsing."""

    @pytest.mark.parametrize("value,expected", [
        ("12", 12.0),
        ("12px", 12.0),
        ("  3.5s", 3.5),
        (".5", 0.5),
        ("-2", -2.0),
        ("+4", 4.0),
        ("1e3", 1000.0),
        (5, 5.0),
        (2.5, 2.5),
    ])
    def test_numbers(self, value, expected):
        """Test values with a leading number."""
        assert parse_number(value) == expected

    @pytest.mark.parametrize("value", [
        None, True, "", "abc", "px12", "nan", "inf", "1e400", math.nan, math.inf,
    ])
    def test_not_numbers(self, value):
        """Test values without a finite leading number."""
        assert parse_number(value) is None


class TestRevealConfig:
    """Test RevealConfig defaults, validation and conversion."""

    def test_defaults(self):
        """Test default settings."""
        config = RevealConfig()

        assert config.rate == 300
        assert config.cursor is False
        assert not config.cursor_enabled
        assert config.cursor_class == "cursor"
        assert config.blink is False
        assert config.blink_interval_ms == 500
        assert config.image_speedup == 100
        assert config.rate_attribute == "data-bps"
        assert config.pause_chars_attribute == "data-pause-chars"
        assert config.pause_secs_attribute == "data-pause-secs"
        assert "p" in config.recognized_tags
        assert "blink" not in config.recognized_tags
        assert config.image_tags == frozenset({"img"})

    def test_derived_timing(self):
        """Test character rate and tick interval."""
        config = RevealConfig(rate=1200)

        assert config.characters_per_second == 120
        assert config.tick_interval_ms == pytest.approx(1000 / 120)

    def test_cursor_class_name(self):
        """Test a cursor given as a class name."""
        config = RevealConfig(cursor="caret")

        assert config.cursor_enabled
        assert config.cursor_class == "caret"

    @pytest.mark.parametrize("kwargs,message", [
        ({"rate": 0}, "rate must be > 0"),
        ({"rate": -10}, "rate must be > 0"),
        ({"rate": math.inf}, "rate must be > 0"),
        ({"rate": math.nan}, "rate must be > 0"),
        ({"rate": "fast"}, "rate must be a number"),
        ({"rate": True}, "rate must be a number"),
        ({"blink_interval_ms": 0}, "blink_interval_ms must be > 0"),
        ({"image_speedup": -1}, "image_speedup must be >= 0"),
        ({"cursor": "  "}, "cursor class name cannot be empty"),
    ])
    def test_validation(self, kwargs, message):
        """Test rejected settings."""
        with pytest.raises(ConfigValidationError, match=message) as exc_info:
            RevealConfig(**kwargs)

        assert exc_info.value.field_name == next(iter(kwargs))

    def test_validation_error_hierarchy(self):
        """Test that validation errors are config and value errors."""
        assert issubclass(ConfigValidationError, ConfigError)
        assert issubclass(ConfigValidationError, ValueError)

        with pytest.raises(ConfigValidationError) as exc_info:
            RevealConfig(rate=0)
        assert exc_info.value.suggestions

    def test_tags_are_lowercased(self):
        """Test tag set normalization."""
        config = RevealConfig(recognized_tags=frozenset({"P", "Span"}), image_tags=frozenset({"IMG"}))

        assert config.recognized_tags == frozenset({"p", "span"})
        assert config.image_tags == frozenset({"img"})

    def test_frozen(self):
        """Test that configurations are immutable."""
        config = RevealConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.rate = 1200

    def test_override(self):
        """Test overrides, including host-facing aliases."""
        config = RevealConfig()
        updated = config.override(bps=1200, cursorEnabled=True, imageSpeedup=50)

        assert updated.rate == 1200
        assert updated.cursor is True
        assert updated.image_speedup == 50
        assert config.rate == 300

    def test_override_validates(self):
        """Test that overrides go through validation."""
        with pytest.raises(ConfigValidationError):
            RevealConfig().override(rate=-1)

    def test_dict_round_trip(self):
        """Test conversion to and from dictionaries and JSON."""
        config = RevealConfig(rate=2400, cursor="caret", blink=True)
        data = config.to_dict()

        assert data["rate"] == 2400
        assert data["image_tags"] == ["img"]
        assert json.loads(config.to_json())["cursor"] == "caret"
        assert RevealConfig.from_json(config.to_json()) == config

    def test_from_dict_ignores_unknown_keys(self):
        """Test that unrelated keys are dropped."""
        config = RevealConfig.from_dict({"rate": 600, "theme": "dark", "show": True})

        assert config.rate == 600
        assert config.reveal_immediately is True

    def test_from_options(self):
        """Test coercion of engine options."""
        config = RevealConfig(rate=600)

        assert RevealConfig.from_options(None) == RevealConfig()
        assert RevealConfig.from_options(config) is config
        assert RevealConfig.from_options({"bps": 1200}).rate == 1200
        assert RevealConfig.from_options({"rate": None, "blink": True}).rate == 300
