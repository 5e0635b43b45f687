"""Configuration for reveal runs.

This module provides the immutable :class:`RevealConfig` consumed by the
engine, the host-facing option aliases it accepts, and the lenient number
parsing used for per-node override attributes.
"""

import json
import math
import re
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union

DEFAULT_RATE = 300.0
DEFAULT_BLINK_INTERVAL_MS = 500.0
DEFAULT_IMAGE_SPEEDUP = 100.0
DEFAULT_CURSOR_CLASS = "cursor"
DEFAULT_BLINK_CLASS = "blink"

# Serial framing: start bit, eight data bits, stop bit
BITS_PER_CHARACTER = 10.0

RATE_ATTRIBUTE = "data-bps"
PAUSE_CHARS_ATTRIBUTE = "data-pause-chars"
PAUSE_SECS_ATTRIBUTE = "data-pause-secs"

DEFAULT_RECOGNIZED_TAGS: FrozenSet[str] = frozenset({
    "b", "i", "tt", "em", "emph", "span", "div", "p", "pre", "a", "img", "br",
    "h1", "h2", "h3", "h4", "h5", "dl", "dt", "dd", "ol", "ul", "li",
})
DEFAULT_IMAGE_TAGS: FrozenSet[str] = frozenset({"img"})

# Host-facing option names mapped onto dataclass fields
OPTION_ALIASES: Dict[str, str] = {
    "bps": "rate",
    "cursorEnabled": "cursor",
    "cursor_enabled": "cursor",
    "blinkIntervalMs": "blink_interval_ms",
    "imageSpeedup": "image_speedup",
    "revealImmediately": "reveal_immediately",
    "show": "reveal_immediately",
    "correlationId": "correlation_id",
}

_LEADING_NUMBER = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(value: Any) -> Optional[float]:
    """Parse the leading number of an attribute value.

    Mirrors the leniency of markup attribute handling: ``"12px"`` reads as
    12.0. Anything without a finite leading number reads as ``None``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if match is None:
            return None
        number = float(match.group(0))
    if math.isnan(number) or math.isinf(number):
        return None
    return number


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError, ValueError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class RevealConfig:
    """Settings for one reveal run.

    ``rate`` is a serial line speed in bits per second. Each character costs
    :data:`BITS_PER_CHARACTER` bits, so the default of 300 reveals thirty
    characters per second. ``cursor`` is either a flag or the class name of
    the marker element that follows the insertion point.
    """

    rate: float = DEFAULT_RATE
    cursor: Union[bool, str] = False
    blink: bool = False
    blink_interval_ms: float = DEFAULT_BLINK_INTERVAL_MS
    image_speedup: float = DEFAULT_IMAGE_SPEEDUP
    reveal_immediately: bool = False
    correlation_id: Optional[str] = None

    rate_attribute: str = RATE_ATTRIBUTE
    pause_chars_attribute: str = PAUSE_CHARS_ATTRIBUTE
    pause_secs_attribute: str = PAUSE_SECS_ATTRIBUTE
    recognized_tags: FrozenSet[str] = field(default=DEFAULT_RECOGNIZED_TAGS)
    image_tags: FrozenSet[str] = field(default=DEFAULT_IMAGE_TAGS)
    blink_class: str = DEFAULT_BLINK_CLASS

    def __post_init__(self) -> None:
        """Validate and normalize the configuration."""
        if isinstance(self.rate, bool) or not isinstance(self.rate, (int, float)):
            raise ConfigValidationError("rate must be a number", field_name="rate")
        if not self.rate > 0 or math.isinf(self.rate):
            raise ConfigValidationError(
                "rate must be > 0", field_name="rate",
                suggestions=["Use 300 for a classic modem feel"]
            )
        if not self.blink_interval_ms > 0:
            raise ConfigValidationError(
                "blink_interval_ms must be > 0", field_name="blink_interval_ms"
            )
        if self.image_speedup < 0:
            raise ConfigValidationError(
                "image_speedup must be >= 0", field_name="image_speedup"
            )
        if isinstance(self.cursor, str) and not self.cursor.strip():
            raise ConfigValidationError(
                "cursor class name cannot be empty", field_name="cursor",
                suggestions=["Pass True to use the default 'cursor' class"]
            )

        # Tag comparisons are case-insensitive
        object.__setattr__(
            self, "recognized_tags",
            frozenset(tag.lower() for tag in self.recognized_tags)
        )
        object.__setattr__(
            self, "image_tags", frozenset(tag.lower() for tag in self.image_tags)
        )

    @property
    def cursor_enabled(self) -> bool:
        """Whether a cursor marker follows the insertion point."""
        return bool(self.cursor)

    @property
    def cursor_class(self) -> str:
        """Class name given to cursor marker elements."""
        if isinstance(self.cursor, str):
            return self.cursor
        return DEFAULT_CURSOR_CLASS

    @property
    def characters_per_second(self) -> float:
        """Character emission rate derived from ``rate``."""
        return self.rate / BITS_PER_CHARACTER

    @property
    def tick_interval_ms(self) -> float:
        """Scheduler period, one character's worth of time."""
        return 1000.0 / self.characters_per_second

    def override(self, **kwargs: Any) -> "RevealConfig":
        """Create a new configuration with specific overrides.

        Host-facing aliases such as ``imageSpeedup`` are accepted.

        Example:
            >>> config = RevealConfig()
            >>> config.override(bps=1200, cursorEnabled=True).rate
            1200
        """
        return replace(self, **_normalize_keys(kwargs))

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        result: Dict[str, Any] = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            if isinstance(value, frozenset):
                value = sorted(value)
            result[config_field.name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RevealConfig":
        """Create configuration from a dictionary, ignoring unknown keys."""
        known = {config_field.name for config_field in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in _normalize_keys(data).items():
            if key not in known:
                continue
            if key in ("recognized_tags", "image_tags"):
                value = frozenset(value)
            values[key] = value
        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "RevealConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def from_options(
        cls, options: Union["RevealConfig", Mapping[str, Any], None]
    ) -> "RevealConfig":
        """Coerce engine options into a configuration.

        ``None`` entries in a mapping mean "use the default", like omitted keys.
        """
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.from_dict(
            {key: value for key, value in options.items() if value is not None}
        )


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {OPTION_ALIASES.get(key, key): value for key, value in data.items()}
