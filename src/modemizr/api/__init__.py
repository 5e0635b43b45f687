"""Public API layer: convenience runners and source adapters."""

from .adapters import (
    AdapterMetadata,
    AdapterRegistry,
    BeautifulSoupAdapter,
    ConversionResult,
    ElementTreeAdapter,
    LxmlAdapter,
    SourceAdapter,
    adapter_names,
    get_adapter,
    list_available_adapters,
    register_adapter,
)
from .player import play, reveal, reveal_now

__all__ = [
    "play",
    "reveal",
    "reveal_now",
    "AdapterMetadata",
    "AdapterRegistry",
    "BeautifulSoupAdapter",
    "ConversionResult",
    "ElementTreeAdapter",
    "LxmlAdapter",
    "SourceAdapter",
    "adapter_names",
    "get_adapter",
    "list_available_adapters",
    "register_adapter",
]
