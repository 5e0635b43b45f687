"""Render targets mirroring a reveal into something a host can display."""

from .stream import StreamRenderTarget
from .target import ClipRegion, RenderTarget, TreeRenderTarget

__all__ = [
    "ClipRegion",
    "RenderTarget",
    "StreamRenderTarget",
    "TreeRenderTarget",
]
