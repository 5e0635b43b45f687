"""modemizr: reveal document trees one character at a time.

A rate-limited, structure-preserving reveal engine. Given a tree of text
and element nodes it rebuilds the tree inside a target container at a
configurable line rate, keeping nesting, attributes and order intact, with
progressive image reveals and timed pauses along the way.

Progressive API Disclosure:
- Level 1: Simple functions - reveal(), play(), reveal_now()
- Level 2: Configured engine - RevealEngine with RevealConfig
- Level 3: Custom collaborators - RenderTarget, Scheduler, Processor
"""

__version__ = "0.1.0"
__author__ = "modemizr developers"

from .api import play, reveal, reveal_now
from .engine import RevealEngine, RunState
from .processors import ImageRevealProcessor, PauseProcessor, Processor
from .render import RenderTarget, TreeRenderTarget
from .shared.config import RevealConfig
from .tree import CommentNode, ElementNode, TextNode, element

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "play",
    "reveal",
    "reveal_now",

    # Level 2: Engine and configuration
    "RevealEngine",
    "RunState",
    "RevealConfig",

    # Level 3: Extension points
    "Processor",
    "ImageRevealProcessor",
    "PauseProcessor",
    "RenderTarget",
    "TreeRenderTarget",

    # Node model
    "CommentNode",
    "ElementNode",
    "TextNode",
    "element",
]
