"""Processors: multi-tick work units occupying an output-stack slot.

Key Components:
    Processor: Abstract tick/done contract understood by the engine
    ImageRevealProcessor: Raster-order image disclosure
    PauseProcessor: Pause by emission steps and/or seconds
"""

from .base import Processor
from .image import ImageRevealProcessor
from .pause import PauseProcessor

__all__ = [
    "Processor",
    "ImageRevealProcessor",
    "PauseProcessor",
]
