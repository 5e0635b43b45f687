"""Progressive raster reveal of images."""

from typing import TYPE_CHECKING

from modemizr.render.target import ClipRegion

from .base import Processor

if TYPE_CHECKING:
    from modemizr.tree.nodes import ElementNode

    from .base import ProcessorHost


class ImageRevealProcessor(Processor):
    """Discloses an image left to right, top to bottom, over time.

    An 8-bit image costs roughly one byte per pixel, and a byte is not one
    character, so image throughput is the line rate scaled by the host's
    ``image_speedup`` factor rather than the character rate.
    """

    def __init__(self, master: "ProcessorHost", image: "ElementNode") -> None:
        super().__init__(master, image)
        self.image = image
        self.position = 0.0
        self.done = False
        self.width, self.height = master.render.image_size(image)
        self.last_tick_ms = master.clock.now_ms()
        self.update()
        master.render.hide_overflow(image)

    @property
    def total_pixels(self) -> int:
        return self.width * self.height

    @property
    def region(self) -> ClipRegion:
        return ClipRegion.for_position(self.position, self.width)

    def update(self) -> None:
        """Apply the reveal region for the current position."""
        self.master.render.set_clip_region(self.image, self.region)

    def pixels_pending(self, now_ms: float) -> float:
        """Pixels accumulated since the last tick."""
        elapsed_seconds = (now_ms - self.last_tick_ms) / 1000.0
        return elapsed_seconds * self.master.rate * self.master.image_speedup / 10

    def tick(self) -> None:
        if self.position >= self.total_pixels:
            self.done = True
            return
        now = self.master.clock.now_ms()
        pixels = self.pixels_pending(now)
        if pixels > 0:
            self.last_tick_ms = now
            self.position = min(self.position + pixels, float(self.total_pixels))
            self.update()
