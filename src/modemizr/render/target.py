"""Render target capability used by the reveal engine.

The engine never touches a rendered tree directly. It asks a
:class:`RenderTarget` to insert clones, append characters, clip images and
move the cursor marker, so hosts can mirror the reveal into whatever they
display.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from modemizr.shared.config import parse_number
from modemizr.tree.nodes import ElementNode, Node, TextNode


def _format_px(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value)}px"
    return ("%.3f" % value).rstrip("0").rstrip(".") + "px"


@dataclass(frozen=True)
class ClipRegion:
    """Polygon covering the revealed part of a raster image.

    Rows above ``full_rows`` are fully visible; on the row below, columns
    up to ``partial_width`` are visible.
    """

    width: float
    full_rows: int
    partial_width: float

    @classmethod
    def for_position(cls, position: float, width: float) -> "ClipRegion":
        """Region showing the first ``position`` pixels in raster order."""
        if width <= 0:
            return cls(0.0, 0, 0.0)
        return cls(float(width), int(math.floor(position / width)), position % width)

    @property
    def points(self) -> Tuple[Tuple[float, float], ...]:
        if self.width <= 0:
            return ((0.0, 0.0),) * 6
        top = float(self.full_rows)
        bottom = top + 1.0
        return (
            (0.0, 0.0),
            (self.width, 0.0),
            (self.width, top),
            (self.partial_width, top),
            (self.partial_width, bottom),
            (0.0, bottom),
        )

    def to_css(self) -> str:
        """Render as a CSS ``polygon()`` clip path."""
        return "polygon(" + ", ".join(
            f"{_format_px(x)} {_format_px(y)}" for x, y in self.points
        ) + ")"


class RenderTarget(ABC):
    """Operations the engine performs on the tree being revealed."""

    @abstractmethod
    def insert_clone(self, parent: ElementNode, clone: Node) -> None:
        """Append a freshly cloned scope to ``parent``."""

    @abstractmethod
    def append_char(self, text: TextNode, char: str) -> None:
        """Append one character to an output text scope."""

    @abstractmethod
    def set_clip_region(self, image: ElementNode, region: ClipRegion) -> None:
        """Restrict the visible part of an image."""

    @abstractmethod
    def hide_overflow(self, image: ElementNode) -> None:
        """Keep an image from drawing outside its box while it is clipped."""

    @abstractmethod
    def insert_marker(
        self, parent: ElementNode, after: Optional[Node], class_name: str
    ) -> ElementNode:
        """Place a cursor marker after ``after`` (or last) inside ``parent``."""

    @abstractmethod
    def remove_markers(self, root: ElementNode, class_name: str) -> int:
        """Remove cursor markers below ``root``, returning how many."""

    @abstractmethod
    def toggle_class(self, node: ElementNode, class_name: str) -> None:
        """Toggle a class on an element."""

    @abstractmethod
    def remove_class(self, node: ElementNode, class_name: str) -> None:
        """Remove a class from an element."""

    @abstractmethod
    def show(self, container: ElementNode) -> None:
        """Make a hidden container visible."""

    def image_size(self, image: ElementNode) -> Tuple[int, int]:
        """Pixel dimensions of an image, read from its attributes."""
        width = parse_number(image.get_attribute("width")) or 0.0
        height = parse_number(image.get_attribute("height")) or 0.0
        return max(int(width), 0), max(int(height), 0)


class TreeRenderTarget(RenderTarget):
    """Render target that applies every operation to the node tree itself."""

    def __init__(self) -> None:
        self.clip_regions: Dict[ElementNode, ClipRegion] = {}

    def insert_clone(self, parent: ElementNode, clone: Node) -> None:
        parent.append_child(clone)

    def append_char(self, text: TextNode, char: str) -> None:
        text.value += char

    def set_clip_region(self, image: ElementNode, region: ClipRegion) -> None:
        self.clip_regions[image] = region
        image.set_style("clip-path", region.to_css())

    def hide_overflow(self, image: ElementNode) -> None:
        image.set_style("overflow", "hidden")

    def insert_marker(
        self, parent: ElementNode, after: Optional[Node], class_name: str
    ) -> ElementNode:
        marker = ElementNode("span", {"class": class_name})
        if after is not None and after.parent is parent:
            parent.insert_after(after, marker)
        else:
            parent.append_child(marker)
        return marker

    def remove_markers(self, root: ElementNode, class_name: str) -> int:
        markers = [
            node for node in root.iter_descendants()
            if isinstance(node, ElementNode) and node.has_class(class_name)
        ]
        for marker in markers:
            marker.detach()
        return len(markers)

    def toggle_class(self, node: ElementNode, class_name: str) -> None:
        node.toggle_class(class_name)

    def remove_class(self, node: ElementNode, class_name: str) -> None:
        node.remove_class(class_name)

    def show(self, container: ElementNode) -> None:
        if container.style.get("display") == "none":
            container.set_style("display", "block")
        container.remove_attribute("hidden")
