"""Static analysis of a source tree before revealing it.

Walks the tree the way the engine would (skipping the same nodes, honouring
the same override attributes) to predict how long a reveal takes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from modemizr.shared import BITS_PER_CHARACTER, RevealConfig, parse_number
from modemizr.tree.nodes import CommentNode, ElementNode, Node, TextNode


@dataclass
class SourceSummary:
    """What a reveal of a source tree will emit."""

    characters: int = 0
    elements: int = 0
    text_nodes: int = 0
    comments: int = 0
    images: int = 0
    image_pixels: int = 0
    pauses: int = 0
    skipped: List[str] = field(default_factory=list)
    estimated_ms: float = 0.0

    @property
    def estimated_seconds(self) -> float:
        return self.estimated_ms / 1000.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "characters": self.characters,
            "elements": self.elements,
            "text_nodes": self.text_nodes,
            "comments": self.comments,
            "images": self.images,
            "image_pixels": self.image_pixels,
            "pauses": self.pauses,
            "skipped": list(self.skipped),
            "estimated_seconds": round(self.estimated_seconds, 3),
        }


class _Walker:
    def __init__(self, config: RevealConfig) -> None:
        self.config = config
        self.rate = float(config.rate)
        self.summary = SourceSummary()

    def _ms_per_char(self) -> float:
        return 1000.0 * BITS_PER_CHARACTER / self.rate

    def walk(self, nodes: Iterable[Node]) -> None:
        for node in nodes:
            if isinstance(node, CommentNode):
                self.summary.comments += 1
            elif isinstance(node, TextNode):
                self.summary.text_nodes += 1
                self.summary.characters += len(node.value)
                self.summary.estimated_ms += len(node.value) * self._ms_per_char()
            elif isinstance(node, ElementNode):
                self._element(node)
            else:
                self.summary.skipped.append(type(node).__name__)

    def _element(self, node: ElementNode) -> None:
        if node.name not in self.config.recognized_tags:
            self.summary.skipped.append(node.tag)
            return
        self.summary.elements += 1

        override = parse_number(node.get_attribute(self.config.rate_attribute))
        if override is not None and override > 0:
            self.rate = override

        chars = parse_number(node.get_attribute(self.config.pause_chars_attribute))
        secs = parse_number(node.get_attribute(self.config.pause_secs_attribute))
        if chars is not None or secs is not None:
            self.summary.pauses += 1
            self.summary.estimated_ms += max(
                (chars or 0.0) * self._ms_per_char(), (secs or 0.0) * 1000.0
            )

        if node.name in self.config.image_tags:
            width = int(parse_number(node.get_attribute("width")) or 0)
            height = int(parse_number(node.get_attribute("height")) or 0)
            pixels = max(width, 0) * max(height, 0)
            self.summary.images += 1
            self.summary.image_pixels += pixels
            pixels_per_second = self.rate * self.config.image_speedup / 10
            if pixels_per_second > 0:
                self.summary.estimated_ms += pixels * 1000.0 / pixels_per_second

        self.walk(node.children)


def analyze_source(
    source: Node,
    config: Optional[RevealConfig] = None
) -> SourceSummary:
    """Summarize what revealing ``source`` (an element's children) would do."""
    walker = _Walker(config or RevealConfig())
    if isinstance(source, ElementNode):
        walker.walk(source.children)
    else:
        walker.walk([source])
    return walker.summary
