"""Helpers for checking reveal output in tests and host integrations."""

from typing import Any, Optional, Tuple

from modemizr.engine.reveal import RevealEngine
from modemizr.engine.scheduler import ManualScheduler
from modemizr.tree.nodes import CommentNode, ElementNode, Node, TextNode

Signature = Tuple[Any, ...]


def structure_signature(node: Node, ignore_class: Optional[str] = None) -> Signature:
    """Comparable summary of a tree: tags, attributes, nesting and text.

    Comments are left out since a reveal never copies them, and so are
    elements carrying ``ignore_class`` (cursor markers).
    """
    if isinstance(node, TextNode):
        return ("#text", node.value)
    if isinstance(node, ElementNode):
        children = tuple(
            structure_signature(child, ignore_class)
            for child in node.children
            if not isinstance(child, CommentNode)
            and not (
                ignore_class
                and isinstance(child, ElementNode)
                and child.has_class(ignore_class)
            )
        )
        return (node.name, tuple(sorted(node.attributes.items())), children)
    return ("#other", type(node).__name__)


def children_signature(node: ElementNode, ignore_class: Optional[str] = None) -> Signature:
    """Signature of an element's children only."""
    return structure_signature(node, ignore_class)[2]


def character_count(node: Node) -> int:
    """Number of characters in all text below ``node``."""
    return len(node.text_content)


def count_markers(node: ElementNode, class_name: str = "cursor") -> int:
    return sum(
        1 for child in node.iter_descendants()
        if isinstance(child, ElementNode) and child.has_class(class_name)
    )


def run_for(engine: RevealEngine, scheduler: ManualScheduler, ms: float) -> int:
    """Start the engine if needed and let ``ms`` of simulated time pass."""
    if not engine.running and not engine.finished:
        engine.start()
    return scheduler.advance(ms)
