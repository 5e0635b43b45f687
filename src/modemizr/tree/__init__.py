"""Node model for reveal source and output trees.

Key Components:
    ElementNode: Element with tag, attributes and ordered children
    TextNode: Character data, cloned empty for output
    CommentNode: Opaque comment, skipped during a reveal
    to_html: Markup serialization of a node tree
"""

from .nodes import (
    CommentNode,
    ElementNode,
    Node,
    TextNode,
    comment,
    element,
    fragment,
    text,
)
from .serialize import inner_html, to_dict, to_html

__all__ = [
    "CommentNode",
    "ElementNode",
    "Node",
    "TextNode",
    "comment",
    "element",
    "fragment",
    "text",
    "inner_html",
    "to_dict",
    "to_html",
]
