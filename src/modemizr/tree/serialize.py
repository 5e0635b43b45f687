"""Markup and dictionary serialization of node trees."""

from html import escape
from typing import Any, Dict

from .nodes import CommentNode, ElementNode, Node, TextNode

VOID_TAGS = frozenset({"br", "img", "hr", "input", "meta", "link"})


def to_html(node: Node) -> str:
    """Serialize a node and its descendants to HTML markup."""
    if isinstance(node, TextNode):
        return escape(node.value, quote=False)
    if isinstance(node, CommentNode):
        return f"<!--{node.value}-->"
    if isinstance(node, ElementNode):
        attributes = "".join(
            f' {key}="{escape(value)}"' for key, value in node.attributes.items()
        )
        if node.name in VOID_TAGS and not node.children:
            return f"<{node.tag}{attributes}>"
        inner = "".join(to_html(child) for child in node.children)
        return f"<{node.tag}{attributes}>{inner}</{node.tag}>"
    return ""


def inner_html(node: ElementNode) -> str:
    """Serialize only the children of an element."""
    return "".join(to_html(child) for child in node.children)


def to_dict(node: Node) -> Dict[str, Any]:
    """Convert a node to a nested dictionary."""
    if isinstance(node, TextNode):
        return {"type": "text", "value": node.value}
    if isinstance(node, CommentNode):
        return {"type": "comment", "value": node.value}
    if isinstance(node, ElementNode):
        return {
            "type": "element",
            "tag": node.tag,
            "attributes": dict(node.attributes),
            "children": [to_dict(child) for child in node.children],
        }
    return {"type": type(node).__name__}
