"""Node model for source and output trees.

Source trees are supplied by the host (directly or through an adapter) and
are only ever read by the engine. Output trees are built from shallow
clones of source nodes and grow one character at a time.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Sequence, Union


class Node:
    """Common base for all tree nodes."""

    parent: Optional["ElementNode"]

    @property
    def text_content(self) -> str:
        return ""

    def detach(self) -> None:
        """Remove this node from its parent, if it has one."""
        if self.parent is not None:
            self.parent.remove_child(self)


@dataclass(eq=False)
class TextNode(Node):
    """A run of character data."""

    value: str = ""
    parent: Optional["ElementNode"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError("Text value must be a string")

    @property
    def text_content(self) -> str:
        return self.value

    def empty_clone(self) -> "TextNode":
        """Clone for output: the content is built up incrementally."""
        return TextNode("")


@dataclass(eq=False)
class CommentNode(Node):
    """A comment. Opaque to the engine, which skips it."""

    value: str = ""
    parent: Optional["ElementNode"] = field(default=None, repr=False)


@dataclass(eq=False)
class ElementNode(Node):
    """An element with a tag, attributes and ordered children."""

    tag: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[Node] = field(default_factory=list)
    parent: Optional["ElementNode"] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        """Validate the tag and establish parent links."""
        if not self.tag:
            raise ValueError("Element tag cannot be empty")
        for child in self.children:
            child.parent = self

    @property
    def name(self) -> str:
        """Lower-cased tag name used for tag comparisons."""
        return self.tag.lower()

    @property
    def text_content(self) -> str:
        """Concatenated text of all descendant text nodes."""
        return "".join(child.text_content for child in self.children)

    def shallow_clone(self) -> "ElementNode":
        """Clone tag and attributes, leaving children behind."""
        return ElementNode(self.tag, dict(self.attributes))

    # Children

    def append_child(self, child: Node) -> None:
        """Append a child, detaching it from any previous parent."""
        if not isinstance(child, Node):
            raise TypeError("Child must be a Node instance")
        child.detach()
        child.parent = self
        self.children.append(child)

    def insert_child(self, index: int, child: Node) -> None:
        """Insert child at a specific index."""
        if not isinstance(child, Node):
            raise TypeError("Child must be a Node instance")
        if not (0 <= index <= len(self.children)):
            raise IndexError("Child index out of range")
        child.detach()
        child.parent = self
        self.children.insert(index, child)

    def insert_after(self, reference: Node, child: Node) -> None:
        """Insert child directly after ``reference``, or at the end."""
        child.detach()
        for index, existing in enumerate(self.children):
            if existing is reference:
                child.parent = self
                self.children.insert(index + 1, child)
                return
        self.append_child(child)

    def remove_child(self, child: Node) -> bool:
        """Remove a child and clear its parent link."""
        for index, existing in enumerate(self.children):
            if existing is child:
                del self.children[index]
                child.parent = None
                return True
        return False

    def detach_children(self) -> List[Node]:
        """Remove and return all children, in order."""
        detached = list(self.children)
        self.children.clear()
        for child in detached:
            child.parent = None
        return detached

    def iter_descendants(self) -> Iterator[Node]:
        """Iterate over all descendants in document order."""
        for child in self.children:
            yield child
            if isinstance(child, ElementNode):
                yield from child.iter_descendants()

    def find_all(self, tag: str) -> List["ElementNode"]:
        """Find all descendant elements with a matching tag name."""
        wanted = tag.lower()
        return [
            node for node in self.iter_descendants()
            if isinstance(node, ElementNode) and node.name == wanted
        ]

    def find(self, tag: str) -> Optional["ElementNode"]:
        """Find the first descendant element with a matching tag name."""
        matches = self.find_all(tag)
        return matches[0] if matches else None

    # Attributes

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def set_attribute(self, name: str, value: str) -> None:
        """Set attribute value."""
        if not isinstance(name, str) or not isinstance(value, str):
            raise TypeError("Attribute name and value must be strings")
        self.attributes[name] = value

    def has_attribute(self, name: str) -> bool:
        """Check if element has specific attribute."""
        return name in self.attributes

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    @property
    def classes(self) -> List[str]:
        return self.attributes.get("class", "").split()

    def has_class(self, name: str) -> bool:
        return name in self.classes

    def add_class(self, name: str) -> None:
        classes = self.classes
        if name not in classes:
            classes.append(name)
            self.attributes["class"] = " ".join(classes)

    def remove_class(self, name: str) -> None:
        if not self.has_class(name):
            return
        classes = [existing for existing in self.classes if existing != name]
        if classes:
            self.attributes["class"] = " ".join(classes)
        else:
            del self.attributes["class"]

    def toggle_class(self, name: str) -> bool:
        """Toggle a class, returning whether it is now present."""
        if self.has_class(name):
            self.remove_class(name)
            return False
        self.add_class(name)
        return True

    @property
    def style(self) -> Dict[str, str]:
        """Inline style declarations parsed from the ``style`` attribute."""
        declarations: Dict[str, str] = {}
        for chunk in self.attributes.get("style", "").split(";"):
            prop, sep, value = chunk.partition(":")
            if sep and prop.strip():
                declarations[prop.strip().lower()] = value.strip()
        return declarations

    def set_style(self, prop: str, value: Optional[str]) -> None:
        """Set or, with ``None``, remove one inline style declaration."""
        declarations = self.style
        if value is None:
            declarations.pop(prop.lower(), None)
        else:
            declarations[prop.lower()] = value
        if declarations:
            self.attributes["style"] = "; ".join(
                f"{key}: {val}" for key, val in declarations.items()
            )
        else:
            self.attributes.pop("style", None)


Child = Union[Node, str]


def text(value: str) -> TextNode:
    """Create a text node."""
    return TextNode(value)


def comment(value: str = "") -> CommentNode:
    """Create a comment node."""
    return CommentNode(value)


def element(
    tag: str,
    *children: Child,
    attrs: Optional[Dict[str, Any]] = None
) -> ElementNode:
    """Build an element; plain strings among ``children`` become text nodes.

    Example:
        >>> p = element("p", "yet ", element("b", "another"), " test")
        >>> p.text_content
        'yet another test'
    """
    nodes: List[Node] = [
        TextNode(child) if isinstance(child, str) else child for child in children
    ]
    attributes = {key: str(value) for key, value in (attrs or {}).items()}
    return ElementNode(tag, attributes, nodes)


def fragment(*children: Child) -> Sequence[Node]:
    """Build a detached list of nodes for use as a reveal source."""
    return [TextNode(child) if isinstance(child, str) else child for child in children]
