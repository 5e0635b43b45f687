"""Entries of the engine's output stack."""

from dataclasses import dataclass
from typing import Optional, Union

from modemizr.processors.base import Processor
from modemizr.tree.nodes import ElementNode, Node, TextNode


@dataclass(frozen=True)
class NodeScope:
    """A cloned element or text node inserted into the output tree."""

    node: Node

    @property
    def is_text(self) -> bool:
        return isinstance(self.node, TextNode)

    @property
    def element(self) -> Optional[ElementNode]:
        """Nearest element: the node itself, or the parent of a text scope."""
        if isinstance(self.node, ElementNode):
            return self.node
        return self.node.parent


@dataclass(frozen=True)
class ProcessorScope:
    """An active processor. Has no pending list on the input stack."""

    processor: Processor

    @property
    def element(self) -> Optional[ElementNode]:
        return self.processor.parent_node


Scope = Union[NodeScope, ProcessorScope]
