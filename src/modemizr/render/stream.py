"""Render target that echoes the reveal to a text stream."""

import sys
from typing import Optional, TextIO

from modemizr.tree.nodes import ElementNode, Node, TextNode

from .target import TreeRenderTarget

BLOCK_TAGS = frozenset({
    "p", "div", "pre", "h1", "h2", "h3", "h4", "h5", "dl", "dt", "dd",
    "ol", "ul", "li",
})


class StreamRenderTarget(TreeRenderTarget):
    """Builds the output tree and writes each revealed character to a stream.

    Block elements start on a fresh line and line breaks are written as
    newlines, which is enough to follow a reveal in a terminal.
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        super().__init__()
        self.stream = stream if stream is not None else sys.stdout
        self._at_line_start = True

    def _write(self, data: str) -> None:
        if not data:
            return
        self.stream.write(data)
        self.stream.flush()
        self._at_line_start = data.endswith("\n")

    def insert_clone(self, parent: ElementNode, clone: Node) -> None:
        super().insert_clone(parent, clone)
        if not isinstance(clone, ElementNode):
            return
        if clone.name == "br":
            self._write("\n")
        elif clone.name == "img":
            if not self._at_line_start:
                self._write(" ")
            self._write(f"[{clone.get_attribute('alt') or 'image'}]")
        elif clone.name in BLOCK_TAGS and not self._at_line_start:
            self._write("\n")

    def append_char(self, text: TextNode, char: str) -> None:
        super().append_char(text, char)
        self._write(char)

    def finish(self) -> None:
        """Terminate the last line of output."""
        if not self._at_line_start:
            self._write("\n")
