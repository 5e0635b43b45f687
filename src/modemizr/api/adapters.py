"""Source adapters for trees parsed by popular markup libraries.

The engine only understands its own node model. These adapters convert
lxml, BeautifulSoup and ElementTree trees into it (and back, for
serializing a revealed target), never raising: every conversion returns a
:class:`ConversionResult` carrying either the converted tree or the errors.
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type

from modemizr.shared import DiagnosticEntry, DiagnosticSeverity, get_logger
from modemizr.tree.nodes import CommentNode, ElementNode, Node, TextNode


@dataclass
class AdapterMetadata:
    """Metadata about a source adapter."""

    name: str
    version: str
    target_library: str
    supported_versions: List[str]
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class SourceAdapter(ABC):
    """Abstract base class for source adapters.

    ``to_nodes`` turns a library tree into an :class:`ElementNode`;
    ``from_nodes`` turns an :class:`ElementNode` into a library tree.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def parse_markup(self, markup: str) -> Any:
        """Parse markup with the target library, returning its tree."""

    @abstractmethod
    def _convert_to_nodes(self, native: Any, warnings: List[str]) -> ElementNode:
        """Library-specific conversion into the node model."""

    @abstractmethod
    def _convert_from_nodes(self, node: ElementNode) -> Any:
        """Library-specific conversion out of the node model."""

    def to_nodes(self, native: Any) -> ConversionResult:
        """Convert a library tree into an :class:`ElementNode`."""
        start_time = time.perf_counter()
        warnings: List[str] = []
        try:
            converted = self._convert_to_nodes(native, warnings)
        except Exception as e:
            return self._create_error_result(
                f"Failed to convert from {self.metadata.name}: {e}",
                native,
                (time.perf_counter() - start_time) * 1000
            )

        for warning in warnings:
            self._logger.warning(warning)
        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=native,
            conversion_time_ms=(time.perf_counter() - start_time) * 1000,
            warnings=warnings,
            metadata={
                "root_tag": converted.tag,
                "element_count": 1 + len(
                    [n for n in converted.iter_descendants() if isinstance(n, ElementNode)]
                ),
            },
        )

    def from_nodes(self, node: ElementNode) -> ConversionResult:
        """Convert an :class:`ElementNode` into a library tree."""
        start_time = time.perf_counter()
        if not isinstance(node, ElementNode):
            return self._create_error_result(
                "Only ElementNode trees can be converted", node, 0.0
            )
        try:
            converted = self._convert_from_nodes(node)
        except Exception as e:
            return self._create_error_result(
                f"Failed to convert to {self.metadata.name}: {e}",
                node,
                (time.perf_counter() - start_time) * 1000
            )
        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=node,
            conversion_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    def load(self, markup: str) -> ConversionResult:
        """Parse markup with the target library and convert it."""
        try:
            native = self.parse_markup(markup)
        except Exception as e:
            return self._create_error_result(
                f"{self.metadata.name} could not parse markup: {e}", markup
            )
        return self.to_nodes(native)

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        conversion_time_ms: float = 0.0
    ) -> ConversionResult:
        self._logger.warning(error_message)
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=conversion_time_ms,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )


def _local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an ElementTree-style tag."""
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


class _ElementTreeAPIAdapter(SourceAdapter):
    """Shared conversion for libraries exposing the ElementTree API."""

    @abstractmethod
    def _etree(self) -> Any:
        """Return the module providing Element, Comment and friends."""

    def _convert_to_nodes(self, native: Any, warnings: List[str]) -> ElementNode:
        if hasattr(native, "getroot"):
            native = native.getroot()
        if not isinstance(getattr(native, "tag", None), str):
            raise TypeError(f"{type(native).__name__} is not an element")
        return self._element_to_node(native, warnings)

    def _element_to_node(self, element: Any, warnings: List[str]) -> ElementNode:
        etree = self._etree()
        children: List[Node] = []
        if element.text:
            children.append(TextNode(element.text))
        for child in element:
            if child.tag is etree.Comment:
                children.append(CommentNode(child.text or ""))
            elif isinstance(child.tag, str):
                children.append(self._element_to_node(child, warnings))
            else:
                warnings.append(f"Dropped unsupported node {child!r}")
            if child.tail:
                children.append(TextNode(child.tail))
        attributes = {
            _local_name(str(key)): str(value) for key, value in element.attrib.items()
        }
        return ElementNode(_local_name(element.tag), attributes, children)

    def _convert_from_nodes(self, node: ElementNode) -> Any:
        return self._node_to_element(node, self._etree())

    def _node_to_element(self, node: ElementNode, etree: Any) -> Any:
        element = etree.Element(node.tag, dict(node.attributes))
        last = None
        for child in node.children:
            if isinstance(child, TextNode):
                if last is None:
                    element.text = (element.text or "") + child.value
                else:
                    last.tail = (last.tail or "") + child.value
                continue
            if isinstance(child, CommentNode):
                last = etree.Comment(child.value)
            elif isinstance(child, ElementNode):
                last = self._node_to_element(child, etree)
            else:
                continue
            element.append(last)
        return element


class LxmlAdapter(_ElementTreeAPIAdapter):
    """Adapter for lxml.etree and lxml.html trees."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            target_library="lxml",
            supported_versions=["4.0+"],
            description="Conversion between lxml elements and reveal nodes"
        )

    def is_available(self) -> bool:
        try:
            import lxml.etree  # noqa: F401
            return True
        except ImportError:
            return False

    def _etree(self) -> Any:
        import lxml.etree
        return lxml.etree

    def parse_markup(self, markup: str) -> Any:
        import lxml.html
        return lxml.html.fromstring(markup)


class ElementTreeAdapter(_ElementTreeAPIAdapter):
    """Adapter for xml.etree.ElementTree trees."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            version="1.0.0",
            target_library="xml.etree.ElementTree",
            supported_versions=["3.8+"],
            description="Conversion between ElementTree elements and reveal nodes"
        )

    def is_available(self) -> bool:
        return True

    def _etree(self) -> Any:
        import xml.etree.ElementTree as ET
        return ET

    def parse_markup(self, markup: str) -> Any:
        import xml.etree.ElementTree as ET
        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        return ET.fromstring(markup, parser=parser)


class BeautifulSoupAdapter(SourceAdapter):
    """Adapter for BeautifulSoup trees."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="beautifulsoup",
            version="1.0.0",
            target_library="beautifulsoup4",
            supported_versions=["4.0+"],
            description="Conversion between BeautifulSoup tags and reveal nodes"
        )

    def is_available(self) -> bool:
        try:
            from bs4 import BeautifulSoup  # noqa: F401
            return True
        except ImportError:
            return False

    def parse_markup(self, markup: str) -> Any:
        from bs4 import BeautifulSoup
        return BeautifulSoup(markup, "html.parser")

    def _convert_to_nodes(self, native: Any, warnings: List[str]) -> ElementNode:
        from bs4 import Tag
        if not isinstance(native, Tag):
            raise TypeError(f"{type(native).__name__} is not a BeautifulSoup tag")
        return self._tag_to_node(native, warnings)

    def _tag_to_node(self, tag: Any, warnings: List[str]) -> ElementNode:
        from bs4 import CData, Comment, NavigableString, Tag

        children: List[Node] = []
        for child in tag.children:
            if isinstance(child, Comment):
                children.append(CommentNode(str(child)))
            elif isinstance(child, Tag):
                children.append(self._tag_to_node(child, warnings))
            elif isinstance(child, CData) or type(child) is NavigableString:
                children.append(TextNode(str(child)))
            else:
                warnings.append(f"Dropped {type(child).__name__} node")

        attributes = {
            key: " ".join(value) if isinstance(value, (list, tuple)) else str(value)
            for key, value in tag.attrs.items()
        }
        return ElementNode(tag.name or "document", attributes, children)

    def _convert_from_nodes(self, node: ElementNode) -> Any:
        from bs4 import BeautifulSoup
        soup = BeautifulSoup("", "html.parser")
        soup.append(self._node_to_tag(node, soup))
        return soup

    def _node_to_tag(self, node: ElementNode, soup: Any) -> Any:
        from bs4 import Comment, NavigableString

        tag = soup.new_tag(node.tag, attrs=dict(node.attributes))
        for child in node.children:
            if isinstance(child, TextNode):
                tag.append(NavigableString(child.value))
            elif isinstance(child, CommentNode):
                tag.append(Comment(child.value))
            elif isinstance(child, ElementNode):
                tag.append(self._node_to_tag(child, soup))
        return tag


class AdapterRegistry:
    """Registry for managing source adapters."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[SourceAdapter]] = {}
        self._lock = threading.RLock()

    def register(self, adapter_class: Type[SourceAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        with self._lock:
            self._adapters[adapter_class().metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[SourceAdapter]:
        """Get an adapter instance, or ``None`` if unknown or unavailable."""
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None
        instance = adapter_class(correlation_id)
        return instance if instance.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List metadata of all adapters whose library is importable."""
        with self._lock:
            classes = list(self._adapters.values())
        available = []
        for adapter_class in classes:
            instance = adapter_class()
            if instance.is_available():
                available.append(instance.metadata)
        return available

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._adapters)


# Global adapter registry instance
_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[SourceAdapter]) -> None:
    """Register a source adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[SourceAdapter]:
    """Get a registered adapter instance if its library is available."""
    return _adapter_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available source adapters."""
    return _adapter_registry.list_available_adapters()


def adapter_names() -> List[str]:
    """Names of all registered adapters, available or not."""
    return _adapter_registry.names()


register_adapter(LxmlAdapter)
register_adapter(BeautifulSoupAdapter)
register_adapter(ElementTreeAdapter)
