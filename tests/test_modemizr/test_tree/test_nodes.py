"""Tests for the node model."""

import pytest

from modemizr.tree import CommentNode, ElementNode, TextNode, comment, element, fragment, text


class TestTextNode:
    """Test TextNode."""

    def test_value_must_be_string(self):
        """Test that non-string values are rejected."""
        with pytest.raises(TypeError, match="Text value must be a string"):
            TextNode(42)

    def test_empty_clone(self):
        """Test that clones start empty and unattached."""
        parent = element("p", "hello")
        clone = parent.children[0].empty_clone()

        assert clone.value == ""
        assert clone.parent is None
        assert parent.children[0].value == "hello"

    def test_identity_equality(self):
        """Test that nodes compare by identity."""
        assert TextNode("a") != TextNode("a")


class TestElementNode:
    """Test ElementNode structure and helpers."""

    def test_empty_tag_rejected(self):
        """Test that an element needs a tag."""
        with pytest.raises(ValueError, match="Element tag cannot be empty"):
            ElementNode("")

    def test_parent_links(self):
        """Test that children get their parent set on construction."""
        child = TextNode("x")
        parent = ElementNode("p", children=[child])

        assert child.parent is parent

    def test_name_is_lowercase(self):
        """Test case-insensitive tag names."""
        node = ElementNode("DIV")
        assert node.tag == "DIV"
        assert node.name == "div"

    def test_text_content(self):
        """Test concatenated descendant text, ignoring comments."""
        node = element("p", "yet ", element("b", "another"), comment("no"), " test")
        assert node.text_content == "yet another test"

    def test_shallow_clone(self):
        """Test that clones copy tag and attributes but not children."""
        node = element("a", "link", attrs={"href": "/x"})
        clone = node.shallow_clone()

        assert clone.tag == "a"
        assert clone.attributes == {"href": "/x"}
        assert clone.children == []
        clone.set_attribute("href", "/y")
        assert node.get_attribute("href") == "/x"

    def test_append_child_moves_node(self):
        """Test that appending detaches from the previous parent."""
        child = TextNode("x")
        first = ElementNode("p", children=[child])
        second = ElementNode("p")

        second.append_child(child)

        assert first.children == []
        assert second.children == [child]
        assert child.parent is second

    def test_append_child_type_check(self):
        """Test that only nodes can be appended."""
        with pytest.raises(TypeError, match="Child must be a Node instance"):
            ElementNode("p").append_child("text")

    def test_insert_child(self):
        """Test insertion at an index."""
        node = element("p", "a", "c")
        middle = TextNode("b")
        node.insert_child(1, middle)

        assert [child.value for child in node.children] == ["a", "b", "c"]
        with pytest.raises(IndexError):
            node.insert_child(5, TextNode("z"))

    def test_insert_after(self):
        """Test insertion after a reference node, or at the end."""
        first, last = TextNode("a"), TextNode("c")
        node = ElementNode("p", children=[first, last])

        node.insert_after(first, TextNode("b"))
        node.insert_after(TextNode("elsewhere"), TextNode("d"))

        assert [child.value for child in node.children] == ["a", "b", "c", "d"]

    def test_remove_and_detach(self):
        """Test removing children by identity."""
        child = TextNode("x")
        node = ElementNode("p", children=[child])

        assert node.remove_child(child)
        assert not node.remove_child(child)
        assert child.parent is None

        node.append_child(child)
        child.detach()
        assert node.children == []

    def test_detach_children(self):
        """Test removing all children at once."""
        node = element("p", "a", element("b"))
        children = node.detach_children()

        assert len(children) == 2
        assert node.children == []
        assert all(child.parent is None for child in children)

    def test_find(self):
        """Test descendant search in document order."""
        node = element("div", element("p", element("B", "x")), element("b", "y"))

        assert [found.text_content for found in node.find_all("b")] == ["x", "y"]
        assert node.find("b").text_content == "x"
        assert node.find("table") is None

    def test_attributes(self):
        """Test attribute accessors."""
        node = ElementNode("img")
        node.set_attribute("alt", "logo")

        assert node.has_attribute("alt")
        assert node.get_attribute("alt") == "logo"
        assert node.get_attribute("title", "none") == "none"

        node.remove_attribute("alt")
        node.remove_attribute("alt")
        assert not node.has_attribute("alt")

        with pytest.raises(TypeError):
            node.set_attribute("width", 10)

    def test_classes(self):
        """Test class list manipulation."""
        node = ElementNode("div", {"class": "a b"})

        node.add_class("c")
        node.add_class("a")
        assert node.classes == ["a", "b", "c"]

        node.remove_class("b")
        assert node.get_attribute("class") == "a c"

        assert node.toggle_class("blink") is True
        assert node.toggle_class("blink") is False

        node.remove_class("a")
        node.remove_class("c")
        assert not node.has_attribute("class")

    def test_style(self):
        """Test inline style parsing and updates."""
        node = ElementNode("img", {"style": "display: none; Color:red;"})
        assert node.style == {"display": "none", "color": "red"}

        node.set_style("overflow", "hidden")
        node.set_style("display", None)
        assert node.style == {"color": "red", "overflow": "hidden"}

        node.set_style("color", None)
        node.set_style("overflow", None)
        assert not node.has_attribute("style")


class TestBuilders:
    """Test the tree building helpers."""

    def test_element_builder(self):
        """Test that strings become text nodes and attributes strings."""
        node = element("img", attrs={"width": 64, "alt": "x"})
        assert node.attributes == {"width": "64", "alt": "x"}

        paragraph = element("p", "yet ", element("b", "another"))
        assert isinstance(paragraph.children[0], TextNode)
        assert paragraph.children[1].parent is paragraph

    def test_text_and_comment(self):
        """Test the leaf helpers."""
        assert text("x").value == "x"
        assert isinstance(comment(), CommentNode)
        assert comment("note").value == "note"

    def test_fragment(self):
        """Test detached node lists."""
        nodes = fragment("a", element("br"))

        assert isinstance(nodes[0], TextNode)
        assert nodes[0].parent is None
        assert nodes[1].tag == "br"
