"""Tests for node tree serialization."""

from modemizr.tree import ElementNode, comment, element, inner_html, to_dict, to_html


class TestToHtml:
    """Test markup serialization."""

    def test_nested_markup(self):
        """Test elements, attributes and text."""
        node = element("p", "yet ", element("b", "another", attrs={"class": "x"}), " test")
        assert to_html(node) == '<p>yet <b class="x">another</b> test</p>'

    def test_escaping(self):
        """Test that text and attribute values are escaped."""
        node = element("a", "1 < 2 & 3", attrs={"title": 'say "hi"'})
        assert to_html(node) == '<a title="say &quot;hi&quot;">1 &lt; 2 &amp; 3</a>'

    def test_void_and_comment(self):
        """Test void elements and comments."""
        node = element("p", element("br"), comment(" c "), element("img", attrs={"src": "a.png"}))
        assert to_html(node) == '<p><br><!-- c --><img src="a.png"></p>'

    def test_inner_html(self):
        """Test serializing only the children."""
        node = element("div", element("p", "x"), "y")
        assert inner_html(node) == "<p>x</p>y"
        assert inner_html(ElementNode("div")) == ""


class TestToDict:
    """Test dictionary conversion."""

    def test_to_dict(self):
        """Test nested dictionary structure."""
        node = element("p", "x", comment("c"), attrs={"id": "p1"})

        assert to_dict(node) == {
            "type": "element",
            "tag": "p",
            "attributes": {"id": "p1"},
            "children": [
                {"type": "text", "value": "x"},
                {"type": "comment", "value": "c"},
            ],
        }
