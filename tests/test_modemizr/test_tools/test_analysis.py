"""Tests for source analysis and testing helpers."""

import pytest

from modemizr.api import reveal_now
from modemizr.shared import RevealConfig
from modemizr.tools import (
    analyze_source,
    character_count,
    children_signature,
    count_markers,
    structure_signature,
)
from modemizr.tree import CommentNode, ElementNode, TextNode, comment, element


class TestAnalyzeSource:
    """Test reveal duration estimates."""

    def test_summary(self):
        """Test counts and duration for a mixed document."""
        source = element(
            "div",
            element("p", "hello"),
            comment("x"),
            element("blink", "no"),
            element("img", attrs={"width": 10, "height": 10}),
            element("span", "ab", attrs={"data-pause-secs": "2"}),
        )
        summary = analyze_source(source)

        assert summary.characters == 7
        assert summary.elements == 3
        assert summary.text_nodes == 2
        assert summary.comments == 1
        assert summary.images == 1
        assert summary.image_pixels == 100
        assert summary.pauses == 1
        assert summary.skipped == ["blink"]
        # 7 characters at 30/s, a 2 s pause and 100 pixels at 3000/s
        assert summary.estimated_ms == pytest.approx(7 * 1000 / 30 + 2000 + 100 / 3)

    def test_rate_override_followed(self):
        """Test that data-bps changes the estimate for what follows."""
        source = element(
            "div", element("p", "x" * 30), element("p", "x" * 120, attrs={"data-bps": 1200})
        )
        summary = analyze_source(source)

        assert summary.estimated_seconds == pytest.approx(2.0)

    def test_character_pause(self):
        """Test that character pauses cost character time."""
        source = element("div", element("p", "x", attrs={"data-pause-chars": 30}))
        summary = analyze_source(source, RevealConfig(rate=300))

        assert summary.estimated_ms == pytest.approx(1000 + 1000 / 30)

    def test_non_element_source(self):
        """Test analysing a single node."""
        summary = analyze_source(TextNode("abc"))

        assert summary.characters == 3
        assert summary.to_dict()["estimated_seconds"] == 0.1

    def test_estimate_matches_simulation(self):
        """Test that the estimate is close to a simulated reveal."""
        source = element("div", element("p", "x" * 60), element("p", "y", attrs={"data-pause-secs": 1}))
        summary = analyze_source(source)
        engine = reveal_now(ElementNode("div"), source)

        assert engine.metrics.elapsed_ms == pytest.approx(summary.estimated_ms, rel=0.05)


class TestTestingHelpers:
    """Test output comparison helpers."""

    def test_structure_signature(self):
        """Test signatures of text and elements."""
        node = element("p", "a", comment("c"), element("span", attrs={"class": "cursor"}), attrs={"id": "x"})

        assert structure_signature(TextNode("a")) == ("#text", "a")
        assert structure_signature(node, ignore_class="cursor") == (
            "p", (("id", "x"),), (("#text", "a"),)
        )
        assert len(structure_signature(node)[2]) == 2
        assert structure_signature(CommentNode("c")) == ("#other", "CommentNode")

    def test_children_signature_and_counts(self):
        """Test child signatures, character and marker counts."""
        node = element("div", element("p", "ab"), element("span", attrs={"class": "cursor blink"}))

        assert children_signature(node, "cursor") == (("p", (), (("#text", "ab"),)),)
        assert character_count(node) == 2
        assert count_markers(node) == 1
        assert count_markers(node, "caret") == 0
