"""Tests for HTML rendering of trained trees."""

from __future__ import annotations

from pathlib import Path

import pytest
from pytest_check import check

from dtkit.decision_tree.fitting import train
from dtkit.decision_tree.models import TreeNode
from dtkit.decision_tree.rendering import render_html, render_html_page, save_html


class TestRenderHtml:
    """Tests for `render_html`."""

    def test_leaf(self) -> None:
        """A leaf renders as a single bold list item."""
        assert render_html(TreeNode.leaf("male")) == "<ul><li><span><b>male</b></span></li></ul>"

    def test_internal_node_has_yes_and_no_branches(self) -> None:
        """An internal node shows its escaped rule, then the match and no-match subtrees."""
        # Arrange
        node = TreeNode.internal(
            attribute="weight",
            predicate=">=",
            pivot=170,
            match=TreeNode.leaf("male"),
            no_match=TreeNode.leaf("female"),
            matched_count=4,
            no_matched_count=5,
        )

        # Act
        fragment = render_html(node)

        # Assert
        assert fragment == (
            "<ul><li><span><b>weight &gt;= 170 ?</b></span><ul>"
            "<li><span>yes</span><ul><li><span><b>male</b></span></li></ul></li>"
            "<li><span>no</span><ul><li><span><b>female</b></span></li></ul></li>"
            "</ul></li></ul>"
        )

    def test_deep_chain_renders_every_level(self) -> None:
        """Each level of a chain one hundred nodes deep gets its own rule line."""
        # Arrange
        node = TreeNode.leaf("high")
        for threshold in range(100):
            node = TreeNode.internal(
                attribute="x",
                predicate=">=",
                pivot=threshold,
                match=node,
                no_match=TreeNode.leaf(f"below_{threshold}"),
                matched_count=1,
                no_matched_count=1,
            )

        # Act
        fragment = render_html(node)

        # Assert
        with check:
            assert fragment.count(" ?</b>") == 100
        with check:
            assert fragment.count("<b>high</b>") == 1

    def test_labels_are_escaped(self) -> None:
        """Markup in labels must not leak into the page."""
        assert "<script>" not in render_html(TreeNode.leaf("<script>"))


class TestRenderHtmlPage:
    """Tests for `render_html_page` and `save_html`."""

    def test_page_embeds_tree(self) -> None:
        """The page wraps the tree fragment in a styled document."""
        # Arrange
        model = train("sex", {"person"}, _make_records())

        # Act
        page = render_html_page(model)

        # Assert
        with check:
            assert page.startswith("<html>")
        with check:
            assert '<div class="tree">' + render_html(model.root) + "</div>" in page
        with check:
            assert "<style" in page

    def test_save_html_writes_file(self, tmp_path: Path) -> None:
        """`save_html` writes the page and returns the path."""
        # Arrange
        model = train("sex", {"person"}, _make_records())
        destination = tmp_path / "tree.html"

        # Act
        written = save_html(model, destination)

        # Assert
        with check:
            assert written == destination
        with check:
            assert destination.read_text(encoding="utf-8") == render_html_page(model)

    def test_save_html_empty_path_raises(self) -> None:
        """An empty path is rejected before anything is written."""
        # Arrange
        model = train("sex", {"person"}, _make_records())

        # Act / Assert
        with pytest.raises(ValueError, match="path must not be empty"):
            save_html(model, "")

    def test_save_html_empty_path_object_raises(self) -> None:
        """`Path("")` normalises to the current directory and is rejected as empty too."""
        # Arrange
        model = train("sex", {"person"}, _make_records())

        # Act / Assert
        with pytest.raises(ValueError, match="path must not be empty"):
            save_html(model, Path(""))

    def test_save_html_directory_raises(self, tmp_path: Path) -> None:
        """A directory is not a valid destination file."""
        # Arrange
        model = train("sex", {"person"}, _make_records())

        # Act / Assert
        with pytest.raises(ValueError, match="not a directory"):
            save_html(model, tmp_path)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_records() -> list[dict[str, str | int]]:
    """Build a small separable training set.

    Returns:
        list[dict[str, str | int]]: Training records labelled by `sex`.
    """
    return [
        {"person": "Homer", "weight": 250, "sex": "male"},
        {"person": "Marge", "weight": 150, "sex": "female"},
        {"person": "Bart", "weight": 90, "sex": "male"},
        {"person": "Lisa", "weight": 78, "sex": "female"},
    ]
