"""HTML rendering of a trained tree as a nested list diagram.

Rendering reads nodes only through their public accessors (`category`,
`attribute`, `predicate_label`, `pivot`, `match`, `no_match`) and never
touches training internals.
"""

from __future__ import annotations

import html
from pathlib import Path
from string import Template
from typing import Final

from loguru import logger

from dtkit.decision_tree.models import DecisionTreeModel, TreeNode

_PAGE_TEMPLATE: Final[Template] = Template("""<html>
<head>
    <meta charset="utf-8">
    <style type="text/css">
        * { margin: 0; padding: 0; }
        .tree ul { padding-top: 20px; position: relative; }
        .tree li {
            white-space: nowrap; float: left; text-align: center; list-style-type: none;
            position: relative; padding: 20px 5px 0 5px;
        }
        .tree li::before, .tree li::after {
            content: ''; position: absolute; top: 0; right: 50%;
            border-top: 1px solid #ccc; width: 50%; height: 20px;
        }
        .tree li::after { right: auto; left: 50%; border-left: 1px solid #ccc; }
        .tree li:only-child::after, .tree li:only-child::before { display: none; }
        .tree li:only-child { padding-top: 0; }
        .tree li:first-child::before, .tree li:last-child::after { border: 0 none; }
        .tree li:last-child::before { border-right: 1px solid #ccc; border-radius: 0 5px 0 0; }
        .tree li:first-child::after { border-radius: 5px 0 0 0; }
        .tree ul ul::before {
            content: ''; position: absolute; top: 0; left: 50%;
            border-left: 1px solid #ccc; width: 0; height: 20px;
        }
        .tree li span {
            border: 1px solid #ccc; padding: 5px 10px; color: #666; display: inline-block;
            font-family: arial, verdana, tahoma; font-size: 11px; border-radius: 5px;
        }
    </style>
</head>
<body>
<div class="tree">$tree</div>
</body>
</html>
""")


def render_html(node: TreeNode) -> str:
    """Render a (sub)tree as nested HTML lists.

    Leaves show their category in bold. Internal nodes show their split rule
    followed by a "yes" branch (match) and a "no" branch (no match).

    Args:
        node (TreeNode): Root of the (sub)tree to render.

    Returns:
        str: An HTML fragment.

    Examples:
        >>> render_html(TreeNode.leaf("male"))
        '<ul><li><span><b>male</b></span></li></ul>'
    """
    if node.is_leaf:
        return f"<ul><li><span><b>{html.escape(node.category)}</b></span></li></ul>"
    rule = html.escape(f"{node.attribute} {node.predicate_label} {node.pivot}")
    return (
        f"<ul><li><span><b>{rule} ?</b></span>"
        f"<ul>"
        f"<li><span>yes</span>{render_html(node.match)}</li>"  # type: ignore[arg-type]
        f"<li><span>no</span>{render_html(node.no_match)}</li>"  # type: ignore[arg-type]
        f"</ul></li></ul>"
    )


def render_html_page(model: DecisionTreeModel) -> str:
    """Render a trained model as a standalone HTML page.

    Args:
        model (DecisionTreeModel): The model to render.

    Returns:
        str: A complete HTML document.
    """
    return _PAGE_TEMPLATE.substitute(tree=render_html(model.root))


def save_html(model: DecisionTreeModel, path: str | Path) -> Path:
    """Write the HTML page of a trained model to `path`.

    Args:
        model (DecisionTreeModel): The model to render.
        path (str | Path): Destination file. Parent directories must exist.

    Returns:
        Path: The path written to.

    Raises:
        ValueError: If `path` is empty or names an existing directory.
    """
    destination = Path(path)
    if destination == Path(""):
        raise ValueError("path must not be empty")
    if destination.is_dir():
        raise ValueError(f"path must name a file, not a directory: {destination}")
    destination.write_text(render_html_page(model), encoding="utf-8")
    logger.info("Tree rendered to HTML", path=str(destination), leaf_count=model.leaf_count)
    return destination
