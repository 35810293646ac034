"""Render display trees as indented plain text."""

import io

from shelf_browse.models.display import TreeNode


def render_tree_as_text(tree: TreeNode, *, max_depth: int | None = None) -> str:
    """Render a display tree as an indented bullet list.

    Args:
        tree: The tree to render.
        max_depth: Max levels below the top node to include (None = unlimited).

    Returns:
        Text with one bullet per node, four spaces per level.
    """
    out = io.StringIO()
    todo: list[tuple[TreeNode, int]] = [(tree, 0)]
    while todo:
        node, depth = todo.pop()
        indent = "    " * depth
        out.write(f"{indent}- {node.label}\n")

        if not node.children:
            continue
        if max_depth is not None and depth >= max_depth:
            # Truncation indicator when children are cut off by max_depth
            count = len(node.children)
            noun = "child" if count == 1 else "children"
            out.write(f"{indent}    - ... ({count} more {noun}, id={node.id})\n")
            continue
        todo.extend((child, depth + 1) for child in reversed(node.children))

    return out.getvalue()
