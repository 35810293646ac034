"""Build the navigable LCC display tree."""

from shelf_browse import config
from shelf_browse.core.lcc.outline import LccOutline, lcc_depth_name, strip_parens
from shelf_browse.models.display import TreeNode
from shelf_browse.models.lcc import LccNode, NodeKind

ROOT_ID = "ROOT"
ROOT_LABEL = "Library of Congress Classifications"


def render_tree(
    outline: LccOutline,
    node: LccNode | None = None,
    *,
    effective_depth: int | None = None,
    max_depth: int | None = None,
) -> TreeNode:
    """Render an outline subtree for navigation.

    Redundant levels are folded away: a class whose first child has no name
    of its own shows that child's children instead, and a subclass with a
    single child skips down a chain of single children when the chain is
    artificial (or the subclass is one of ``config.COLLAPSIBLE_SUBCLASSES``).
    Depth names follow the levels actually shown, not the outline depth.

    Args:
        outline: The LCC outline.
        node: Subtree root (the outline root by default).
        effective_depth: Depth to report for ``node`` (default: its own depth).
        max_depth: Max levels below ``node`` to include (None = unlimited).

    Returns:
        TreeNode for ``node`` with its displayed descendants.
    """
    node = node or outline.root
    depth = effective_depth if effective_depth is not None else node.depth
    depth_name = lcc_depth_name(depth)

    if node.kind is NodeKind.ROOT:
        node_id, label, title = ROOT_ID, ROOT_LABEL, ROOT_LABEL
    else:
        range_text = strip_parens(node.range)
        if node.kind is NodeKind.RANGE:
            node_id = range_text
        else:
            node_id = f"{node.kind.name}_{range_text}"
        name = outline.effective_name(node)
        label = f"{range_text} {name}" if name else range_text
        title = f"{depth_name}: {node.ascii_name or name}"
        if node.note:
            title += f" ({node.note})"

    children: tuple[TreeNode, ...] = ()
    if node.children and (max_depth is None or max_depth > 0):
        remaining = max_depth - 1 if max_depth is not None else None
        children = tuple(
            render_tree(outline, child, effective_depth=depth + 1, max_depth=remaining)
            for child in displayed_children(outline, node)
        )
    return TreeNode(id=node_id, label=label, title=title, depth_name=depth_name, children=children)


def displayed_children(outline: LccOutline, node: LccNode) -> list[LccNode]:
    """Children of a node as shown in the tree, after folding redundant levels."""
    children = list(outline.children(node))
    if not children:
        return children
    first = children[0]

    if node.kind is NodeKind.CLASS and not first.name:
        return list(outline.children(first)) + children[1:]

    if node.kind is NodeKind.SUBCLASS and len(children) == 1:
        collapsible = node.range in config.COLLAPSIBLE_SUBCLASSES
        current = first
        while len(current.children) == 1:
            only = outline.node(current.children[0])
            if not (collapsible or only.artificial):
                break
            current = only
        # A lone leaf is kept rather than folded into nothing.
        if current.children:
            return list(outline.children(current))
    return children
