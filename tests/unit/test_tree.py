"""Tests for the LCC navigation tree and its text rendering."""

from shelf_browse.core.display.text import render_tree_as_text
from shelf_browse.core.display.tree import ROOT_ID, ROOT_LABEL, displayed_children, render_tree
from shelf_browse.core.lcc.outline import LccOutline
from shelf_browse.models.display import TreeNode


def _child_ranges(outline: LccOutline, subclass: str) -> list[str]:
    node = outline.subclass_tree(subclass)
    assert node is not None
    return [child.range for child in displayed_children(outline, node)]


def test_root(outline: LccOutline) -> None:
    tree = render_tree(outline, max_depth=1)
    assert tree.id == ROOT_ID
    assert tree.label == ROOT_LABEL
    assert [child.id for child in tree.children] == [
        "CLASS_D", "CLASS_L", "CLASS_P", "CLASS_Q", "CLASS_Z",
    ]
    assert all(not child.children for child in tree.children)


def test_class_with_nameless_first_subclass(outline: LccOutline) -> None:
    z = outline.class_tree("Z")
    assert z is not None
    tree = render_tree(outline, z, max_depth=1)
    assert [child.id for child in tree.children] == [
        "Z4-Z8", "Z40-Z115.5", "Z116-Z659", "Z665-Z718.8", "Z719-Z871", "SUBCLASS_ZA",
    ]


def test_class_with_named_first_subclass(outline: LccOutline) -> None:
    q = outline.class_tree("Q")
    assert q is not None
    assert [child.range for child in displayed_children(outline, q)] == ["Q", "QA", "QB"]


def test_artificial_chain_is_folded(outline: LccOutline) -> None:
    assert _child_ranges(outline, "QB") == ["QB1-QB139", "QB140-QB237", "QB495-QB903"]


def test_collapsible_subclass_is_folded(outline: LccOutline) -> None:
    assert _child_ranges(outline, "LD") == ["LD13-LD5650", "LD5651-LD5680", "LD5681-LD7251"]
    assert _child_ranges(outline, "LE") == ["LE3-LE5", "LE7-LE78"]


def test_single_child_subclass_shows_grandchildren(outline: LccOutline) -> None:
    ranges = _child_ranges(outline, "QA")
    assert ranges[0] == "QA1-QA43"
    assert "QA1-QA939" not in ranges


def test_lone_leaf_is_kept(outline: LccOutline) -> None:
    assert _child_ranges(outline, "DAW") == ["DAW1001-DAW1051"]


def test_subclass_with_several_children_is_unchanged(outline: LccOutline) -> None:
    assert _child_ranges(outline, "DA") == ["DA20-DA690", "DA700-DA745", "DA750-DA890", "DA900-DA995"]


def test_depth_names_follow_displayed_levels(outline: LccOutline) -> None:
    z = outline.class_tree("Z")
    assert z is not None
    tree = render_tree(outline, z, max_depth=1)
    assert tree.title.startswith("Classification: ")
    assert tree.children[0].title == "Sub-classification: History of books and bookmaking"
    assert tree.children[0].depth_name == "Sub-classification"


def test_label_and_note(outline: LccOutline) -> None:
    node = outline.range_tree("QA76.75-QA76.765")
    assert node is not None
    tree = render_tree(outline, node, effective_depth=3)
    assert tree.id == "QA76.75-QA76.765"
    assert tree.label == "QA76.75-QA76.765 Computer software"
    assert tree.title == "Topic: Computer software (Including software engineering)"


def test_nameless_subclass_label(outline: LccOutline) -> None:
    z = outline.subclass_tree("Z")
    assert z is not None
    tree = render_tree(outline, z, max_depth=0)
    assert tree.id == "SUBCLASS_Z"
    assert tree.label.startswith("Z History of books and bookmaking. Writing.")
    assert tree.children == ()


def test_max_depth(outline: LccOutline) -> None:
    tree = render_tree(outline, max_depth=2)
    assert all(child.children for child in tree.children)
    assert all(not grandchild.children for child in tree.children for grandchild in child.children)


def test_as_dict(outline: LccOutline) -> None:
    qb = outline.subclass_tree("QB")
    assert qb is not None
    data = render_tree(outline, qb).as_dict()
    assert data["id"] == "SUBCLASS_QB"
    assert data["label"] == "QB Astronomy"
    assert [child["id"] for child in data["children"]] == [
        "QB1-QB139", "QB140-QB237", "QB495-QB903",
    ]
    assert "children" not in data["children"][0]


def test_render_text() -> None:
    tree = TreeNode(
        id="ROOT",
        label="Top",
        children=(
            TreeNode(id="a", label="A", children=(TreeNode(id="a1", label="A1"),)),
            TreeNode(id="b", label="B"),
        ),
    )
    assert render_tree_as_text(tree) == "- Top\n    - A\n        - A1\n    - B\n"


def test_render_text_truncated() -> None:
    tree = TreeNode(
        id="ROOT",
        label="Top",
        children=(
            TreeNode(
                id="a",
                label="A",
                children=(TreeNode(id="a1", label="A1"), TreeNode(id="a2", label="A2")),
            ),
            TreeNode(id="b", label="B", children=(TreeNode(id="b1", label="B1"),)),
        ),
    )
    assert render_tree_as_text(tree, max_depth=1) == (
        "- Top\n"
        "    - A\n"
        "        - ... (2 more children, id=a)\n"
        "    - B\n"
        "        - ... (1 more child, id=b)\n"
    )


def test_render_outline_as_text(outline: LccOutline) -> None:
    qb = outline.subclass_tree("QB")
    assert qb is not None
    text = render_tree_as_text(render_tree(outline, qb))
    assert text.splitlines() == [
        "- QB Astronomy",
        "    - QB1-QB139 General",
        "    - QB140-QB237 Practical and spherical astronomy",
        "    - QB495-QB903 Descriptive astronomy",
    ]
