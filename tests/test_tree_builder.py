"""Tests for flat-to-nested tree reconstruction.

Standard forest used throughout (ids double as names):

    1
    ├── 2
    │   └── 3
    │       └── 4
    └── 5
    6
    └── 7
"""

import copy

from pathtreelib import build_tree, flatten_tree
from pathtreelib.aio import TreeNode


def make_flat():
    paths = ["1", "1#2", "1#2#3", "1#2#3#4", "1#5", "6", "6#7"]
    return [{"id": p.split("#")[-1], "path": p} for p in paths]


def shape(forest):
    """Reduce a forest to nested (id, [children...]) tuples."""
    result = []
    for node in forest:
        children = node.get("children") if isinstance(node, dict) else node.children
        result.append((node["id"] if isinstance(node, dict) else node.id, shape(children or [])))
    return result


class TestBuildTree:
    """Core reconstruction behaviour."""

    def test_full_forest(self):
        forest = build_tree(make_flat())
        assert shape(forest) == [
            ("1", [("2", [("3", [("4", [])])]), ("5", [])]),
            ("6", [("7", [])]),
        ]

    def test_round_trip(self):
        """Flattening then rebuilding reproduces the nesting and order."""
        flat = make_flat()
        forest = build_tree(flat)
        assert [n["id"] for n in flatten_tree(forest)] == [n["id"] for n in flat]
        assert shape(build_tree(flatten_tree(forest))) == shape(forest)

    def test_empty_input(self):
        assert build_tree([]) == []

    def test_input_not_mutated(self):
        flat = make_flat()
        snapshot = copy.deepcopy(flat)
        build_tree(flat)
        assert flat == snapshot

    def test_sibling_order_follows_input(self):
        flat = [{"id": "1", "path": "1"}, {"id": "a", "path": "1#a"},
                {"id": "b", "path": "1#b"}, {"id": "c", "path": "1#c"}]
        assert shape(build_tree(flat)) == [("1", [("a", []), ("b", []), ("c", [])])]


class TestLevelFiltering:
    """min_level and root re-rooting."""

    def test_min_level_reroots(self):
        forest = build_tree(make_flat(), min_level=2)
        assert shape(forest) == [("2", [("3", [("4", [])])]), ("5", []), ("7", [])]

    def test_min_level_beyond_depth(self):
        assert build_tree(make_flat(), min_level=10) == []

    def test_root_raises_base_level(self):
        root = {"id": "2", "path": "1#2"}
        subtree = [n for n in make_flat() if n["path"].startswith("1#2#")]
        assert shape(build_tree(subtree, root=root)) == [("3", [("4", [])])]

    def test_root_never_lowers_min_level(self):
        root = {"id": "1", "path": "1"}
        subtree = [n for n in make_flat() if n["path"].startswith("1#")]
        assert shape(build_tree(subtree, root=root, min_level=3)) == [("3", [("4", [])])]

    def test_missing_ancestor_drops_subtree(self):
        """Nodes whose parent is absent do not become roots."""
        flat = [n for n in make_flat() if n["id"] != "2"]
        assert shape(build_tree(flat)) == [("1", [("5", [])]), ("6", [("7", [])])]

    def test_unrelated_previous_node_is_not_a_parent(self):
        """A node never lands under the last node merely because of its level."""
        flat = [{"id": "1", "path": "1"}, {"id": "2", "path": "1#2"},
                {"id": "9", "path": "8#9"}]
        assert shape(build_tree(flat)) == [("1", [("2", [])])]

    def test_non_recursive_keeps_base_level_only(self):
        forest = build_tree(make_flat(), recursive=False)
        assert shape(forest) == [("1", []), ("6", [])]


class TestOutputShape:
    """Children containers and node types."""

    def test_leaves_have_no_children_key_when_disallowed(self):
        forest = build_tree(make_flat(), allow_empty_children=False)
        five = forest[0]["children"][1]
        assert five["id"] == "5"
        assert "children" not in five
        assert len(forest[0]["children"]) == 2

    def test_tree_nodes_are_supported(self):
        flat = [TreeNode(id=n["id"], path=n["path"]) for n in make_flat()]
        forest = build_tree(flat)
        assert isinstance(forest[0], TreeNode)
        assert shape(forest) == shape(build_tree(make_flat()))
        assert all(node.children is None for node in flat)

    def test_custom_separator(self):
        flat = [{"id": "a", "path": "a"}, {"id": "b", "path": "a/b"}]
        assert shape(build_tree(flat, separator="/")) == [("a", [("b", [])])]

    def test_unsorted_input_does_not_crash(self):
        flat = list(reversed(make_flat()))
        assert isinstance(build_tree(flat), list)
