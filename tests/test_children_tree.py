"""Tests for nested tree queries through TreeRepository.

Fixture forest (created in this order):

    Acme
    ├── East
    │   └── Boston
    └── West
    Globex
    └── Research
"""

import pytest

from pathtreelib import TreeConfig, TreeQuery
from pathtreelib.aio import InMemoryStorageAdapter, TreeNode, TreeRepository


async def company_tree(config=None):
    tree = TreeRepository(InMemoryStorageAdapter(), config)
    acme = await tree.create({"name": "Acme", "earnings": 10, "active": True})
    east = await tree.create({"name": "East", "earnings": 5, "active": False}, parent=acme)
    boston = await tree.create({"name": "Boston", "earnings": 2, "active": True}, parent=east)
    west = await tree.create({"name": "West", "earnings": 3, "active": True}, parent=acme)
    globex = await tree.create({"name": "Globex", "earnings": 7, "active": True})
    research = await tree.create({"name": "Research", "earnings": 1, "active": True}, parent=globex)
    return tree, {n.data["name"]: n for n in (acme, east, boston, west, globex, research)}


def names(forest):
    """Reduce a forest to nested (name, [children...]) tuples."""
    result = []
    for node in forest:
        if isinstance(node, TreeNode):
            result.append((node.data["name"], names(node.children or [])))
        else:
            result.append((node["name"], names(node.get("children", []))))
    return result


class TestChildrenTree:
    """Default recursive queries."""

    @pytest.mark.asyncio
    async def test_whole_forest(self):
        tree, _ = await company_tree()
        forest = await tree.get_children_tree()
        assert names(forest) == [
            ("Acme", [("East", [("Boston", [])]), ("West", [])]),
            ("Globex", [("Research", [])]),
        ]

    @pytest.mark.asyncio
    async def test_subtree_of_root(self):
        tree, nodes = await company_tree()
        forest = await tree.get_children_tree(nodes["Acme"])
        assert names(forest) == [("East", [("Boston", [])]), ("West", [])]

    @pytest.mark.asyncio
    async def test_subtree_of_leaf_is_empty(self):
        tree, nodes = await company_tree()
        assert await tree.get_children_tree(nodes["Boston"]) == []

    @pytest.mark.asyncio
    async def test_results_are_plain_documents(self):
        tree, nodes = await company_tree()
        forest = await tree.get_children_tree()
        acme = forest[0]
        assert isinstance(acme, dict)
        assert acme["id"] == nodes["Acme"].id
        assert acme["path"] == nodes["Acme"].path
        assert acme["parent_id"] is None
        assert acme["earnings"] == 10

    @pytest.mark.asyncio
    async def test_tree_reflects_move(self):
        tree, nodes = await company_tree()
        await tree.move(nodes["East"], nodes["Globex"])
        forest = await tree.get_children_tree()
        assert names(forest) == [
            ("Acme", [("West", [])]),
            ("Globex", [("East", [("Boston", [])]), ("Research", [])]),
        ]


class TestTreeQueryOptions:
    """TreeQuery knobs."""

    @pytest.mark.asyncio
    async def test_min_level(self):
        tree, _ = await company_tree()
        forest = await tree.get_children_tree(query=TreeQuery.from_level(2))
        assert names(forest) == [("East", [("Boston", [])]), ("West", []), ("Research", [])]

    @pytest.mark.asyncio
    async def test_direct_children_of_root(self):
        tree, nodes = await company_tree()
        forest = await tree.get_children_tree(nodes["Acme"], TreeQuery.direct_children())
        assert names(forest) == [("East", []), ("West", [])]

    @pytest.mark.asyncio
    async def test_direct_children_without_root_lists_roots(self):
        tree, _ = await company_tree()
        forest = await tree.get_children_tree(query=TreeQuery.direct_children())
        assert names(forest) == [("Acme", []), ("Globex", [])]

    @pytest.mark.asyncio
    async def test_filtered_parent_drops_its_subtree(self):
        tree, _ = await company_tree()
        forest = await tree.get_children_tree(query=TreeQuery(filters={"active": True}))
        assert names(forest) == [
            ("Acme", [("West", [])]),
            ("Globex", [("Research", [])]),
        ]

    @pytest.mark.asyncio
    async def test_null_parent_filter_ignored_when_recursive(self):
        tree, _ = await company_tree()
        forest = await tree.get_children_tree(query=TreeQuery(filters={"parent_id": None}))
        assert len(names(forest)) == 2
        assert names(forest)[0][1]

    @pytest.mark.asyncio
    async def test_fields_always_include_structure(self):
        tree, _ = await company_tree()
        forest = await tree.get_children_tree(query=TreeQuery(fields=["name"]))
        acme = forest[0]
        assert set(acme) == {"id", "name", "path", "parent_id", "children"}
        assert "earnings" not in acme["children"][0]

    @pytest.mark.asyncio
    async def test_caller_sort_is_replaced_by_path_order(self):
        tree, _ = await company_tree()
        query = TreeQuery(options={"sort": [("earnings", -1)]})
        forest = await tree.get_children_tree(query=query)
        assert [name for name, _ in names(forest)] == ["Acme", "Globex"]

    @pytest.mark.asyncio
    async def test_empty_children_disallowed(self):
        tree, _ = await company_tree()
        forest = await tree.get_children_tree(query=TreeQuery(allow_empty_children=False))
        west = forest[0]["children"][1]
        assert west["name"] == "West"
        assert "children" not in west
        assert forest[0]["children"][0]["children"][0]["name"] == "Boston"

    @pytest.mark.asyncio
    async def test_config_default_for_empty_children(self):
        tree, _ = await company_tree(TreeConfig(allow_empty_children=False))
        forest = await tree.get_children_tree()
        assert "children" not in forest[1]["children"][0]

    @pytest.mark.asyncio
    async def test_invalid_min_level(self):
        tree, _ = await company_tree()
        with pytest.raises(ValueError):
            await tree.get_children_tree(query=TreeQuery(min_level=0))


class TestWrappedResults:
    """wrap_children_tree returns TreeNode objects."""

    @pytest.mark.asyncio
    async def test_wrapped_tree(self):
        tree, _ = await company_tree(TreeConfig(wrap_children_tree=True))
        forest = await tree.get_children_tree()
        assert all(isinstance(node, TreeNode) for node in forest)
        assert names(forest)[0] == ("Acme", [("East", [("Boston", [])]), ("West", [])])
        boston = forest[0].children[0].children[0]
        assert boston.level == 3

    @pytest.mark.asyncio
    async def test_wrapped_children_and_to_dict(self):
        tree, nodes = await company_tree(TreeConfig(wrap_children_tree=True))
        children = await tree.get_children(nodes["Acme"])
        assert {c.data["name"] for c in children} == {"East", "West"}

        forest = await tree.get_children_tree(nodes["Globex"])
        assert forest[0].to_dict()["children"] == []

    @pytest.mark.asyncio
    async def test_custom_separator(self):
        tree, nodes = await company_tree(TreeConfig(path_separator="/", wrap_children_tree=True))
        assert nodes["Boston"].path.count("/") == 2
        assert nodes["Boston"].level == 3
        forest = await tree.get_children_tree(nodes["Acme"])
        assert names(forest) == [("East", [("Boston", [])]), ("West", [])]
