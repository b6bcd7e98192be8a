#!/usr/bin/env python3
"""
Basic example: a company hierarchy stored in a flat collection.

This example demonstrates:
- Creating nodes under parents
- Moving a subtree and seeing descendant paths follow
- Reading the nested tree back, whole or re-rooted
- Cascade deletion
"""

import asyncio
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from pathtreelib.aio import InMemoryStorageAdapter, TreeQuery, TreeRepository


def print_tree(forest, indent=0):
    for node in forest:
        print(f"{'  ' * indent}{node['name']}  [{node['path']}]")
        print_tree(node.get('children', []), indent + 1)


async def main():
    """Build, reshape and query a small company tree."""
    tree = TreeRepository(InMemoryStorageAdapter())

    acme = await tree.create({'name': 'Acme', 'estimated_earnings': 120})
    east = await tree.create({'name': 'Acme East', 'estimated_earnings': 40}, parent=acme)
    await tree.create({'name': 'Boston Office', 'estimated_earnings': 15}, parent=east)
    await tree.create({'name': 'Acme West', 'estimated_earnings': 30}, parent=acme)
    globex = await tree.create({'name': 'Globex', 'estimated_earnings': 90})

    print("Initial forest:")
    print("-" * 50)
    print_tree(await tree.get_children_tree())

    await tree.move(east, globex)
    print("\nAfter moving 'Acme East' under 'Globex':")
    print("-" * 50)
    print_tree(await tree.get_children_tree())

    print("\nEverything from level 2 down:")
    print("-" * 50)
    print_tree(await tree.get_children_tree(query=TreeQuery.from_level(2)))

    ancestors = await tree.get_ancestors(await tree.get(east.id), ordered=True)
    print(f"\nAncestors of 'Acme East': {[a['name'] for a in ancestors]}")

    removed = await tree.delete(globex)
    print(f"\nDeleted 'Globex' and its subtree: {removed} node(s) removed")
    print_tree(await tree.get_children_tree())


if __name__ == "__main__":
    asyncio.run(main())
