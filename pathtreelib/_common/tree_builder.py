"""Rebuild a nested tree from a flat, path-sorted node list.

The input must be ordered ascending by ``path``. That ordering puts every
parent in front of all of its descendants and keeps siblings contiguous, so
a single forward pass with a stack of "current insertion point per depth" is
enough to nest every node:

    stack[0]  last node appended at min_level
    stack[1]  last node appended at min_level + 1
    ...

Nodes may be plain mappings (``{"id": ..., "path": ..., ...}``) or objects
exposing ``path`` and ``children`` attributes such as ``TreeNode``. Inputs
are never mutated; every placed node is a shallow copy.
"""

import copy
from typing import Any, Iterable, List, Optional

from .paths import DEFAULT_SEPARATOR, get_level, parent_path


def _path_of(node: Any) -> Optional[str]:
    if isinstance(node, dict):
        return node.get('path')
    return getattr(node, 'path', None)


def _copy_node(node: Any) -> Any:
    if isinstance(node, dict):
        placed = dict(node)
        placed.pop('children', None)
        return placed
    placed = copy.copy(node)
    placed.children = None
    return placed


def _init_children(node: Any) -> None:
    if isinstance(node, dict):
        node['children'] = []
    else:
        node.children = []


def _append_child(parent: Any, child: Any) -> None:
    if isinstance(parent, dict):
        parent.setdefault('children', []).append(child)
    else:
        if parent.children is None:
            parent.children = []
        parent.children.append(child)


def build_tree(flat_nodes: Iterable[Any],
               root: Any = None,
               min_level: int = 1,
               recursive: bool = True,
               allow_empty_children: bool = True,
               separator: str = DEFAULT_SEPARATOR) -> List[Any]:
    """Nest a path-sorted node list into a forest.

    Args:
        flat_nodes: Nodes sorted ascending by path
        root: Optional node the result hangs below; raises the base level to
            ``level(root) + 1``
        min_level: Level of the nodes that become roots of the result
        recursive: If False, only nodes at the base level are returned
        allow_empty_children: Give every placed node a ``children`` list,
            even leaves. Otherwise only nodes that receive a child get one.
        separator: Path separator character

    Returns:
        List of top-level nodes, each carrying its nested ``children``.
        A node whose parent is missing from the output (filtered out or
        above the base level) is dropped along with its subtree.
    """
    base_level = min_level
    if root is not None:
        base_level = max(base_level, get_level(_path_of(root), separator) + 1)

    forest: List[Any] = []
    stack: List[Any] = []

    for node in flat_nodes:
        path = _path_of(node)
        level = get_level(path, separator)
        if level < base_level:
            continue

        offset = level - base_level
        if offset and not recursive:
            continue

        # Unwind to the insertion point one level above this node
        del stack[offset:]
        if offset:
            if len(stack) != offset or _path_of(stack[-1]) != parent_path(path, separator):
                continue

        placed = _copy_node(node)
        if allow_empty_children:
            _init_children(placed)

        if offset:
            _append_child(stack[-1], placed)
        else:
            forest.append(placed)
        stack.append(placed)

    return forest


def flatten_tree(forest: Iterable[Any]) -> List[Any]:
    """Pre-order list of every node in ``forest``, children detached."""
    flat: List[Any] = []
    pending = list(forest)[::-1]
    while pending:
        node = pending.pop()
        children = node.get('children') if isinstance(node, dict) else getattr(node, 'children', None)
        flat.append(_copy_node(node))
        if children:
            pending.extend(reversed(children))
    return flat
