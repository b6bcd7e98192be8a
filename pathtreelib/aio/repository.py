"""Tree-aware collection facade.

TreeRepository plays the role of the document lifecycle hooks: every save
goes through the path engine before the node is written, every delete
cascades to descendants, and tree queries come back nested.

Example:
    >>> storage = InMemoryStorageAdapter()
    >>> tree = TreeRepository(storage)
    >>> acme = await tree.create({'name': 'Acme'})
    >>> branch = await tree.create({'name': 'Acme East'}, parent=acme)
    >>> await tree.get_children_tree()
    [{'id': ..., 'name': 'Acme', 'children': [{'id': ..., 'name': 'Acme East', ...}]}]
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .._common.tree_builder import build_tree
from ..config import TreeConfig, TreeQuery
from ..exceptions import ConfigurationError, NodeNotFound
from .core import AsyncStorageAdapter, TreeNode, node_field
from .engine import PathEngine

logger = logging.getLogger(__name__)

Result = Union[TreeNode, Dict[str, Any]]


class TreeRepository:
    """A flat document collection whose nodes form a materialized-path tree."""

    def __init__(self, storage: AsyncStorageAdapter, config: Optional[TreeConfig] = None):
        """
        Args:
            storage: Document store for the collection
            config: Tree behaviour (defaults to TreeConfig())

        Raises:
            ConfigurationError: if the config does not validate
        """
        self.config = config or TreeConfig()
        errors = self.config.validate()
        if errors:
            raise ConfigurationError(errors)
        self.storage = storage
        self.separator = self.config.path_separator
        self.engine = PathEngine(storage, self.separator, self.config.error_policy)

    def _to_node(self, document: Mapping[str, Any]) -> TreeNode:
        return TreeNode.from_document(document, self.separator)

    def _shape(self, documents: List[Dict[str, Any]]) -> List[Result]:
        if self.config.wrap_children_tree:
            return [self._to_node(doc) for doc in documents]
        return documents

    async def get(self, node_id: Any) -> TreeNode:
        """Load one node.

        Raises:
            NodeNotFound: no node has that id
        """
        document = await self.storage.find_one(node_id)
        if document is None:
            raise NodeNotFound(node_id)
        return self._to_node(document)

    async def create(self, data: Optional[Mapping[str, Any]] = None, parent: Any = None) -> TreeNode:
        """Create a node from entity ``data``, optionally under ``parent``.

        ``parent`` may be an id, a TreeNode or a document.
        """
        node = TreeNode(data=dict(data or {}), separator=self.separator)
        node.set_parent(parent)
        return await self.save(node)

    async def save(self, node: Union[TreeNode, Mapping[str, Any]]) -> TreeNode:
        """Persist ``node``, computing its path first.

        New nodes get an id from storage. For an existing node whose parent
        changed, descendants are rewritten before the node itself is
        written, so re-saving after a CascadeWriteFailure completes the move.

        Raises:
            ParentNotFound: the parent does not exist (nothing written)
            CyclicReparent: the parent lies in the node's own subtree
            InvalidNodeId: the id contains the path separator
            CascadeWriteFailure: some descendant rewrites failed (node not written)
        """
        if not isinstance(node, TreeNode):
            node = self._to_node(node)
        node.separator = self.separator

        stored = None
        if node.id is None:
            node.id = self.storage.generate_id()
        else:
            stored = await self.storage.find_one(node.id)
        self.engine.check_id(node.id)

        if stored is None:
            node.path = await self.engine.on_create_or_reparent(node)
            await self.storage.insert_one(node.to_document())
            logger.debug("Created node %r at %r", node.id, node.path)
            return node

        previous_path = stored.get('path')
        parent_changed = stored.get('parent_id') != node.parent_id
        if parent_changed or not previous_path:
            node.path = await self.engine.on_create_or_reparent(
                node, previous_path=previous_path, is_reparent=parent_changed)
            if parent_changed:
                logger.debug("Moved node %r from %r to %r", node.id, previous_path, node.path)
        else:
            # Paths are engine-owned; ignore caller edits
            node.path = previous_path

        await self.storage.update_by_id(node.id, node.to_document())
        return node

    async def move(self, node: Union[TreeNode, Mapping[str, Any]], parent: Any) -> TreeNode:
        """Reparent ``node`` under ``parent`` (None makes it a root)."""
        if not isinstance(node, TreeNode):
            node = self._to_node(node)
        node.set_parent(parent)
        return await self.save(node)

    async def _load(self, node: Any) -> Dict[str, Any]:
        """Stored document for ``node`` (a node, document or id)."""
        node_id = node_field(node, 'id') if isinstance(node, (TreeNode, Mapping)) else node
        document = await self.storage.find_one(node_id)
        if document is None:
            raise NodeNotFound(node_id)
        return document

    async def _query_target(self, node: Any) -> Any:
        # Ids carry no path or parent; look them up
        if isinstance(node, (TreeNode, Mapping)):
            return node
        return await self._load(node)

    async def delete(self, node: Any) -> int:
        """Delete ``node`` (a node, document or id) and its whole subtree.

        The cascade runs from the stored path, so a node object left stale
        by an earlier move of one of its ancestors still removes its real
        descendants.

        Returns:
            Number of documents removed

        Raises:
            NodeNotFound: no stored node has that id
            CascadeDeleteFailure: descendants could not be removed
        """
        document = await self._load(node)
        removed = await self.engine.on_delete(document)
        if await self.storage.delete_by_id(document['id']):
            removed += 1
        logger.debug("Deleted subtree %r (%d node(s))", document.get('path'), removed)
        return removed

    async def get_parent(self, node: Any) -> Optional[Result]:
        document = await self.engine.get_parent(await self._query_target(node))
        if document is None:
            return None
        return self._shape([document])[0]

    async def get_children(self, node: Any,
                           recursive: bool = False,
                           filters: Optional[Mapping[str, Any]] = None,
                           fields: Optional[Iterable[str]] = None,
                           options: Optional[Mapping[str, Any]] = None) -> List[Result]:
        """Direct children of ``node``, or its whole subtree when ``recursive``.

        ``node`` may be a bare id; NodeNotFound is raised if nothing has it.
        """
        node = await self._query_target(node)
        return self._shape(await self.engine.get_children(node, recursive, filters, fields, options))

    async def get_ancestors(self, node: Any,
                            filters: Optional[Mapping[str, Any]] = None,
                            fields: Optional[Iterable[str]] = None,
                            options: Optional[Mapping[str, Any]] = None,
                            ordered: bool = False) -> List[Result]:
        """Ancestors of ``node``; root first when ``ordered``."""
        node = await self._query_target(node)
        return self._shape(await self.engine.get_ancestors(node, filters, fields, options, ordered))

    def get_level(self, node: Any) -> int:
        return self.engine.get_level(node)

    async def get_children_tree(self, root: Any = None, query: Optional[TreeQuery] = None) -> List[Result]:
        """Nested tree below ``root`` (the whole forest without one).

        Args:
            root: Node (or id) whose descendants form the result
            query: Filters, projection, level and shape options

        Returns:
            Top-level nodes with nested ``children``; plain dicts unless
            ``wrap_children_tree`` is configured

        Raises:
            NodeNotFound: ``root`` is an id no node has
        """
        query = query or TreeQuery()
        errors = query.validate()
        if errors:
            raise ValueError("; ".join(errors))

        allow_empty = query.allow_empty_children
        if allow_empty is None:
            allow_empty = self.config.allow_empty_children

        if root is not None:
            root = await self._query_target(root)
        documents = await self.engine.get_subtree(
            root, query.filters, query.fields, query.options, query.recursive)

        return build_tree(
            self._shape(documents),
            root=root,
            min_level=query.min_level,
            recursive=query.recursive,
            allow_empty_children=allow_empty,
            separator=self.separator,
        )
