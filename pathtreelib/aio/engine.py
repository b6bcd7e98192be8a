"""Materialized path engine.

Keeps every node's ``path`` consistent with its parent and cascades
structural changes to descendants:

- create/reparent: compute ``parent.path + separator + id``; on reparent,
  rewrite the prefix of every descendant path
- delete: remove every document under ``path + separator``
- queries: children (direct or whole subtree), ancestors, level

Cascades are sequences of independent storage writes, not transactions.
A failed descendant rewrite leaves the subtree split between the old and
the new prefix; re-running the same rewrite finishes it, because already
moved descendants no longer match the old prefix.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .._common.filters import ASCENDING, In, PathPrefix, merge_filters
from .._common.paths import (
    DEFAULT_SEPARATOR,
    ancestor_ids,
    descendant_prefix,
    get_level,
    is_descendant_path,
    join_path,
    rebase_path,
)
from ..exceptions import (
    CascadeDeleteFailure,
    CascadeWriteFailure,
    CyclicReparent,
    InvalidNodeId,
    MissingPath,
    ParentNotFound,
)
from .core import AsyncStorageAdapter, node_field
from .error_policies import CascadePolicy, FailFastPolicy

logger = logging.getLogger(__name__)


class PathEngine:
    """Path computation and cascade logic over an AsyncStorageAdapter.

    The engine never persists the node it is handed; it computes the path
    and performs the side effects on *other* documents (descendants). The
    caller (normally TreeRepository) writes the node itself afterwards.
    """

    def __init__(self, storage: AsyncStorageAdapter,
                 separator: str = DEFAULT_SEPARATOR,
                 policy: Optional[CascadePolicy] = None):
        """
        Args:
            storage: Document store holding every node
            separator: Path separator character
            policy: Reaction to failed descendant writes (defaults to FailFastPolicy)
        """
        self.storage = storage
        self.separator = separator
        self.policy = policy or FailFastPolicy()

    def check_id(self, node_id: Any) -> None:
        """Reject ids that would corrupt paths."""
        if node_id is None or self.separator in str(node_id):
            raise InvalidNodeId(node_id, self.separator)

    async def on_create_or_reparent(self, node: Any,
                                    previous_path: Optional[str] = None,
                                    is_reparent: bool = False) -> str:
        """Compute the path of ``node`` and cascade it to descendants.

        Args:
            node: Node with ``id`` assigned and ``parent_id`` set or None
            previous_path: Path the node is stored under before this call
            is_reparent: True when the node already exists and its parent changed

        Returns:
            The node's new path; the caller persists it

        Raises:
            ParentNotFound: ``parent_id`` references no node (nothing written)
            CyclicReparent: the new parent lies inside the node's own subtree
            CascadeWriteFailure: some descendant rewrites failed
        """
        node_id = node_field(node, 'id')
        parent_id = node_field(node, 'parent_id')

        if parent_id is None:
            new_path = join_path(None, node_id, self.separator)
        else:
            if parent_id == node_id:
                raise CyclicReparent(node_id, parent_id)
            parent = await self.storage.find_one(parent_id)
            if parent is None:
                raise ParentNotFound(parent_id)
            parent_path = parent.get('path')
            if previous_path and (parent_path == previous_path
                                  or is_descendant_path(parent_path, previous_path, self.separator)):
                raise CyclicReparent(node_id, parent_id)
            new_path = join_path(parent_path, node_id, self.separator)

        if is_reparent and previous_path and previous_path != new_path:
            await self.rebase_descendants(previous_path, new_path)

        return new_path

    async def rebase_descendants(self, previous_path: str, new_path: str) -> List[Any]:
        """Move every descendant of ``previous_path`` under ``new_path``.

        Each descendant keeps the part of its path after ``previous_path``.
        Safe to repeat: descendants already rewritten are not matched again.

        Returns:
            Ids of the rewritten descendants

        Raises:
            CascadeWriteFailure: if any write failed
        """
        old_prefix = descendant_prefix(previous_path, self.separator)
        descendants = await self.storage.find({'path': PathPrefix(old_prefix)}, fields=('id', 'path'))
        logger.debug("Rebasing %d descendant(s) %r -> %r", len(descendants), previous_path, new_path)

        applied: List[Any] = []
        failed: List[Any] = []
        for doc in descendants:
            rewritten = rebase_path(doc['path'], previous_path, new_path)
            try:
                await self.storage.update_by_id(doc['id'], {'path': rewritten})
            except Exception as e:
                failed.append((doc['id'], e))
                if not await self.policy.handle(e, 'rebase_descendants', doc, len(failed)):
                    break
            else:
                applied.append(doc['id'])

        if failed:
            logger.warning("Cascade rewrite %r -> %r: %d failed, %d applied, %d pending",
                           previous_path, new_path, len(failed), len(applied),
                           len(descendants) - len(applied) - len(failed))
            raise CascadeWriteFailure(previous_path, new_path, applied, failed)
        return applied

    def _subtree_prefix(self, node: Any) -> str:
        path = node_field(node, 'path')
        if not path:
            raise MissingPath(node)
        return descendant_prefix(path, self.separator)

    async def on_delete(self, node: Any) -> int:
        """Delete every strict descendant of ``node``.

        The node itself is the caller's to delete.

        Returns:
            Number of descendants removed (0 when the node has no path)

        Raises:
            CascadeDeleteFailure: the bulk delete failed
        """
        path = node_field(node, 'path')
        if not path:
            return 0
        try:
            removed = await self.storage.delete_many(
                {'path': PathPrefix(descendant_prefix(path, self.separator))})
        except Exception as e:
            logger.warning("Cascade delete under %r failed: %s", path, e)
            raise CascadeDeleteFailure(path, e) from e
        logger.debug("Cascade delete under %r removed %d descendant(s)", path, removed)
        return removed

    async def get_children(self, node: Any,
                           recursive: bool = False,
                           filters: Optional[Mapping[str, Any]] = None,
                           fields: Optional[Iterable[str]] = None,
                           options: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Direct children, or the whole subtree when ``recursive``.

        Caller filters are merged in but cannot override the structural
        constraint.
        """
        if recursive:
            structural = {'path': PathPrefix(self._subtree_prefix(node))}
        else:
            structural = {'parent_id': node_field(node, 'id')}
        return await self.storage.find(merge_filters(filters, structural), fields, options)

    async def get_parent(self, node: Any) -> Optional[Dict[str, Any]]:
        parent_id = node_field(node, 'parent_id')
        if parent_id is None:
            return None
        return await self.storage.find_one(parent_id)

    async def get_ancestors(self, node: Any,
                            filters: Optional[Mapping[str, Any]] = None,
                            fields: Optional[Iterable[str]] = None,
                            options: Optional[Mapping[str, Any]] = None,
                            ordered: bool = False) -> List[Dict[str, Any]]:
        """Ancestors of ``node`` derived from its path.

        Args:
            ordered: Return them root first, following the path order

        Storage order is used otherwise.
        """
        ids = ancestor_ids(node_field(node, 'path'), self.separator)
        if not ids:
            return []
        results = await self.storage.find(merge_filters(filters, {'id': In(ids)}), fields, options)
        if ordered:
            rank = {ancestor_id: index for index, ancestor_id in enumerate(ids)}
            results.sort(key=lambda doc: rank.get(str(doc['id']), len(rank)))
        return results

    def get_level(self, node: Any) -> int:
        """Depth of ``node`` (root = 1, no path = 0)."""
        return get_level(node_field(node, 'path'), self.separator)

    async def get_subtree(self, root: Any = None,
                          filters: Optional[Mapping[str, Any]] = None,
                          fields: Optional[Iterable[str]] = None,
                          options: Optional[Mapping[str, Any]] = None,
                          recursive: bool = True) -> List[Dict[str, Any]]:
        """Flat, path-sorted node list feeding tree reconstruction.

        Recursive queries cover the root's whole subtree (the whole
        collection without a root); non-recursive ones only its direct
        children (top-level roots without a root). ``path`` and
        ``parent_id`` are always projected and the sort is forced to
        ascending path.
        """
        structural: Dict[str, Any] = {}
        extra = dict(filters or {})
        if recursive:
            if root is not None:
                structural['path'] = PathPrefix(self._subtree_prefix(root))
            if 'parent_id' in extra and extra['parent_id'] is None:
                del extra['parent_id']
        else:
            structural['parent_id'] = node_field(root, 'id') if root is not None else None

        if fields is not None:
            fields = list(fields)
            for required in ('path', 'parent_id'):
                if required not in fields:
                    fields.append(required)

        options = dict(options or {})
        options['sort'] = [('path', ASCENDING)]

        return await self.storage.find(merge_filters(extra, structural), fields, options)
