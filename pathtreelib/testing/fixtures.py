"""Test fixtures for PathTreeLib consumers.

These helpers let test suites simulate storage failures in the middle of a
cascade and check a collection's structural integrity afterwards, without
reaching into adapter internals.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from .._common.paths import DEFAULT_SEPARATOR, join_path
from ..aio.core import AsyncStorageAdapter


class StorageUnavailable(ConnectionError):
    """Raised by FlakyStorageAdapter for an injected failure."""


class FlakyStorageAdapter(AsyncStorageAdapter):
    """Adapter wrapper that fails chosen writes.

    Example:
        storage = InMemoryStorageAdapter()
        flaky = FlakyStorageAdapter(storage, fail_update_ids={'00000000000c'})
        tree = TreeRepository(flaky)

        with pytest.raises(CascadeWriteFailure):
            await tree.move(node, new_parent)

        flaky.heal()
        await tree.move(node, new_parent)   # finishes the cascade
    """

    def __init__(self, base_adapter: AsyncStorageAdapter,
                 fail_update_ids: Optional[Iterable[Any]] = None,
                 fail_updates_after: Optional[int] = None,
                 fail_delete_many: bool = False):
        """
        Args:
            base_adapter: The adapter to wrap
            fail_update_ids: Ids whose update_by_id always fails
            fail_updates_after: Let this many update_by_id calls through, fail the rest
            fail_delete_many: Make every delete_many fail
        """
        super().__init__(max_concurrent=base_adapter.max_concurrent)
        self.base_adapter = base_adapter
        self.fail_update_ids: Set[Any] = set(fail_update_ids or ())
        self.fail_updates_after = fail_updates_after
        self.fail_delete_many = fail_delete_many
        self.update_calls = 0
        self.injected_failures = 0

    def heal(self) -> None:
        """Stop injecting failures."""
        self.fail_update_ids.clear()
        self.fail_updates_after = None
        self.fail_delete_many = False

    def _fail(self, message: str):
        self.injected_failures += 1
        raise StorageUnavailable(message)

    def generate_id(self) -> Any:
        return self.base_adapter.generate_id()

    async def insert_one(self, document: Mapping[str, Any]) -> Any:
        return await self.base_adapter.insert_one(document)

    async def find_one(self, node_id: Any) -> Optional[Dict[str, Any]]:
        return await self.base_adapter.find_one(node_id)

    async def find(self, filters=None, fields=None, options=None) -> List[Dict[str, Any]]:
        return await self.base_adapter.find(filters, fields, options)

    async def update_by_id(self, node_id: Any, changes: Mapping[str, Any]) -> bool:
        self.update_calls += 1
        if node_id in self.fail_update_ids:
            self._fail(f"update of {node_id!r} refused")
        if self.fail_updates_after is not None and self.update_calls > self.fail_updates_after:
            self._fail(f"update #{self.update_calls} refused")
        return await self.base_adapter.update_by_id(node_id, changes)

    async def delete_by_id(self, node_id: Any) -> bool:
        return await self.base_adapter.delete_by_id(node_id)

    async def delete_many(self, filters: Mapping[str, Any]) -> int:
        if self.fail_delete_many:
            self._fail("delete_many refused")
        return await self.base_adapter.delete_many(filters)

    async def count(self, filters=None) -> int:
        return await self.base_adapter.count(filters)

    def get_base_adapter(self) -> AsyncStorageAdapter:
        return self.base_adapter


async def find_path_violations(storage: AsyncStorageAdapter,
                               separator: str = DEFAULT_SEPARATOR) -> List[Dict[str, Any]]:
    """List every document breaking the path invariant.

    Each entry has the offending ``id``, its ``path`` and a ``reason``:
    ``missing_path``, ``orphaned`` (parent document gone) or
    ``path_mismatch`` (path is not ``parent.path + separator + id``).
    """
    documents = await storage.find(fields=('id', 'parent_id', 'path'))
    by_id = {doc['id']: doc for doc in documents}
    violations = []
    for doc in documents:
        path = doc.get('path')
        parent_id = doc.get('parent_id')
        if not path:
            reason = 'missing_path'
        elif parent_id is not None and parent_id not in by_id:
            reason = 'orphaned'
        else:
            parent = by_id.get(parent_id)
            expected = join_path(parent.get('path') if parent else None, doc['id'], separator)
            reason = 'path_mismatch' if path != expected else None
        if reason:
            violations.append({'id': doc['id'], 'path': path, 'reason': reason})
    return violations
