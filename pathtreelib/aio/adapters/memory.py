"""In-memory storage adapter.

Keeps documents in a dict keyed by id. Each operation yields to the event
loop once, so concurrent cascades interleave the way they would against a
real document store.
"""

import asyncio
import copy
import itertools
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set

from ..._common.filters import apply_options, matches, project
from ..core import AsyncStorageAdapter


def _counter_ids(width: int = 12) -> Callable[[], str]:
    """Time-ordered hex ids: fixed width so string order equals creation order."""
    counter = itertools.count(1)
    return lambda: format(next(counter), f'0{width}x')


class InMemoryStorageAdapter(AsyncStorageAdapter):
    """Dict-backed document collection.

    Documents are deep-copied on the way in and out so callers can never
    mutate stored state behind the adapter's back.
    """

    def __init__(self, max_concurrent: int = 100,
                 id_factory: Optional[Callable[[], Any]] = None):
        """
        Initialize the collection.

        Args:
            max_concurrent: Maximum concurrent storage operations
            id_factory: Callable returning fresh ids (defaults to 12-digit hex counter)
        """
        super().__init__(max_concurrent=max_concurrent)
        self._documents: Dict[Any, Dict[str, Any]] = {}
        self._id_factory = id_factory or _counter_ids()
        self._op_counts: Dict[str, int] = {}

    def _record(self, op: str) -> None:
        self._op_counts[op] = self._op_counts.get(op, 0) + 1

    def generate_id(self) -> Any:
        node_id = self._id_factory()
        while node_id in self._documents:
            node_id = self._id_factory()
        return node_id

    async def insert_one(self, document: Mapping[str, Any]) -> Any:
        node_id = document.get('id')
        if node_id is None:
            raise ValueError("Document must carry an id before insertion")
        async with self.semaphore:
            await asyncio.sleep(0)
            if node_id in self._documents:
                raise KeyError(f"Duplicate id: {node_id!r}")
            self._documents[node_id] = copy.deepcopy(dict(document))
            self._record('insert_one')
        return node_id

    async def find_one(self, node_id: Any) -> Optional[Dict[str, Any]]:
        async with self.semaphore:
            await asyncio.sleep(0)
            self._record('find_one')
            document = self._documents.get(node_id)
            return copy.deepcopy(document) if document is not None else None

    async def find(self,
                   filters: Optional[Mapping[str, Any]] = None,
                   fields: Optional[Iterable[str]] = None,
                   options: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        async with self.semaphore:
            await asyncio.sleep(0)
            self._record('find')
            results = [doc for doc in self._documents.values() if matches(doc, filters)]
            results = apply_options(results, options)
            return [copy.deepcopy(project(doc, fields)) for doc in results]

    async def update_by_id(self, node_id: Any, changes: Mapping[str, Any]) -> bool:
        async with self.semaphore:
            await asyncio.sleep(0)
            self._record('update_by_id')
            document = self._documents.get(node_id)
            if document is None:
                return False
            document.update(copy.deepcopy(dict(changes)))
            document['id'] = node_id
            return True

    async def delete_by_id(self, node_id: Any) -> bool:
        async with self.semaphore:
            await asyncio.sleep(0)
            self._record('delete_by_id')
            return self._documents.pop(node_id, None) is not None

    async def delete_many(self, filters: Mapping[str, Any]) -> int:
        async with self.semaphore:
            await asyncio.sleep(0)
            self._record('delete_many')
            doomed = [node_id for node_id, doc in self._documents.items() if matches(doc, filters)]
            for node_id in doomed:
                del self._documents[node_id]
            return len(doomed)

    async def count(self, filters: Optional[Mapping[str, Any]] = None) -> int:
        async with self.semaphore:
            return sum(1 for doc in self._documents.values() if matches(doc, filters))

    def _define_capabilities(self) -> Set[str]:
        capabilities = super()._define_capabilities()
        capabilities.update({'skip', 'limit', 'count'})
        return capabilities

    async def get_stats(self) -> dict:
        stats = await super().get_stats()
        stats['documents'] = len(self._documents)
        stats['operations'] = dict(self._op_counts)
        return stats

    def __len__(self) -> int:
        return len(self._documents)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(documents={len(self._documents)})"
