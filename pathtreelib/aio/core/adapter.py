"""Async storage adapter abstraction.

Defines the minimal document-store contract the tree engine relies on.
The store owns every node as a flat document; hierarchy is expressed only
through the ``path`` and ``parent_id`` fields of those documents.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set


class AsyncStorageAdapter(ABC):
    """Abstract base class for async storage adapters.

    Adapters bridge between the path engine and a concrete document store
    (in-memory, MongoDB, a SQL table...). Filters use the primitives from
    ``pathtreelib._common.filters``: literal values for equality,
    ``PathPrefix`` for starts-with and ``In`` for membership.
    """

    def __init__(self, max_concurrent: int = 100):
        """Initialize adapter with concurrency control.

        Args:
            max_concurrent: Maximum concurrent storage operations
        """
        self.max_concurrent = max_concurrent
        self.semaphore = asyncio.Semaphore(max_concurrent)
        self._capabilities = self._define_capabilities()

    @abstractmethod
    def generate_id(self) -> Any:
        """Allocate a fresh, unique node id.

        Ids must not contain the path separator and should be time-ordered
        so that path order matches sibling creation order.
        """
        pass

    @abstractmethod
    async def insert_one(self, document: Mapping[str, Any]) -> Any:
        """Persist a new document; ``document['id']`` is already set.

        Returns:
            The id of the stored document
        """
        pass

    @abstractmethod
    async def find_one(self, node_id: Any) -> Optional[Dict[str, Any]]:
        """Point lookup by id.

        Returns:
            The document or None if absent
        """
        pass

    @abstractmethod
    async def find(self,
                   filters: Optional[Mapping[str, Any]] = None,
                   fields: Optional[Iterable[str]] = None,
                   options: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """Filtered, optionally projected and ordered list query.

        Args:
            filters: Field constraints
            fields: Fields to return (``id`` is always returned)
            options: ``sort``, ``skip`` and ``limit``

        Returns:
            Matching documents
        """
        pass

    @abstractmethod
    async def update_by_id(self, node_id: Any, changes: Mapping[str, Any]) -> bool:
        """Set the given fields on one document, leaving the others alone.

        Returns:
            True if a document was updated
        """
        pass

    @abstractmethod
    async def delete_by_id(self, node_id: Any) -> bool:
        """Remove one document.

        Returns:
            True if a document was removed
        """
        pass

    @abstractmethod
    async def delete_many(self, filters: Mapping[str, Any]) -> int:
        """Remove every document matching ``filters``.

        Returns:
            Number of documents removed
        """
        pass

    async def count(self, filters: Optional[Mapping[str, Any]] = None) -> int:
        """Count matching documents.

        Default implementation runs a projected ``find``.
        """
        return len(await self.find(filters, fields=('id',)))

    def supports_capability(self, capability: str) -> bool:
        """Check if adapter supports a specific capability.

        Args:
            capability: Capability name

        Returns:
            True if capability is supported
        """
        return capability in self._capabilities

    def _define_capabilities(self) -> Set[str]:
        """Define adapter capabilities.

        Override in subclasses to declare supported features.

        Returns:
            Set of capability names
        """
        return {
            'find',
            'prefix_filter',
            'projection',
            'sort',
        }

    async def get_stats(self) -> dict:
        """Get adapter statistics.

        Returns:
            Dictionary of statistics
        """
        return {
            'max_concurrent': self.max_concurrent,
            'available_permits': self.semaphore._value if hasattr(self.semaphore, '_value') else None,
        }

    async def close(self):
        """Clean up adapter resources.

        Override if adapter needs cleanup (close connections, etc.)
        """
        pass

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
