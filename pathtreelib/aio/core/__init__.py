"""Core abstractions for the async tree engine.

This module defines the node model and the storage adapter interface.
All storage operations use async/await for non-blocking I/O.
"""

from .node import TreeNode, node_field, STRUCTURAL_FIELDS
from .adapter import AsyncStorageAdapter

__all__ = [
    # Node
    'TreeNode',
    'node_field',
    'STRUCTURAL_FIELDS',
    # Adapter
    'AsyncStorageAdapter',
]
