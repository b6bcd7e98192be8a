"""Async storage adapters.

This module contains adapters that bridge concrete document stores to the
AsyncStorageAdapter interface.
"""

from .memory import InMemoryStorageAdapter

__all__ = [
    'InMemoryStorageAdapter',
]
