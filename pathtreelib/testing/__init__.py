"""Testing helpers for code built on PathTreeLib."""

from .fixtures import FlakyStorageAdapter, StorageUnavailable, find_path_violations

__all__ = [
    'FlakyStorageAdapter',
    'StorageUnavailable',
    'find_path_violations',
]
