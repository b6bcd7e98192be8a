"""Asynchronous implementation of PathTreeLib.

This package contains the async path engine, the storage adapter
interface and the repository facade. Every storage operation is awaited,
so cascades never block the event loop.
"""

# Core abstractions
from .core import (
    TreeNode,
    AsyncStorageAdapter,
    node_field,
)

# Adapters
from .adapters import (
    InMemoryStorageAdapter,
)

# Error policies
from .error_policies import (
    CascadePolicy,
    FailFastPolicy,
    ContinueOnErrorsPolicy,
    CollectErrorsPolicy,
    ThresholdPolicy,
)

# Engine and facade
from .engine import PathEngine
from .repository import TreeRepository

# Configuration (re-exported)
from ..config import TreeConfig, TreeQuery

__all__ = [
    # Core abstractions
    'TreeNode',
    'AsyncStorageAdapter',
    'node_field',
    # Adapters
    'InMemoryStorageAdapter',
    # Policies
    'CascadePolicy',
    'FailFastPolicy',
    'ContinueOnErrorsPolicy',
    'CollectErrorsPolicy',
    'ThresholdPolicy',
    # Engine
    'PathEngine',
    'TreeRepository',
    # Configuration
    'TreeConfig',
    'TreeQuery',
]
