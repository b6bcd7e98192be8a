"""PathTreeLib - Materialized Path Trees over Flat Document Stores.

PathTreeLib lets any entity stored in a flat collection take part in a
parent/child hierarchy. Each node stores its full ancestor chain as a
``path`` string, so subtree queries are prefix matches and nested trees
are rebuilt from a single path-sorted query.

Typical use:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from pathtreelib.aio import TreeRepository, InMemoryStorageAdapter

    tree = TreeRepository(InMemoryStorageAdapter())
    root = await tree.create({'name': 'root'})
    await tree.create({'name': 'child'}, parent=root)
    forest = await tree.get_children_tree()
━━━━━━━━━━━━━━━━━━━━━━━━━━

The tree builder is pure and can be used on any path-sorted list:

    from pathtreelib import build_tree
"""

__version__ = "0.1.0"

from . import aio
from ._common import (
    DEFAULT_SEPARATOR,
    PathPrefix,
    In,
    build_tree,
    flatten_tree,
    get_level,
)
from .config import TreeConfig, TreeQuery
from .exceptions import (
    TreeError,
    ConfigurationError,
    NodeNotFound,
    ParentNotFound,
    CyclicReparent,
    InvalidNodeId,
    MissingPath,
    CascadeWriteFailure,
    CascadeDeleteFailure,
)

__all__ = [
    "__version__",
    "aio",
    "DEFAULT_SEPARATOR",
    "PathPrefix",
    "In",
    "build_tree",
    "flatten_tree",
    "get_level",
    "TreeConfig",
    "TreeQuery",
    "TreeError",
    "ConfigurationError",
    "NodeNotFound",
    "ParentNotFound",
    "CyclicReparent",
    "InvalidNodeId",
    "MissingPath",
    "CascadeWriteFailure",
    "CascadeDeleteFailure",
]
