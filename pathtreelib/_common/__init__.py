"""Components shared across the package that perform no I/O.

This internal package holds pure computation only:
- Materialized path arithmetic
- Filter/projection primitives for flat queries
- Flat-to-nested tree reconstruction

Important: This package must NEVER import from aio to avoid circular
dependencies.
"""

from .paths import (
    DEFAULT_SEPARATOR,
    join_path,
    get_level,
    descendant_prefix,
    is_descendant_path,
    ancestor_ids,
    parent_path,
    rebase_path,
    normalize_parent_id,
    validate_separator,
)
from .filters import (
    ASCENDING,
    DESCENDING,
    PathPrefix,
    In,
    merge_filters,
    matches,
    project,
    apply_options,
)
from .tree_builder import build_tree, flatten_tree

__all__ = [
    'DEFAULT_SEPARATOR',
    'join_path',
    'get_level',
    'descendant_prefix',
    'is_descendant_path',
    'ancestor_ids',
    'parent_path',
    'rebase_path',
    'normalize_parent_id',
    'validate_separator',
    'ASCENDING',
    'DESCENDING',
    'PathPrefix',
    'In',
    'merge_filters',
    'matches',
    'project',
    'apply_options',
    'build_tree',
    'flatten_tree',
]
