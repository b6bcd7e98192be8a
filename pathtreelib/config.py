"""Configuration system for PathTreeLib.

This module defines how users configure a tree collection (separator,
result shape, cascade error policy) and how they describe a children-tree
query.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ._common.paths import DEFAULT_SEPARATOR, validate_separator


@dataclass
class TreeConfig:
    """Collection-wide tree behaviour.

    Attributes:
        path_separator: Character joining ids inside a path
        wrap_children_tree: Return TreeNode objects instead of plain dicts
            from tree queries
        allow_empty_children: Give leaves an empty ``children`` list in
            reconstructed trees
        error_policy: CascadePolicy used for descendant rewrites
            (None = fail fast)
    """

    path_separator: str = DEFAULT_SEPARATOR
    wrap_children_tree: bool = False
    allow_empty_children: bool = True
    error_policy: Optional[Any] = None

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = validate_separator(self.path_separator)
        if self.error_policy is not None and not hasattr(self.error_policy, 'handle'):
            errors.append("error_policy must provide a handle() method")
        return errors


@dataclass
class TreeQuery:
    """Arguments of a children-tree query.

    ``filters``, ``fields`` and ``options`` pass through to the storage
    adapter; the structural constraints (path prefix or parent id, path
    ordering) are always applied on top of them.
    """

    filters: Dict[str, Any] = field(default_factory=dict)
    fields: Optional[Sequence[str]] = None
    options: Dict[str, Any] = field(default_factory=dict)
    min_level: int = 1
    recursive: bool = True
    allow_empty_children: Optional[bool] = None  # None = use TreeConfig

    @classmethod
    def direct_children(cls, **kwargs) -> 'TreeQuery':
        """Query for immediate children only (or top-level roots)."""
        return cls(recursive=False, **kwargs)

    @classmethod
    def from_level(cls, min_level: int, **kwargs) -> 'TreeQuery':
        """Query re-rooting the tree at ``min_level``."""
        return cls(min_level=min_level, **kwargs)

    def validate(self) -> List[str]:
        errors = []
        if self.min_level < 1:
            errors.append("min_level must be at least 1")
        return errors
