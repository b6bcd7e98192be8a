"""Tree node model.

A TreeNode is a thin view over one flat storage document. Only ``id``,
``parent_id`` and ``path`` have structural meaning; everything else the
entity carries lives in ``data``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..._common.paths import DEFAULT_SEPARATOR, get_level, normalize_parent_id

STRUCTURAL_FIELDS = ('id', 'parent_id', 'path')


@dataclass
class TreeNode:
    """A node participating in a materialized-path hierarchy.

    Attributes:
        id: Storage-assigned identifier (None until created)
        parent_id: Bare id of the parent, None for a root
        path: Ancestor ids plus own id joined by ``separator``
        data: Entity fields
        children: Nested children, only set on reconstructed trees
        separator: Separator used to derive ``level``
    """

    id: Any = None
    parent_id: Any = None
    path: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    children: Optional[List['TreeNode']] = field(default=None, compare=False)
    separator: str = field(default=DEFAULT_SEPARATOR, repr=False, compare=False)

    @property
    def level(self) -> int:
        """Depth of the node (root = 1, unsaved = 0)."""
        return get_level(self.path, self.separator)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def set_parent(self, parent: Any) -> None:
        """Point this node at ``parent``.

        ``parent`` may be a bare id, a TreeNode or a mapping with an ``id``
        key; it is stored as the bare id. None turns the node into a root.
        """
        self.parent_id = normalize_parent_id(parent)

    def __getitem__(self, key: str) -> Any:
        if key in STRUCTURAL_FIELDS:
            return getattr(self, key)
        return self.data[key]

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def to_document(self) -> Dict[str, Any]:
        """Flat storage document for this node (children excluded)."""
        document = dict(self.data)
        document['id'] = self.id
        document['parent_id'] = self.parent_id
        document['path'] = self.path
        return document

    def to_dict(self) -> Dict[str, Any]:
        """Nested plain-data rendering, including any children."""
        result = self.to_document()
        if self.children is not None:
            result['children'] = [child.to_dict() for child in self.children]
        return result

    @classmethod
    def from_document(cls, document: Mapping[str, Any],
                      separator: str = DEFAULT_SEPARATOR) -> 'TreeNode':
        data = {key: value for key, value in document.items()
                if key not in STRUCTURAL_FIELDS and key != 'children'}
        return cls(
            id=document.get('id'),
            parent_id=document.get('parent_id'),
            path=document.get('path'),
            data=data,
            separator=separator,
        )


def node_field(node: Any, name: str, default: Any = None) -> Any:
    """Read a field from a TreeNode or a plain document."""
    if isinstance(node, Mapping):
        return node.get(name, default)
    return getattr(node, name, default)
