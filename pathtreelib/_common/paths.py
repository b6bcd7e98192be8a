"""Materialized path arithmetic.

Pure string helpers shared by the engine and the tree builder. A path is the
ordered chain of ancestor ids, including the node's own id, joined by a
single separator character:

    root            -> "1"
    child of root   -> "1#2"
    grandchild      -> "1#2#3"

Nothing in here performs I/O.
"""

from typing import Any, List, Optional

DEFAULT_SEPARATOR = '#'


def join_path(parent_path: Optional[str], node_id: Any, separator: str = DEFAULT_SEPARATOR) -> str:
    """Build the path of ``node_id`` placed under ``parent_path``.

    Args:
        parent_path: Path of the parent, or None/empty for a root
        node_id: Identifier of the node itself
        separator: Path separator character

    Returns:
        ``parent_path + separator + id`` or just ``id`` for a root
    """
    if not parent_path:
        return str(node_id)
    return f"{parent_path}{separator}{node_id}"


def get_level(path: Optional[str], separator: str = DEFAULT_SEPARATOR) -> int:
    """Number of segments in ``path``; 0 when the path is unset.

    A root has level 1.
    """
    return len(path.split(separator)) if path else 0


def descendant_prefix(path: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """Prefix shared by every strict descendant of the node at ``path``."""
    return path + separator


def is_descendant_path(path: Optional[str], ancestor_path: Optional[str],
                       separator: str = DEFAULT_SEPARATOR) -> bool:
    """True if ``path`` lies strictly below ``ancestor_path``."""
    if not path or not ancestor_path:
        return False
    return path.startswith(descendant_prefix(ancestor_path, separator))


def ancestor_ids(path: Optional[str], separator: str = DEFAULT_SEPARATOR) -> List[str]:
    """Ids of every ancestor, root first, excluding the node's own id."""
    if not path:
        return []
    ids = path.split(separator)
    ids.pop()
    return ids


def parent_path(path: Optional[str], separator: str = DEFAULT_SEPARATOR) -> Optional[str]:
    """Path of the immediate parent, or None for a root."""
    if not path or separator not in path:
        return None
    return path.rsplit(separator, 1)[0]


def rebase_path(path: str, previous_prefix: str, new_prefix: str) -> str:
    """Swap the leading ``previous_prefix`` of ``path`` for ``new_prefix``.

    The remainder after the old prefix is kept verbatim.

    Raises:
        ValueError: If ``path`` does not start with ``previous_prefix``
    """
    if not path.startswith(previous_prefix):
        raise ValueError(f"Path {path!r} is not under {previous_prefix!r}")
    return new_prefix + path[len(previous_prefix):]


def normalize_parent_id(value: Any) -> Any:
    """Reduce a parent reference to its bare identifier.

    Accepts a bare id, an object exposing an ``id`` attribute, or a mapping
    carrying an ``id`` key. None stays None (root).
    """
    if value is None:
        return None
    if isinstance(value, dict):
        return value.get('id')
    return getattr(value, 'id', value)


def validate_separator(separator: Any) -> List[str]:
    """Check a separator candidate.

    Returns:
        List of problems (empty if the separator is usable)
    """
    errors = []
    if not isinstance(separator, str) or len(separator) != 1:
        errors.append("path_separator must be exactly one character")
    elif separator.isalnum():
        errors.append("path_separator cannot be alphanumeric (it would collide with ids)")
    elif separator.isspace():
        errors.append("path_separator cannot be whitespace")
    return errors
