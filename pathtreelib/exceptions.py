"""Exceptions raised by the tree engine."""

from typing import Any, List, Optional, Sequence, Tuple


class TreeError(Exception):
    """Base class for all tree engine errors."""


class ConfigurationError(TreeError):
    """A TreeConfig failed validation."""

    def __init__(self, errors: Sequence[str]):
        self.errors = list(errors)
        super().__init__("Invalid tree configuration: " + "; ".join(self.errors))


class NodeNotFound(TreeError):
    """No node exists with the requested id."""

    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id!r}")


class ParentNotFound(TreeError):
    """A create or reparent references a parent that does not exist.

    Raised before any write, so nothing has been applied.
    """

    def __init__(self, parent_id: Any):
        self.parent_id = parent_id
        super().__init__(f"Parent node not found: {parent_id!r}")


class CyclicReparent(TreeError):
    """A node was moved under itself or one of its own descendants."""

    def __init__(self, node_id: Any, parent_id: Any):
        self.node_id = node_id
        self.parent_id = parent_id
        super().__init__(f"Cannot move node {node_id!r} under its own subtree ({parent_id!r})")


class InvalidNodeId(TreeError, ValueError):
    """A node id contains the path separator."""

    def __init__(self, node_id: Any, separator: str):
        self.node_id = node_id
        self.separator = separator
        super().__init__(f"Node id {node_id!r} contains the path separator {separator!r}")


class CascadeWriteFailure(TreeError):
    """One or more descendant path rewrites failed during a reparent.

    Rewrites listed in ``applied`` already carry ``new_path``; the rest
    still sit under ``previous_path``. Re-running the reparent (or
    ``PathEngine.rebase_descendants(previous_path, new_path)``) finishes
    the move.
    """

    def __init__(self, previous_path: str, new_path: str,
                 applied: Optional[List[Any]] = None,
                 failed: Optional[List[Tuple[Any, Exception]]] = None):
        self.previous_path = previous_path
        self.new_path = new_path
        self.applied = list(applied or [])
        self.failed = list(failed or [])
        super().__init__(
            f"Cascade rewrite {previous_path!r} -> {new_path!r} failed for "
            f"{len(self.failed)} descendant(s) ({len(self.applied)} applied)"
        )


class CascadeDeleteFailure(TreeError):
    """Deleting the descendants of a node failed.

    Descendants may be left orphaned, reachable only through path scans.
    """

    def __init__(self, path: str, error: Exception):
        self.path = path
        self.error = error
        super().__init__(f"Cascade delete under {path!r} failed: {error}")


class MissingPath(TreeError, ValueError):
    """A subtree query was given a node without a path.

    Usually a bare id or an unsaved node; load the node first.
    """

    def __init__(self, node: Any):
        self.node = node
        super().__init__(f"Node has no path to query below: {node!r}")
