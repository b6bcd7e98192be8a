"""Filter, projection and ordering primitives for flat document queries.

Storage adapters receive filters as a plain mapping of field name to
constraint. A constraint is either a literal (equality) or one of the
predicate objects below. These helpers give in-process adapters a single
reference implementation of the matching rules.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

ASCENDING = 1
DESCENDING = -1


@dataclass(frozen=True)
class PathPrefix:
    """Matches string values starting with ``prefix``."""

    prefix: str

    def matches(self, value: Any) -> bool:
        return isinstance(value, str) and value.startswith(self.prefix)


@dataclass(frozen=True)
class In:
    """Matches values contained in ``values``."""

    values: Tuple[Any, ...]

    def __init__(self, values: Iterable[Any]):
        object.__setattr__(self, 'values', tuple(values))

    def matches(self, value: Any) -> bool:
        return value in self.values


def merge_filters(extra: Optional[Mapping[str, Any]], structural: Mapping[str, Any]) -> Dict[str, Any]:
    """Combine caller filters with a structural constraint.

    Caller-supplied keys are kept, but never override the structural ones.
    """
    merged = dict(extra or {})
    merged.update(structural)
    return merged


def matches(document: Mapping[str, Any], filters: Optional[Mapping[str, Any]]) -> bool:
    """Check whether ``document`` satisfies every constraint in ``filters``."""
    if not filters:
        return True
    for field_name, constraint in filters.items():
        value = document.get(field_name)
        if isinstance(constraint, (PathPrefix, In)):
            if not constraint.matches(value):
                return False
        elif value != constraint:
            return False
    return True


def project(document: Mapping[str, Any], fields: Optional[Iterable[str]]) -> Dict[str, Any]:
    """Copy ``document`` keeping only ``fields`` (``id`` is always kept)."""
    if fields is None:
        return dict(document)
    wanted = set(fields)
    wanted.add('id')
    return {key: value for key, value in document.items() if key in wanted}


def _sort_key(value: Any) -> Tuple[int, Any]:
    # None sorts first, like missing values in document stores
    return (0, '') if value is None else (1, value)


def apply_options(documents: List[Dict[str, Any]], options: Optional[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Apply ``sort``, ``skip`` and ``limit`` options to a result list.

    ``sort`` is a sequence of ``(field, ASCENDING | DESCENDING)`` pairs, the
    first pair being the primary key.
    """
    if not options:
        return documents

    results = list(documents)
    sort_spec = options.get('sort') or []
    # Stable sorts applied from the least significant key
    for field_name, direction in reversed(list(sort_spec)):
        results.sort(key=lambda doc: _sort_key(doc.get(field_name)),
                     reverse=direction == DESCENDING)

    skip = options.get('skip') or 0
    if skip:
        results = results[skip:]

    limit = options.get('limit')
    if limit:
        results = results[:limit]

    return results
