"""Path-based access into nested, schema-variable JSON trees.

Registry responses are trees of dicts, lists, scalars and nulls whose shape
varies between records: keys go missing, lists come back as null, single
items are sometimes not wrapped in a list. These helpers walk such trees
with an explicit path instead of chained ``.get()`` calls, and treat any
missing segment as "no value" rather than an error.

Path segments:
    - ``str``: mapping key
    - ``int``: list index (negative indices allowed)
    - ``"*"``: fan out over every list element; only honoured by
      :func:`iter_path`

Examples:
    >>> tree = {"a": [{"b": 1}, {"b": 2}, {"c": 3}]}
    >>> get_path(tree, ["a", 0, "b"])
    1
    >>> list(iter_path(tree, ["a", "*", "b"]))
    [1, 2]
    >>> get_path(tree, ["a", 5, "b"], default="n/a")
    'n/a'
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any


WILDCARD = "*"

PathSegment = str | int
TreePath = Sequence[PathSegment]


def _step(node: Any, segment: PathSegment) -> tuple[bool, Any]:
    """Advance one segment. Returns (found, child)."""
    if node is None:
        return False, None
    if isinstance(segment, int) and not isinstance(segment, bool):
        if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
            try:
                return True, node[segment]
            except IndexError:
                return False, None
        return False, None
    if isinstance(node, Mapping):
        if segment in node:
            return True, node[segment]
        return False, None
    return False, None


def get_path(tree: Any, path: TreePath, default: Any = None) -> Any:
    """Return the value at ``path`` or ``default`` if any segment is missing.

    A present-but-null leaf also returns ``default``.
    """
    node = tree
    for segment in path:
        found, node = _step(node, segment)
        if not found:
            return default
    return default if node is None else node


def iter_path(tree: Any, path: TreePath) -> Iterator[Any]:
    """Yield every non-null value reachable through ``path``.

    ``"*"`` fans out over list elements. A scalar or mapping
    met where a wildcard expects a list is treated as a one-element list, so a
    collapsed single-item array still walks.
    """
    if not path:
        if tree is not None:
            yield tree
        return

    segment, rest = path[0], path[1:]
    if segment == WILDCARD:
        if tree is None:
            return
        if isinstance(tree, Mapping):
            children = list(tree.values()) if _looks_like_index(tree) else [tree]
        elif isinstance(tree, Sequence) and not isinstance(tree, (str, bytes)):
            children = list(tree)
        else:
            children = [tree]
        for child in children:
            yield from iter_path(child, rest)
        return

    found, child = _step(tree, segment)
    if found:
        yield from iter_path(child, rest)


def _looks_like_index(node: Mapping) -> bool:
    # {"0": {...}, "1": {...}} style objects produced by some JSON encoders of arrays
    return bool(node) and all(isinstance(k, str) and k.isdigit() for k in node)


def first_path(tree: Any, paths: Sequence[TreePath], default: Any = None) -> Any:
    """Return the first non-null value among candidate ``paths``."""
    for path in paths:
        value = get_path(tree, path)
        if value is not None:
            return value
    return default

