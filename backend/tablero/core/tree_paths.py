"""Tree Paths — pure helpers for the tree-shaped key-value store.

Invariants:
    - Paths are "/"-separated; empty segments are ignored ("" is the root)
    - set_in never mutates its input: nodes along the path are shallow-copied
    - Null values and empty mappings are never stored (writing None deletes,
      emptied parents disappear), mirroring the remote store's semantics
    - Lists written into by a child path become index-keyed mappings

Design Decisions:
    - Shared by InMemoryEntityStore and SqlEntityStore so both stores agree on
      put/patch/delete semantics byte for byte
    - Lists and scalars are leaves for flatten(): board column arrays are
      persisted whole, the way the board document is written
"""

import copy
from typing import Any


def split_path(path: str) -> list[str]:
    return [segment for segment in path.split("/") if segment]


def join_path(*parts: str) -> str:
    segments: list[str] = []
    for part in parts:
        segments.extend(split_path(part))
    return "/".join(segments)


def paths_overlap(a: list[str], b: list[str]) -> bool:
    """True when one path is an ancestor of (or equal to) the other."""
    shortest = min(len(a), len(b))
    return a[:shortest] == b[:shortest]


def get_in(tree: Any, segments: list[str]) -> Any:
    node = tree
    for segment in segments:
        if isinstance(node, dict):
            node = node.get(segment)
        elif isinstance(node, list) and segment.isdigit() and int(segment) < len(node):
            node = node[int(segment)]
        else:
            return None
        if node is None:
            return None
    return node


def set_in(tree: Any, segments: list[str], value: Any) -> Any:
    """Return a new tree with `value` written at `segments` (None deletes)."""
    if not segments:
        return clean_value(value)
    head, rest = segments[0], segments[1:]
    container = _as_mapping(tree)
    child = set_in(container.get(head), rest, value)
    if child is None:
        container.pop(head, None)
    else:
        container[head] = child
    return container or None


def clean_value(value: Any) -> Any:
    """Deep copy dropping nulls and empty containers. Returns None if nothing remains."""
    if isinstance(value, dict):
        cleaned = {}
        for key, child in value.items():
            child = clean_value(child)
            if child is not None:
                cleaned[str(key)] = child
        return cleaned or None
    if isinstance(value, (list, tuple)):
        items = [clean_value(item) for item in value]
        return items or None
    return copy.deepcopy(value)


def flatten(value: Any, base: list[str]) -> list[tuple[str, Any]]:
    """Decompose a tree into (path, leaf) rows. Mappings recurse; the rest are leaves."""
    value = clean_value(value)
    if value is None:
        return []
    if not isinstance(value, dict):
        return [("/".join(base), value)]
    rows: list[tuple[str, Any]] = []
    for key, child in value.items():
        rows.extend(flatten(child, [*base, key]))
    return rows


def _as_mapping(node: Any) -> dict:
    if isinstance(node, dict):
        return dict(node)
    if isinstance(node, list):
        return {str(index): item for index, item in enumerate(node) if item is not None}
    return {}
