"""
Conversion between nested and dot-flattened JSON key layouts.

    {"menu": {"file": {"open": "Open"}}}  <->  {"menu.file.open": "Open"}

Raw JSON is first parsed into the ``Scalar``/``Branch`` value tree so the
walk never has to guess whether a value is a container. Only JSON objects
are containers; arrays, numbers, booleans and null are leaves and round-trip
unchanged.

Conflicting structure is rejected by default: a key may not end where
another key needs to continue as an object. Passing
``on_conflict="overwrite"`` restores last-write-wins in insertion order.
"""

from __future__ import annotations

import logging
from typing import Any, Union

from langstrings.config import KEY_SEPARATOR, MAX_DEPTH
from langstrings.errors import KeyConflictError, MalformedInputError
from langstrings.models import Branch, FlattenedMap, NestedMap, Node, Scalar

logger = logging.getLogger("langstrings.transcode")

CONFLICT_POLICIES = ("error", "overwrite")

SHAPE_EMPTY = "empty"
SHAPE_FLAT = "flat"
SHAPE_NESTED = "nested"


def parse_tree(obj: Any, max_depth: int = MAX_DEPTH) -> Branch:
    """Convert a decoded JSON object into a value tree.

    Args:
        obj: Top-level JSON value; must be an object
        max_depth: Deepest nesting accepted before giving up

    Returns:
        Root ``Branch`` of the tree

    Raises:
        MalformedInputError: If ``obj`` is not an object or nests too deeply
    """
    if not isinstance(obj, dict):
        raise MalformedInputError(
            f"expected a JSON object at the top level, got {type(obj).__name__}"
        )
    return _parse_object(obj, 0, max_depth)


def _parse_object(obj: dict, depth: int, max_depth: int) -> Branch:
    if depth >= max_depth:
        raise MalformedInputError(f"JSON nesting exceeds {max_depth} levels")
    children: dict[str, Node] = {}
    for key, value in obj.items():
        if isinstance(value, dict):
            children[key] = _parse_object(value, depth + 1, max_depth)
        else:
            children[key] = Scalar(value)
    return Branch(children)


def flatten(nested: Union[NestedMap, Branch]) -> FlattenedMap:
    """Flatten nested objects into dot-joined keys.

    Empty objects contribute no keys. Two paths that flatten to the same key
    (``{"a.b": 1, "a": {"b": 2}}``) raise ``KeyConflictError``.

    Example:
        >>> flatten({"a": {"b": "x", "c": {}}, "d": 1})
        {'a.b': 'x', 'd': 1}
    """
    tree = nested if isinstance(nested, Branch) else parse_tree(nested)
    result: FlattenedMap = {}
    _flatten_branch(tree, None, result)
    return result


def _flatten_branch(branch: Branch, prefix: str | None, out: FlattenedMap) -> None:
    for key, node in branch.children.items():
        path = key if prefix is None else f"{prefix}{KEY_SEPARATOR}{key}"
        if isinstance(node, Branch):
            _flatten_branch(node, path, out)
            continue
        if path in out:
            raise KeyConflictError(path, path)
        out[path] = node.value


def nest(flat: FlattenedMap, on_conflict: str = "error") -> NestedMap:
    """Expand dot-joined keys into nested objects.

    Input that already contains objects is flattened first, so nesting an
    already nested file returns it unchanged.

    Args:
        flat: Mapping of dot-joined keys to values
        on_conflict: ``"error"`` to reject conflicting structure,
            ``"overwrite"`` to let later keys replace earlier ones

    Raises:
        KeyConflictError: If two keys imply incompatible structure and
            ``on_conflict`` is ``"error"``
    """
    if on_conflict not in CONFLICT_POLICIES:
        raise ValueError(f"unknown conflict policy: {on_conflict!r}")
    overwrite = on_conflict == "overwrite"

    result: NestedMap = {}
    for key, value in flatten(flat).items():
        parts = key.split(KEY_SEPARATOR)
        current = result
        for depth, part in enumerate(parts[:-1]):
            child = current.get(part)
            if not isinstance(child, dict):
                if part in current:
                    path = KEY_SEPARATOR.join(parts[: depth + 1])
                    if not overwrite:
                        raise KeyConflictError(key, path)
                    logger.warning('"%s" replaces the value at "%s"', key, path)
                child = current[part] = {}
            current = child

        leaf = parts[-1]
        if leaf in current:
            if not overwrite:
                raise KeyConflictError(key, key)
            logger.warning('"%s" replaces the object at the same path', key)
        current[leaf] = value
    return result


def detect_shape(obj: Any) -> str:
    """Report whether a JSON object looks flat or nested.

    Returns:
        ``"empty"`` for an empty object, ``"nested"`` if any top-level
        value is an object, ``"flat"`` otherwise
    """
    tree = parse_tree(obj)
    if not tree.children:
        return SHAPE_EMPTY
    if any(isinstance(node, Branch) for node in tree.children.values()):
        return SHAPE_NESTED
    return SHAPE_FLAT
