"""
Path codec for nested state trees.

Converts between dotted path strings and key tuples, reads a value at a path,
and writes a value at a path by copy-on-write:

    >>> tree = {'cart': {'price': 10}, 'user': {'name': 'Ada'}}
    >>> new_tree = set_field(tree, 'cart.price', 15)
    >>> new_tree['cart']['price']
    15
    >>> new_tree['user'] is tree['user']
    True

Only the containers along the written path are copied; every sibling subtree
is shared with the input tree. Containers are dicts (any Mapping is read, a
dict is written; mapping keys are strings), lists and tuples. Anything else
is a leaf.
"""

from collections.abc import Mapping
from typing import Any, Iterable, Tuple, Union

DOT = '.'

Key = Union[str, int]
PathLike = Union[str, Iterable[Key]]


class _Missing:
    """Sentinel type for "no value at this path"."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return 'MISSING'

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Missing, ())


MISSING: Any = _Missing()


def to_keys(path: PathLike, separator: str = DOT) -> Tuple[Key, ...]:
    """Split a path into its keys.

    Args:
        path: Dotted string ('cart.price') or an iterable of keys
        separator: Key separator for string paths

    Returns:
        Tuple of keys; empty tuple for '' (the whole tree)

    Raises:
        ValueError: If the path contains an empty key ('cart..price')
    """
    if isinstance(path, str):
        if path == '':
            return ()
        keys = tuple(path.split(separator))
    else:
        keys = tuple(path)
    if any(key == '' for key in keys):
        raise ValueError(f"Path {path!r} contains an empty key")
    return keys


def to_path(keys: Iterable[Key], separator: str = DOT) -> str:
    """Join keys into the canonical path string."""
    return separator.join(str(key) for key in keys)


def _is_sequence(node: Any) -> bool:
    return isinstance(node, (list, tuple))


def _as_index(key: Key) -> Union[int, None]:
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, str) and key.isascii() and key.isdigit():
        return int(key)
    return None


def _mapping_key(key: Key) -> Key:
    # Mapping keys are always strings, so ('slots', 0) and 'slots.0' address the same field
    return str(key) if isinstance(key, int) else key


def _child(node: Any, key: Key) -> Any:
    """Return node[key], or MISSING if node has no such child."""
    if isinstance(node, Mapping):
        key = _mapping_key(key)
        return node[key] if key in node else MISSING
    if _is_sequence(node):
        index = _as_index(key)
        if index is None or index < 0 or index >= len(node):
            return MISSING
        return node[index]
    return MISSING


def get_field(tree: Any, path: PathLike, default: Any = None, separator: str = DOT) -> Any:
    """Resolve the value at path inside tree.

    Never raises for missing data: returns default as soon as an
    intermediate is absent or is not a container.

    Args:
        tree: Root of the nested structure
        path: Dotted string or key sequence; empty means the tree itself
        default: Returned when the path does not resolve
        separator: Key separator for string paths

    Returns:
        The value at path, or default
    """
    node = tree
    for key in to_keys(path, separator):
        node = _child(node, key)
        if node is MISSING:
            return default
    return node


def _replace_in(node: Any, keys: Tuple[Key, ...], value: Any) -> Any:
    key, rest = keys[0], keys[1:]

    if _is_sequence(node):
        index = _as_index(key)
        if index is not None:
            items = list(node)
            if index >= len(items):
                items.extend([None] * (index - len(items) + 1))
            current = items[index]
            items[index] = _replace_in(current, rest, value) if rest else value
            return items if isinstance(node, list) else tuple(items)
        # Non-index key on a sequence: items carry over under their index keys
        node = {str(index): item for index, item in enumerate(node)}

    new_node = dict(node) if isinstance(node, Mapping) else {}
    key = _mapping_key(key)
    new_node[key] = _replace_in(_child(new_node, key), rest, value) if rest else value
    return new_node


def set_field(tree: Any, path: PathLike, value: Any, separator: str = DOT) -> Any:
    """Return a copy of tree with the value at path replaced.

    Every container along the path is copied (dict stays dict, list stays
    list, tuple stays tuple); everything else is shared with tree. Missing
    intermediates are created as dicts.

    Args:
        tree: Root of the nested structure (not modified)
        path: Non-empty dotted string or key sequence
        value: New leaf value
        separator: Key separator for string paths

    Returns:
        The new root

    Raises:
        ValueError: If path is empty (replace the whole tree directly instead)
    """
    keys = to_keys(path, separator)
    if not keys:
        raise ValueError("set_field() needs a non-empty path")
    return _replace_in(tree, keys, value)


# ========== PATH MATCHING ==========

def is_path_prefix(prefix: str, path: str, separator: str = DOT, boundary_aware: bool = True) -> bool:
    """Check whether prefix addresses path or one of its ancestors.

    Both arguments are notification paths (leading separator, e.g. '.cart').
    The bare separator is the root and is a prefix of every path.

    With boundary_aware matching, '.cart' is a prefix of '.cart.price' but
    not of '.cartX'. Without it, plain string-prefix matching is used.
    """
    if not boundary_aware:
        return path.startswith(prefix)
    if prefix == path or prefix == separator:
        return True
    return path.startswith(prefix + separator)


def paths_overlap(a: str, b: str, separator: str = DOT, boundary_aware: bool = True) -> bool:
    """Two-directional prefix test: a write to one path concerns the other."""
    return (
        is_path_prefix(a, b, separator, boundary_aware)
        or is_path_prefix(b, a, separator, boundary_aware)
    )
