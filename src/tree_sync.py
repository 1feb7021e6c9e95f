"""
Tree synchronization engine for nested translation documents.

A document is a tree of JSON objects. Objects (``dict``) are branches; every
other value, lists included, is an atomic leaf. Keys are addressed by their
dot-joined path, e.g. ``settings.theme.dark``.

All operations here are pure: they never touch the filesystem and never
mutate the trees they are given.
"""
import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

KEY_SEPARATOR = '.'

DEFAULT_PLACEHOLDER_TEMPLATE = 'EN TEXT TO REPLACE: {value}'


def is_branch(node: Any) -> bool:
    """Return True if the node is a branch (a mapping of child nodes)."""
    return isinstance(node, dict)


@dataclass
class DiffResult:
    """Key-level difference between a reference and a target document."""
    missing_keys: List[str] = field(default_factory=list)
    extraneous_keys: List[str] = field(default_factory=list)

    @property
    def in_sync(self) -> bool:
        return not self.missing_keys and not self.extraneous_keys


def flatten(tree: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten a nested document into a mapping from dotted key path to leaf value.

    The walk uses an explicit stack of iterators instead of recursion, so the
    depth of the document is not bounded by the interpreter's recursion limit.
    Keys are emitted in document order. Empty branches contribute no keys.

    Args:
        tree: The root branch of the document.

    Returns:
        Dict[str, Any]: Flat mapping of key path to leaf value.
    """
    flat: Dict[str, Any] = {}
    stack = [('', iter(tree.items()))]
    while stack:
        prefix, items = stack[-1]
        try:
            key, value = next(items)
        except StopIteration:
            stack.pop()
            continue

        property_path = f"{prefix}{KEY_SEPARATOR}{key}" if prefix else key
        if is_branch(value):
            stack.append((property_path, iter(value.items())))
        else:
            flat[property_path] = value
    return flat


def diff_keys(reference_flat: Dict[str, Any], target_flat: Dict[str, Any]) -> DiffResult:
    """
    Compare the keys of a flattened target document against a flattened reference.

    Only exact full-path matches count; there is no prefix matching.

    Args:
        reference_flat: Flattened reference document.
        target_flat: Flattened target document.

    Returns:
        DiffResult: ``missing_keys`` in reference order, ``extraneous_keys`` in target order.
    """
    target_keys = set(target_flat)
    reference_keys = set(reference_flat)
    return DiffResult(
        missing_keys=[key for key in reference_flat if key not in target_keys],
        extraneous_keys=[key for key in target_flat if key not in reference_keys],
    )


def format_reference_value(value: Any) -> str:
    """Render a reference leaf as the text embedded in a placeholder."""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, list):
        return ','.join('' if item is None else format_reference_value(item) for item in value)
    return str(value)


def build_placeholder(value: Any, placeholder_template: str = DEFAULT_PLACEHOLDER_TEMPLATE) -> str:
    return placeholder_template.format(value=format_reference_value(value))


def _holds_value(node: Any) -> bool:
    """True for a leaf, or a branch with at least one leaf somewhere below it."""
    if not is_branch(node):
        return True
    return bool(flatten(node))


def insert_missing_keys(
        tree: Dict[str, Any],
        missing_keys: Iterable[str],
        reference_flat: Dict[str, Any],
        placeholder_template: str = DEFAULT_PLACEHOLDER_TEMPLATE
) -> Tuple[Dict[str, Any], List[str]]:
    """
    Return a copy of ``tree`` with a placeholder leaf for every missing key,
    together with the key paths that were actually inserted.

    Intermediate branches are created as needed. An intermediate position that
    currently holds a leaf is replaced by an empty branch, discarding the leaf:
    a reference branch cannot coexist with a locale leaf at the same path.
    At the terminal position, an existing value is left untouched, which makes
    the operation idempotent. A branch with no leaves below it holds no value
    and is replaced by the placeholder.

    Args:
        tree: The locale document.
        missing_keys: Key paths to add.
        reference_flat: Flattened reference document, the source of placeholder text.
        placeholder_template: Format string with a ``{value}`` field.

    Returns:
        The new document and the inserted key paths, in input order.
    """
    result = copy.deepcopy(tree)
    inserted: List[str] = []

    for key_path in missing_keys:
        parts = key_path.split(KEY_SEPARATOR)
        current = result

        for part in parts[:-1]:
            if not is_branch(current.get(part)):
                current[part] = {}
            current = current[part]

        last_part = parts[-1]
        if last_part not in current or not _holds_value(current[last_part]):
            current[last_part] = build_placeholder(reference_flat.get(key_path), placeholder_template)
            inserted.append(key_path)

    return result, inserted


def add_missing_keys(
        tree: Dict[str, Any],
        missing_keys: Iterable[str],
        reference_flat: Dict[str, Any],
        placeholder_template: str = DEFAULT_PLACEHOLDER_TEMPLATE
) -> Dict[str, Any]:
    """Return a copy of ``tree`` with a placeholder leaf for every missing key."""
    result, _ = insert_missing_keys(tree, missing_keys, reference_flat, placeholder_template)
    return result


def _group_by_first_segment(key_paths: Iterable[str]):
    """Split key paths into exact top-level keys and suffixes grouped by first segment."""
    exact = set()
    nested: Dict[str, List[str]] = {}
    for key_path in key_paths:
        head, sep, rest = key_path.partition(KEY_SEPARATOR)
        if sep:
            nested.setdefault(head, []).append(rest)
        else:
            exact.add(head)
    return exact, nested


def remove_extraneous_keys(tree: Dict[str, Any], extraneous_keys: Iterable[str]) -> Dict[str, Any]:
    """
    Return a copy of ``tree`` without the given key paths.

    A branch that loses all of its children is dropped from its parent rather
    than kept as an empty object. Keys unrelated to any extraneous path are
    carried over unchanged.

    Args:
        tree: The locale document.
        extraneous_keys: Key paths to remove.

    Returns:
        Dict[str, Any]: The new document.
    """
    exact, nested = _group_by_first_segment(extraneous_keys)
    result: Dict[str, Any] = {}

    for key, value in tree.items():
        if key in exact:
            continue

        if is_branch(value) and key in nested:
            cleaned = remove_extraneous_keys(value, nested[key])
            if cleaned:
                result[key] = cleaned
        else:
            result[key] = value

    return result
