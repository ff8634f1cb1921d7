"""Structural equality for document values."""

from __future__ import annotations

import tcsetup.yaml_merge._types as types


def deep_equal(a: types.Value, b: types.Value) -> bool:
    """
    Check if two values are structurally equal.

    - Variants must match: Bool(True) is not Number(1), String("1") is not Number(1).
    - Scalars compare by payload.
    - Sequences compare element-wise, in order: [1, 2] != [2, 1].
    - Mappings need the same key set and equal values per key; key order is
      ignored.
    """
    if type(a) is not type(b):
        return False

    if isinstance(a, types.Null):
        return True
    if isinstance(a, (types.Bool, types.Number, types.String)):
        return bool(a.value == b.value)  # type: ignore[attr-defined]

    if isinstance(a, types.Sequence):
        assert isinstance(b, types.Sequence)
        if len(a.items) != len(b.items):
            return False
        return all(deep_equal(x, y) for x, y in zip(a.items, b.items))

    if isinstance(a, types.Mapping):
        assert isinstance(b, types.Mapping)
        if len(a.entries) != len(b.entries):
            return False
        return all(key in b.entries and deep_equal(value, b.entries[key]) for key, value in a.entries.items())

    return False


def contains_equal(items: list[types.Value] | tuple[types.Value, ...], candidate: types.Value) -> bool:
    """Check if any item is deep-equal to candidate."""
    return any(deep_equal(item, candidate) for item in items)
