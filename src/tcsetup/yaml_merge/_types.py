"""
Tagged value model for parsed documents.

Every component of the merge engine operates on these types rather than on
plain Python objects, so "is this a mapping, a sequence or a scalar" is
answered by the variant instead of by ``isinstance`` checks against
``dict``/``list``/``bool``/``int`` (where ``True == 1`` would leak through).

Variants:
- Null, Bool, Number, String: scalars
- Mapping: key -> Value, keys unique
- Sequence: ordered tuple of Values

All variants are frozen. Merge results are built as new trees, so a caller's
input value is never modified.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing


@_dataclasses.dataclass(frozen=True, slots=True)
class Value:
    """Base class for document values. Not instantiated directly."""

    @property
    def kind(self) -> str:
        """Short lowercase name of the variant (for messages)."""
        return type(self).__name__.lower()


@_dataclasses.dataclass(frozen=True, slots=True)
class Null(Value):
    """The null value (``null`` or ``~``)."""

    def __repr__(self) -> str:
        return "Null()"


@_dataclasses.dataclass(frozen=True, slots=True)
class Bool(Value):
    """A boolean scalar."""

    value: bool


@_dataclasses.dataclass(frozen=True, slots=True)
class Number(Value):
    """A numeric scalar. Integers and floats are not distinguished."""

    value: int | float


@_dataclasses.dataclass(frozen=True, slots=True)
class String(Value):
    """A string scalar."""

    value: str


@_dataclasses.dataclass(frozen=True, slots=True)
class Mapping(Value):
    """
    Key -> Value container with unique keys.

    Insertion order is kept for convenience but carries no meaning: equality
    and serialization ignore it.
    """

    entries: dict[str, Value] = _dataclasses.field(default_factory=dict)

    def __init__(self, entries: _typing.Mapping[str, Value] | None = None) -> None:
        # Private copy so later changes to the caller's dict cannot leak in
        object.__setattr__(self, "entries", dict(entries or {}))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> Value:
        return self.entries[key]

    def keys(self) -> _typing.KeysView[str]:
        return self.entries.keys()

    def items(self) -> _typing.ItemsView[str, Value]:
        return self.entries.items()

    def get(self, key: str, default: Value | None = None) -> Value | None:
        return self.entries.get(key, default)


@_dataclasses.dataclass(frozen=True, slots=True)
class Sequence(Value):
    """Ordered list of Values. Order is significant."""

    items: tuple[Value, ...] = ()

    def __init__(self, items: _typing.Iterable[Value] = ()) -> None:
        object.__setattr__(self, "items", tuple(items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> _typing.Iterator[Value]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]


Scalar: _typing.TypeAlias = Null | Bool | Number | String
"""Leaf variants."""

SCALAR_TYPES: tuple[type[Value], ...] = (Null, Bool, Number, String)


def is_scalar(value: Value) -> bool:
    """Check if a value is a leaf (not a Mapping or Sequence)."""
    return isinstance(value, SCALAR_TYPES)


def is_container(value: Value) -> bool:
    """Check if a value is a Mapping or a Sequence."""
    return isinstance(value, (Mapping, Sequence))


# =============================================================================
# Conversion to and from plain Python objects
# =============================================================================


def from_python(obj: _typing.Any) -> Value:
    """
    Convert a plain Python object into a Value.

    Mapping:
        None        -> Null
        bool        -> Bool (checked before int, bool is an int subclass)
        int/float   -> Number
        str         -> String
        list/tuple  -> Sequence
        dict        -> Mapping (keys converted with str())
        Value       -> returned unchanged

    Raises:
        TypeError: For any other type.
    """
    if isinstance(obj, Value):
        return obj
    if obj is None:
        return Null()
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, (int, float)):
        return Number(obj)
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, (list, tuple)):
        return Sequence(from_python(item) for item in obj)
    if isinstance(obj, dict):
        return Mapping({str(k): from_python(v) for k, v in obj.items()})
    raise TypeError(f"Cannot convert {type(obj).__name__} to a document value")


def to_python(value: Value) -> _typing.Any:
    """
    Convert a Value back into plain Python objects.

    Inverse of from_python for JSON-compatible data.
    """
    if isinstance(value, Null):
        return None
    if isinstance(value, (Bool, Number, String)):
        return value.value
    if isinstance(value, Sequence):
        return [to_python(item) for item in value.items]
    if isinstance(value, Mapping):
        return {key: to_python(item) for key, item in value.entries.items()}
    raise TypeError(f"Unknown value type: {type(value).__name__}")
