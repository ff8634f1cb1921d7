"""
Serialize document values back to YAML-subset text.

Output is normalized rather than format-preserving:
- mapping keys are emitted in ascending lexicographic order
- two spaces per nesting level
- comments from the source are gone (the parser drops them)

The output reads back through parse_document() to an equal value, and it
is also valid YAML.
"""

from __future__ import annotations

import decimal as _decimal
import math as _math
import re as _re

import tcsetup.constants as constants
import tcsetup.yaml_merge._errors as errors
import tcsetup.yaml_merge._parser as parser
import tcsetup.yaml_merge._types as types

# Characters that always force a string into double quotes
_QUOTE_TRIGGERS = (":", "#", '"', "\n", "\r", "\t")

# Leading characters with a meaning in YAML; quoting keeps output valid YAML
_YAML_INDICATORS = frozenset("'\"[]{},&*!|>%@`?")

_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\r": "\\r", "\t": "\\t"}
_ESCAPE_RE = _re.compile(r'[\\"\n\r\t]')


def serialize_document(value: types.Value, indent: int = 0) -> str:
    """
    Convert a value to document text.

    Args:
        value: Value to serialize. Usually a Mapping (the document root).
        indent: Nesting level to start at; each level is two spaces.

    Returns:
        Lines joined with newlines, without a trailing newline. An empty
        Mapping serializes to "".

    Raises:
        SerializationError: If the tree holds something that is not a Value,
            a non-string key, or a non-finite number.
    """
    return "\n".join(_value_lines(value, indent))


def format_scalar(value: types.Value) -> str:
    """
    Render a leaf value (or an empty container) as a single token.

    Raises:
        SerializationError: For non-empty containers and non-Values.
    """
    if isinstance(value, types.Null):
        return "null"
    if isinstance(value, types.Bool):
        return "true" if value.value else "false"
    if isinstance(value, types.Number):
        return _format_number(value.value)
    if isinstance(value, types.String):
        return _format_string(value.value)
    if isinstance(value, types.Mapping) and not value.entries:
        return "{}"
    if isinstance(value, types.Sequence) and not value.items:
        return "[]"
    if isinstance(value, (types.Mapping, types.Sequence)):
        raise errors.SerializationError(f"{value.kind} with content is not a scalar")
    raise errors.SerializationError(f"cannot serialize object of type {type(value).__name__}")


def _pad(level: int) -> str:
    return " " * (constants.INDENT_WIDTH * level)


def _value_lines(value: types.Value, level: int) -> list[str]:
    if isinstance(value, types.Mapping) and value.entries:
        lines: list[str] = []
        for key in _sorted_keys(value):
            lines.extend(_entry_lines(key, value.entries[key], level))
        return lines
    if isinstance(value, types.Sequence) and value.items:
        lines = []
        for item in value.items:
            lines.extend(_item_lines(item, level))
        return lines
    if isinstance(value, types.Mapping):
        # The empty document is empty text
        return []
    return [_pad(level) + format_scalar(value)]


def _sorted_keys(mapping: types.Mapping) -> list[str]:
    for key in mapping.entries:
        if not isinstance(key, str):
            raise errors.SerializationError(f"mapping key must be a string, got {type(key).__name__}")
    return sorted(mapping.entries)


def _is_nested(value: types.Value) -> bool:
    """True for containers that need their own block of lines."""
    return (isinstance(value, types.Mapping) and bool(value.entries)) or (
        isinstance(value, types.Sequence) and bool(value.items)
    )


def _entry_lines(key: str, value: types.Value, level: int) -> list[str]:
    """Lines for ``key: value`` inside a mapping at ``level``."""
    prefix = _pad(level) + _format_key(key) + ":"
    if _is_nested(value):
        return [prefix] + _value_lines(value, level + 1)
    return [prefix + " " + format_scalar(value)]


def _item_lines(item: types.Value, level: int) -> list[str]:
    """Lines for one ``- item`` of a sequence at ``level``."""
    pad = _pad(level)

    if isinstance(item, types.Mapping) and item.entries:
        # Serialize the mapping one level deeper, then put the dash in the
        # first line's indentation: "- first_key: ..." with the remaining
        # keys lined up under first_key.
        nested = _value_lines(item, level + 1)
        nested[0] = pad + "- " + nested[0][len(pad) + constants.INDENT_WIDTH :]
        return nested

    if isinstance(item, types.Sequence) and item.items:
        return [pad + "-"] + _value_lines(item, level + 1)

    return [pad + "- " + format_scalar(item)]


def _format_number(number: int | float) -> str:
    if isinstance(number, int):
        return str(number)
    if not _math.isfinite(number):
        raise errors.SerializationError(f"cannot serialize non-finite number {number!r}")
    if number.is_integer():
        return str(int(number))
    # Numbers must not contain a dot to read back as numbers, so fractional
    # values are written as integer mantissa and exponent: 0.25 -> 25e-2
    sign, digits, exponent = _decimal.Decimal(repr(number)).as_tuple()
    mantissa = "".join(str(digit) for digit in digits)
    return f"{'-' if sign else ''}{mantissa}e{exponent}"


def _quote(text: str) -> str:
    return '"' + _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], text) + '"'


def _format_string(text: str) -> str:
    if not text or any(char in text for char in _QUOTE_TRIGGERS):
        return _quote(text)
    if text[0] in _YAML_INDICATORS or text == "-" or text.startswith("- "):
        return _quote(text)
    # Anything that would read back as another value (null, true, 42, [],
    # '', padded text, a quoted token) must be quoted to stay a string
    if parser.parse_scalar(text) != types.String(text):
        return _quote(text)
    return text


def _format_key(key: str) -> str:
    if not key or key != key.strip():
        return _quote(key)
    if any(char in key for char in _QUOTE_TRIGGERS):
        return _quote(key)
    if key[0] in _YAML_INDICATORS or key == "-" or key.startswith("- "):
        return _quote(key)
    return key
