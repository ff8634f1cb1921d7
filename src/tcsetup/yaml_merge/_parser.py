"""
Indentation-driven parser for the YAML subset used by configuration overlays.

Supported:
- ``key: value`` mappings, nested by indentation
- ``- item`` sequences, including mapping items (``- key: value`` with
  continuation lines indented to the key's column) and compact sequences
  (``key:`` followed by ``- item`` lines at the key's own indentation)
- scalars: null/~, true/false, [] and {}, quoted strings, integers with an
  optional exponent, and bare strings
- whole-line ``#`` comments (dropped, not retained in the value)

Not supported: anchors/aliases, multi-document streams, block scalars, flow
collections other than ``[]``/``{}``, inline ``# comments`` after a value.

The parser never raises. Failures are returned as a ParseDiagnostic on the
ParseOutcome and the partially built value is discarded.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import math as _math
import re as _re

import tcsetup.yaml_merge._errors as errors
import tcsetup.yaml_merge._types as types

_logger = _logging.getLogger(__name__)

# Integers with an optional exponent. Tokens with a dot are never numbers.
_NUMBER_RE = _re.compile(r"[+-]?\d+(?:[eE][+-]?\d+)?")

# Exactly two all-digit segments ("1.0", "10.15") stay strings so
# version-like fields are not turned into numbers. Three or more segments
# ("1.2.3") are not covered by this rule.
_TWO_PART_VERSION_RE = _re.compile(r"\d+\.\d+")

_DOUBLE_QUOTE_ESCAPE_RE = _re.compile(r'\\(["\\nrt])')
_UNESCAPES = {'"': '"', "\\": "\\", "n": "\n", "r": "\r", "t": "\t"}


@_dataclasses.dataclass(frozen=True, slots=True)
class ParseDiagnostic:
    """Why a document could not be parsed."""

    message: str
    line: int | None = None
    """1-indexed line number, when the failure is tied to a line."""

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"line {self.line}: {self.message}"


@_dataclasses.dataclass(frozen=True, slots=True)
class ParseOutcome:
    """
    Result of parse_document().

    Exactly one of ``value`` and ``diagnostic`` is set. ``raw`` always holds
    the text that was parsed.
    """

    value: types.Value | None
    raw: str
    diagnostic: ParseDiagnostic | None = None

    @property
    def ok(self) -> bool:
        """True if the document parsed."""
        return self.diagnostic is None


@_dataclasses.dataclass(frozen=True, slots=True)
class _Line:
    """A significant (non-blank, non-comment) source line."""

    number: int
    indent: int
    text: str


def parse_document(text: str) -> ParseOutcome:
    """
    Parse document text into a Value.

    Empty or comment-only text parses to an empty Mapping. A document made
    only of top-level ``- item`` lines parses to a Sequence; anything else
    parses to a Mapping.

    Args:
        text: Document text.

    Returns:
        ParseOutcome with either the value or a diagnostic.
    """
    if not isinstance(text, str):
        return ParseOutcome(
            value=None,
            raw="",
            diagnostic=ParseDiagnostic(f"document must be a string, got {type(text).__name__}"),
        )

    try:
        lines = _scan_lines(text)
        value = _Parser(lines).parse()
    except errors.ParseError as e:
        _logger.debug("Parse failed: %s", e)
        return ParseOutcome(value=None, raw=text, diagnostic=ParseDiagnostic(e.message, e.line))
    except RecursionError:
        return ParseOutcome(
            value=None,
            raw=text,
            diagnostic=ParseDiagnostic("document is nested too deeply"),
        )

    _logger.debug("Parsed %d significant lines into %s", len(lines), value.kind)
    return ParseOutcome(value=value, raw=text)


def parse_scalar(token: str) -> types.Value:
    """
    Interpret a single scalar token (a value after ``key:`` or ``- ``).

    Rules, in order:
    - ``null`` / ``~`` -> Null
    - ``true`` / ``false`` -> Bool
    - ``[]`` / ``{}`` -> empty Sequence / Mapping
    - ``"..."`` / ``'...'`` -> String with the quotes stripped
    - two dot-separated digit groups (``1.0``) -> String
    - integer with optional exponent (``42``, ``-7``, ``1e3``) -> Number
    - anything else -> String
    """
    token = token.strip()

    if token in ("null", "~"):
        return types.Null()
    if token == "true":
        return types.Bool(True)
    if token == "false":
        return types.Bool(False)
    if token == "[]":
        return types.Sequence()
    if token == "{}":
        return types.Mapping()

    if len(token) >= 2 and token[0] == token[-1] == '"':
        return types.String(_unescape_double(token[1:-1]))
    if len(token) >= 2 and token[0] == token[-1] == "'":
        return types.String(token[1:-1].replace("''", "'"))

    if _TWO_PART_VERSION_RE.fullmatch(token):
        return types.String(token)

    if _NUMBER_RE.fullmatch(token):
        number = _to_number(token)
        if number is not None:
            return types.Number(number)

    return types.String(token)


def _to_number(token: str) -> int | float | None:
    """Convert a numeric token, or None if it does not fit a finite float."""
    if "e" not in token and "E" not in token:
        return int(token)
    number = float(token)
    if not _math.isfinite(number):
        return None
    if number.is_integer() and abs(number) < 2**53:
        return int(number)
    return number


def _unescape_double(body: str) -> str:
    """Undo the escaping the serializer applies inside double quotes."""
    return _DOUBLE_QUOTE_ESCAPE_RE.sub(lambda m: _UNESCAPES[m.group(1)], body)


def _scan_lines(text: str) -> list[_Line]:
    """
    Split text into significant lines with their indentation.

    Raises:
        ParseError: If a line is indented with tabs.
    """
    lines: list[_Line] = []
    for number, raw in enumerate(text.split("\n"), start=1):
        raw = raw.rstrip("\r")
        content = raw.strip()
        if not content or content.startswith("#"):
            continue
        leading = raw[: len(raw) - len(raw.lstrip())]
        if "\t" in leading:
            raise errors.ParseError("tab character in indentation", number)
        lines.append(_Line(number=number, indent=len(leading), text=content))
    return lines


def _is_dash(text: str) -> bool:
    """Check if a stripped line is a sequence item."""
    return text == "-" or text.startswith("- ")


def _closing_quote(text: str) -> int | None:
    """Index of the quote closing the one at text[0], or None if unterminated."""
    quote = text[0]
    i = 1
    while i < len(text):
        char = text[i]
        if quote == '"' and char == "\\":
            i += 2
            continue
        if char == quote:
            if quote == "'" and i + 1 < len(text) and text[i + 1] == "'":
                i += 2
                continue
            return i
        i += 1
    return None


def split_pair(text: str, *, require_space: bool = False) -> tuple[str, str] | None:
    """
    Split ``key: value`` at the first colon outside a quoted key.

    Args:
        text: Stripped line content.
        require_space: Only accept a colon followed by whitespace or the end
            of the text (YAML's rule; used for sequence items so that
            ``- http://host`` stays a scalar).

    Returns:
        (key, raw_value) with the key unquoted and the value stripped, or
        None if the text is not a pair.
    """
    if text[0] in ("'", '"'):
        end = _closing_quote(text)
        if end is None:
            return None
        rest = text[end + 1 :].lstrip()
        if not rest.startswith(":"):
            return None
        colon = len(text) - len(rest)
        key_value = parse_scalar(text[: end + 1])
        key = key_value.value if isinstance(key_value, types.String) else text[1:end]
    else:
        colon = text.find(":")
        if colon == -1:
            return None
        key = text[:colon].strip()

    after = text[colon + 1 :]
    if require_space and after and not after[0].isspace():
        return None
    return key, after.strip()


class _Parser:
    """Recursive descent over significant lines, one call per block."""

    def __init__(self, lines: list[_Line]) -> None:
        self._lines = lines
        self._pos = 0

    def _peek(self) -> _Line | None:
        if self._pos < len(self._lines):
            return self._lines[self._pos]
        return None

    def parse(self) -> types.Value:
        first = self._peek()
        if first is None:
            return types.Mapping()

        value = self._parse_block(first.indent)

        leftover = self._peek()
        if leftover is not None:
            raise errors.ParseError("line is indented less than the start of the document", leftover.number)
        return value

    def _parse_block(self, indent: int) -> types.Value:
        """Parse the block starting at the current line (a sequence or a mapping)."""
        first = self._peek()
        assert first is not None
        if _is_dash(first.text):
            return self._parse_sequence(indent)
        return self._parse_mapping(indent)

    def _parse_sequence(self, indent: int, *, compact: bool = False) -> types.Sequence:
        """
        Parse ``- item`` lines at ``indent``.

        A compact sequence (items at the same indentation as their parent
        key) ends at the first non-item line instead of rejecting it; that
        line belongs to the parent mapping.
        """
        items: list[types.Value] = []
        while (line := self._peek()) is not None and line.indent >= indent:
            if line.indent > indent:
                raise errors.ParseError("unexpected indentation", line.number)
            if not _is_dash(line.text):
                if compact:
                    break
                raise errors.ParseError("mapping key mixed into a sequence", line.number)
            self._pos += 1
            items.append(self._parse_item(line))
        return types.Sequence(items)

    def _parse_item(self, line: _Line) -> types.Value:
        """Parse the value of one ``- ...`` line (the line is already consumed)."""
        rest = line.text[1:].lstrip()

        if not rest:
            nested = self._peek()
            if nested is not None and nested.indent > line.indent:
                return self._parse_block(nested.indent)
            return types.Null()

        pair = None if _is_dash(rest) else split_pair(rest, require_space=True)
        if _is_dash(rest) or pair is not None:
            # "- key: value" or "- - item": re-read the remainder as the first
            # line of a block at its own column so continuation lines indented
            # to that column join the same item.
            column = line.indent + len(line.text) - len(rest)
            if pair is not None:
                column = self._item_column(line, column, has_value=bool(pair[1].strip()))
            self._lines.insert(self._pos, _Line(number=line.number, indent=column, text=rest))
            return self._parse_block(column)

        return parse_scalar(rest)

    def _item_column(self, line: _Line, column: int, *, has_value: bool) -> int:
        """
        Column of the keys of a ``- key: value`` item.

        Normally the first key's own column. When the next key line is
        indented past the dash but not to that column, it still belongs to
        the item and its indentation is used for every key. A deeper line
        after an empty ``key:`` is that key's nested value instead.
        """
        following = self._peek()
        if following is None or following.indent <= line.indent or following.indent == column:
            return column
        if _is_dash(following.text):
            return column
        if following.indent > column and not has_value:
            return column
        return following.indent

    def _parse_mapping(self, indent: int) -> types.Mapping:
        entries: dict[str, types.Value] = {}
        while (line := self._peek()) is not None and line.indent >= indent:
            if line.indent > indent:
                raise errors.ParseError("unexpected indentation", line.number)
            if _is_dash(line.text):
                raise errors.ParseError("sequence item mixed into a mapping", line.number)

            pair = split_pair(line.text)
            if pair is None:
                raise errors.ParseError(f"expected 'key: value', got {line.text!r}", line.number)
            key, raw_value = pair
            if not key and line.text.startswith(":"):
                raise errors.ParseError("empty key", line.number)
            if key in entries:
                raise errors.ParseError(f"duplicate key {key!r}", line.number)

            self._pos += 1
            entries[key] = self._parse_entry_value(line, raw_value)
        return types.Mapping(entries)

    def _parse_entry_value(self, line: _Line, raw_value: str) -> types.Value:
        """Parse the value of a ``key:`` line (the line is already consumed)."""
        if raw_value:
            return parse_scalar(raw_value)

        nested = self._peek()
        if nested is None:
            return types.Null()
        if nested.indent > line.indent:
            return self._parse_block(nested.indent)
        if nested.indent == line.indent and _is_dash(nested.text):
            return self._parse_sequence(line.indent, compact=True)
        return types.Null()
