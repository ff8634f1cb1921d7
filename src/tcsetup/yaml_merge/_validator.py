"""Syntax validation for document text."""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing

import tcsetup.yaml_merge._parser as parser


@_dataclasses.dataclass(frozen=True, slots=True)
class ValidationReport:
    """Outcome of validate_document()."""

    valid: bool
    errors: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict."""
        return {"valid": self.valid, "errors": list(self.errors)}


def validate_document(text: _typing.Any) -> ValidationReport:
    """
    Check that text parses.

    Only syntax is checked; merge-specific invariants (e.g. a mapping root)
    are not. Empty and non-string input is trivially valid.
    """
    if not text or not isinstance(text, str):
        return ValidationReport(valid=True)

    outcome = parser.parse_document(text)
    if outcome.diagnostic is not None:
        return ValidationReport(valid=False, errors=(str(outcome.diagnostic),))
    return ValidationReport(valid=True)
