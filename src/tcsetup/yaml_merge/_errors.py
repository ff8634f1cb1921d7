"""
Error taxonomy for the merge engine.

The engine never lets these escape its public entry points: parse failures
come back as diagnostics, and merge/serialization/validation failures are
recorded as messages on the MergeResult. They exist so each failure mode has
one place that formats its message, and so internal code can raise and the
boundary can catch.
"""

from __future__ import annotations


class YamlMergeError(Exception):
    """Base class for merge engine errors."""

    pass


class InputTypeError(YamlMergeError):
    """An argument to the merge entry point is not text."""

    def __init__(self, name: str, value: object) -> None:
        self.name = name
        super().__init__(f"{name} parameter must be a string, got {type(value).__name__}")


class ParseError(YamlMergeError):
    """A document could not be interpreted by the parser grammar."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.message = message
        self.line = line
        if line is None:
            super().__init__(message)
        else:
            super().__init__(f"line {line}: {message}")


class SerializationError(YamlMergeError):
    """A value could not be converted back to text."""

    pass


class ValidationError(YamlMergeError):
    """A post-merge structural check failed."""

    pass
