"""
Structural merge engine for YAML-subset configuration documents.

Merges an overlay document into an existing one without losing content:
existing keys survive, new keys are added, nested mappings merge
recursively, and sequences are unioned with value-based deduplication.

Example:
    >>> result = merge_documents("memories:\\n  - a", "memories:\\n  - a\\n  - b")
    >>> result.to_text()
    'memories:\\n  - a\\n  - b'
"""

from tcsetup.yaml_merge._changelog import (
    Added,
    ChangelogRecorder,
    ChangeRecord,
    Deduplicated,
    Merged,
    MergeChangelog,
    Preserved,
    format_path,
)
from tcsetup.yaml_merge._core import MergeResult, merge_documents
from tcsetup.yaml_merge._equality import deep_equal
from tcsetup.yaml_merge._errors import (
    InputTypeError,
    ParseError,
    SerializationError,
    ValidationError,
    YamlMergeError,
)
from tcsetup.yaml_merge._merge import (
    DedupResult,
    deduplicate_sequences,
    merge_mappings,
    merge_with_changelog,
)
from tcsetup.yaml_merge._parser import ParseDiagnostic, ParseOutcome, parse_document, parse_scalar
from tcsetup.yaml_merge._serializer import format_scalar, serialize_document
from tcsetup.yaml_merge._types import (
    Bool,
    Mapping,
    Null,
    Number,
    Scalar,
    Sequence,
    String,
    Value,
    from_python,
    is_container,
    is_scalar,
    to_python,
)
from tcsetup.yaml_merge._validator import ValidationReport, validate_document

__all__ = [
    # Values
    "Value",
    "Null",
    "Bool",
    "Number",
    "String",
    "Mapping",
    "Sequence",
    "Scalar",
    "from_python",
    "to_python",
    "is_scalar",
    "is_container",
    # Errors
    "YamlMergeError",
    "InputTypeError",
    "ParseError",
    "SerializationError",
    "ValidationError",
    # Parsing
    "ParseDiagnostic",
    "ParseOutcome",
    "parse_document",
    "parse_scalar",
    # Serialization
    "serialize_document",
    "format_scalar",
    # Validation
    "ValidationReport",
    "validate_document",
    # Merging
    "deep_equal",
    "DedupResult",
    "deduplicate_sequences",
    "merge_mappings",
    "merge_with_changelog",
    # Changelog
    "ChangeRecord",
    "Added",
    "Deduplicated",
    "Preserved",
    "Merged",
    "MergeChangelog",
    "ChangelogRecorder",
    "format_path",
    # Orchestration
    "MergeResult",
    "merge_documents",
]
