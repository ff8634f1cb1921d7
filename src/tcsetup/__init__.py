"""
tcsetup - configuration overlay merging

Merges overlay documents into existing YAML configuration files without
losing content: existing keys survive, new keys are added, and lists are
combined without duplicates.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("tcsetup")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)

from tcsetup.config import Settings  # noqa: E402
from tcsetup.yaml_merge import (  # noqa: E402
    MergeChangelog,
    MergeResult,
    ValidationReport,
    deduplicate_sequences,
    deep_equal,
    merge_documents,
    merge_mappings,
    parse_document,
    serialize_document,
    validate_document,
)

__all__ = [
    "__version__",
    "__version_info__",
    "Settings",
    "MergeChangelog",
    "MergeResult",
    "ValidationReport",
    "deduplicate_sequences",
    "deep_equal",
    "merge_documents",
    "merge_mappings",
    "parse_document",
    "serialize_document",
    "validate_document",
]
