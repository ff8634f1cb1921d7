"""
Merge orchestration.

merge_documents() is the engine's entry point: it parses both documents,
merges them and returns a MergeResult. Failures at any stage are recorded on
the result instead of being raised, so callers check ``result.success``.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import typing as _typing

import tcsetup.yaml_merge._changelog as changelog
import tcsetup.yaml_merge._errors as errors
import tcsetup.yaml_merge._merge as merge
import tcsetup.yaml_merge._parser as parser
import tcsetup.yaml_merge._serializer as serializer
import tcsetup.yaml_merge._types as types

_logger = _logging.getLogger(__name__)


@_dataclasses.dataclass
class MergeResult:
    """
    Outcome of merge_documents().

    Built once by the orchestrator. Afterwards only to_text() modifies it, and
    only to record a serialization failure.
    """

    success: bool = True
    data: types.Value = _dataclasses.field(default_factory=types.Mapping)
    errors: list[str] = _dataclasses.field(default_factory=list)
    warnings: list[str] = _dataclasses.field(default_factory=list)
    changelog: changelog.MergeChangelog = _dataclasses.field(default_factory=changelog.MergeChangelog)

    def to_text(self) -> str:
        """
        Serialize the merged document.

        Returns:
            Document text without a trailing newline, or "" if serialization
            failed (the failure is appended to errors and success is cleared).
        """
        text, error = self._serialize()
        if error is not None:
            _logger.warning("Could not serialize merged document: %s", error)
            self.errors.append(error)
            self.success = False
            return ""
        return text

    def validate(self) -> list[str]:
        """
        Check that the merged data is a well-formed document.

        Does not modify the result, so repeated calls return the same list.

        Returns:
            Error messages; empty if the data is sound.
        """
        problems: list[str] = []
        if not isinstance(self.data, types.Mapping):
            problems.append("Merged data is not a mapping")
        _, error = self._serialize()
        if error is not None:
            problems.append(error)
        return problems

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict (the merged data itself is omitted)."""
        return {
            "success": self.success,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "changelog": self.changelog.to_summary(),
        }

    def _serialize(self) -> tuple[str, str | None]:
        try:
            return serializer.serialize_document(self.data), None
        except Exception as e:
            return "", f"Serialization error: {e}"


def _fail(result: MergeResult, message: str) -> MergeResult:
    result.errors.append(message)
    result.success = False
    return result


def merge_documents(existing_text: _typing.Any, update_text: _typing.Any) -> MergeResult:
    """
    Merge an update document into an existing one.

    Keys only in the existing document are kept, keys only in the update are
    added, nested mappings are merged recursively and sequences are unioned
    without duplicates. Where scalars differ the update wins and a warning
    is recorded.

    Args:
        existing_text: Current document text ("" for a missing file).
        update_text: Overlay document text.

    Returns:
        MergeResult. On any failure ``success`` is False and ``errors`` says
        why; ``data`` is then an empty Mapping unless the failure happened
        after the merge (validation).
    """
    result = MergeResult()

    if not isinstance(existing_text, str):
        return _fail(result, str(errors.InputTypeError("existing", existing_text)))
    if not isinstance(update_text, str):
        return _fail(result, str(errors.InputTypeError("update", update_text)))

    existing = parser.parse_document(existing_text)
    if existing.diagnostic is not None:
        _logger.warning("Existing document does not parse: %s", existing.diagnostic)
        return _fail(result, f"Existing document parse error: {existing.diagnostic}")

    update = parser.parse_document(update_text)
    if update.diagnostic is not None:
        _logger.warning("Update document does not parse: %s", update.diagnostic)
        return _fail(result, f"Update document parse error: {update.diagnostic}")

    existing_root = existing.value if existing.value is not None else types.Mapping()
    update_root = update.value if update.value is not None else types.Mapping()

    for side, root in (("Existing", existing_root), ("Update", update_root)):
        if not isinstance(root, types.Mapping):
            error = errors.ValidationError(f"{side} document root must be a mapping, got {root.kind}")
            return _fail(result, str(error))

    recorder = changelog.ChangelogRecorder()
    result.data = merge.merge_with_changelog(existing_root, update_root, recorder)
    result.warnings.extend(recorder.warnings)

    problems = result.validate()
    for problem in problems:
        recorder.record_error(problem)
    result.changelog = recorder.build()

    _logger.debug(
        "Merged documents: %d added, %d deduplicated, %d merged, %d preserved, %d warnings",
        len(result.changelog.added),
        len(result.changelog.deduplicated),
        len(result.changelog.merged),
        len(result.changelog.preserved),
        len(result.warnings),
    )

    if problems:
        result.errors.extend(problems)
        result.success = False

    return result
