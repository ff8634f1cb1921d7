"""
Sequence deduplication and recursive mapping merge.

Rules for each key of the update mapping:
- key only in update: added as-is
- both mappings: merged recursively
- both sequences: unioned, existing items first, duplicates dropped
- anything else: equal values are left alone, otherwise the update wins

Keys only in the existing mapping are always kept. Existing containers are
never replaced by an update container of the same kind, while scalar fields
take the update's value, so tools can refresh fields they own.

Values are immutable, so the result is a new tree and neither input is
modified.
"""

from __future__ import annotations

import dataclasses as _dataclasses

import tcsetup.yaml_merge._changelog as changelog
import tcsetup.yaml_merge._equality as equality
import tcsetup.yaml_merge._types as types


@_dataclasses.dataclass(frozen=True, slots=True)
class DedupResult:
    """Outcome of deduplicate_sequences()."""

    merged: types.Sequence
    deduped_count: int
    """Number of update items dropped because an equal item was already placed."""


def deduplicate_sequences(existing: types.Value, update: types.Value) -> DedupResult:
    """
    Append update items to existing, skipping value-duplicates.

    The result holds all existing items in their original order, followed by
    the update items that are not deep-equal to any item already placed.
    Arguments that are not Sequences are treated as empty.

    Args:
        existing: Items already in the document.
        update: Items the overlay wants present.

    Returns:
        DedupResult with the merged sequence and the number of update items
        that were dropped.
    """
    existing_items = existing.items if isinstance(existing, types.Sequence) else ()
    update_items = update.items if isinstance(update, types.Sequence) else ()

    result: list[types.Value] = list(existing_items)
    deduped = 0
    for item in update_items:
        if equality.contains_equal(result, item):
            deduped += 1
        else:
            result.append(item)

    return DedupResult(merged=types.Sequence(result), deduped_count=deduped)


def merge_mappings(existing: types.Mapping, update: types.Mapping) -> types.Mapping:
    """
    Merge update into existing without recording changes.

    Example:
        >>> merge_mappings(from_python({"a": {"x": 1}}), from_python({"a": {"y": 2}}))
        Mapping(entries={'a': Mapping(entries={'x': Number(value=1), 'y': Number(value=2)})})
    """
    return merge_with_changelog(existing, update, changelog.ChangelogRecorder())


def merge_with_changelog(
    existing: types.Mapping,
    update: types.Mapping,
    recorder: changelog.ChangelogRecorder,
    path: changelog.Path = (),
) -> types.Mapping:
    """
    Merge update into existing, recording each structural change.

    Args:
        existing: Mapping from the existing document.
        update: Mapping from the update document.
        recorder: Collects change records and warnings.
        path: Key path of these mappings from the document root.

    Returns:
        New Mapping with the merged content.
    """
    result: dict[str, types.Value] = dict(existing.entries)

    for key in existing.entries:
        if key not in update.entries:
            recorder.record_preserved(path + (key,))

    for key, update_value in update.entries.items():
        child_path = path + (key,)

        if key not in result:
            result[key] = update_value
            if isinstance(update_value, types.Sequence):
                recorder.record_added(child_path, update_value.items)
            elif isinstance(update_value, types.Mapping):
                recorder.record_added(child_path)
            continue

        existing_value = result[key]

        if isinstance(existing_value, types.Mapping) and isinstance(update_value, types.Mapping):
            recorder.record_merged(child_path, update_value.entries.keys())
            result[key] = merge_with_changelog(existing_value, update_value, recorder, child_path)
        elif isinstance(existing_value, types.Sequence) and isinstance(update_value, types.Sequence):
            dedup = deduplicate_sequences(existing_value, update_value)
            result[key] = dedup.merged
            recorder.record_deduplicated(child_path, dedup.deduped_count)
        elif not equality.deep_equal(existing_value, update_value):
            result[key] = update_value
            if existing_value.kind != update_value.kind:
                recorder.warn(
                    f"{changelog.format_path(child_path)}: {existing_value.kind} replaced by "
                    f"{update_value.kind} from update"
                )
            else:
                recorder.warn(f"{changelog.format_path(child_path)}: value replaced by update")

    return types.Mapping(result)
