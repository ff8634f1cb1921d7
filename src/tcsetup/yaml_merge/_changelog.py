"""
Change records produced by a merge.

The structural merger threads a ChangelogRecorder through its traversal.
Once the merge returns, the recorder is turned into a frozen MergeChangelog
that the MergeResult exposes to callers.

Record kinds:
- Added: a section (sequence or mapping) that only the update had
- Deduplicated: update sequence items dropped as duplicates
- Preserved: a key only the existing document had
- Merged: a mapping present on both sides that was merged recursively
"""

from __future__ import annotations

import abc as _abc
import dataclasses as _dataclasses
import typing as _typing

import tcsetup.yaml_merge._types as types

Path: _typing.TypeAlias = tuple[str, ...]
"""Keys from the document root, e.g. ("agent", "menu") for agent.menu."""


def format_path(path: Path) -> str:
    """Render a key path as a dotted section name ("(root)" for the empty path)."""
    return ".".join(path) if path else "(root)"


@_dataclasses.dataclass(frozen=True, slots=True)
class ChangeRecord(_abc.ABC):
    """Base class for change records."""

    path: Path

    @property
    def section(self) -> str:
        """Dotted section name."""
        return format_path(self.path)

    @_abc.abstractmethod
    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to JSON-serializable dict."""
        ...


@_dataclasses.dataclass(frozen=True, slots=True)
class Added(ChangeRecord):
    """A sequence or mapping section that only the update document had."""

    items: tuple[types.Value, ...] = ()

    def to_dict(self) -> dict[str, _typing.Any]:
        return {
            "section": self.section,
            "items": [types.to_python(item) for item in self.items] if self.items else None,
        }


@_dataclasses.dataclass(frozen=True, slots=True)
class Deduplicated(ChangeRecord):
    """Update sequence items dropped because an equal item was already present."""

    count: int = 0

    def to_dict(self) -> dict[str, _typing.Any]:
        return {"section": self.section, "count": self.count}


@_dataclasses.dataclass(frozen=True, slots=True)
class Preserved(ChangeRecord):
    """A key present only in the existing document, kept unchanged."""

    def to_dict(self) -> dict[str, _typing.Any]:
        return {"section": self.section}


@_dataclasses.dataclass(frozen=True, slots=True)
class Merged(ChangeRecord):
    """A mapping present on both sides, merged key by key."""

    keys: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, _typing.Any]:
        return {"section": self.section, "keys": list(self.keys)}


@_dataclasses.dataclass(frozen=True, slots=True)
class MergeChangelog:
    """
    What one merge call changed. Frozen once the merge returns.

    Each tuple keeps traversal order. The order is for display only.
    ``errors`` holds the problems found when the merged document was
    validated; a merge that produced them is not successful.
    """

    added: tuple[Added, ...] = ()
    deduplicated: tuple[Deduplicated, ...] = ()
    preserved: tuple[Preserved, ...] = ()
    merged: tuple[Merged, ...] = ()
    errors: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True if nothing was added, deduplicated or merged."""
        return not (self.added or self.deduplicated or self.merged)

    def to_summary(self) -> dict[str, list[dict[str, _typing.Any]]]:
        """
        Summarize the changelog as plain data.

        Returns:
            Dict with keys "added", "deduplicated", "preserved", "merged",
            each a list of record dicts.
        """
        return {
            "added": [record.to_dict() for record in self.added],
            "deduplicated": [record.to_dict() for record in self.deduplicated],
            "preserved": [record.to_dict() for record in self.preserved],
            "merged": [record.to_dict() for record in self.merged],
        }


class ChangelogRecorder:
    """
    Collects change records and warnings during a single merge traversal.

    Not shared between merges: the orchestrator creates one per call and
    calls build() when the traversal is done.
    """

    def __init__(self) -> None:
        self._added: list[Added] = []
        self._deduplicated: list[Deduplicated] = []
        self._preserved: list[Preserved] = []
        self._merged: list[Merged] = []
        self._errors: list[str] = []
        self._warnings: list[str] = []

    @property
    def warnings(self) -> list[str]:
        """Warnings collected so far (copy)."""
        return list(self._warnings)

    def record_added(self, path: Path, items: _typing.Iterable[types.Value] = ()) -> None:
        self._added.append(Added(path=path, items=tuple(items)))

    def record_deduplicated(self, path: Path, count: int) -> None:
        # Nothing was dropped, nothing to report
        if count > 0:
            self._deduplicated.append(Deduplicated(path=path, count=count))

    def record_preserved(self, path: Path) -> None:
        self._preserved.append(Preserved(path=path))

    def record_merged(self, path: Path, keys: _typing.Iterable[str]) -> None:
        self._merged.append(Merged(path=path, keys=tuple(keys)))

    def record_error(self, error: str) -> None:
        self._errors.append(error)

    def warn(self, message: str) -> None:
        self._warnings.append(message)

    def build(self) -> MergeChangelog:
        """Freeze the collected records into a MergeChangelog."""
        return MergeChangelog(
            added=tuple(self._added),
            deduplicated=tuple(self._deduplicated),
            preserved=tuple(self._preserved),
            merged=tuple(self._merged),
            errors=tuple(self._errors),
        )
