"""Data contracts for the sync engine.

- ``RunState``: mutable, run-scoped bookkeeping threaded through every
  transform call (change set, include targets, include dependents).
- ``WatchEventKind`` / ``WatchEvent``: filesystem events the watch loop
  dispatches on.
- ``SyncReport``: frozen summary of one batch run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from docs_sync.transform.common import FileKind


@dataclass
class RunState:
    """Run-scoped state shared by the transforms and the sync engine.

    Dicts with ``None`` values serve as insertion-ordered sets so report
    and log output follow processing order.

    Attributes:
        files_transformed: Destination paths whose content differed from
            the freshly computed transform.
        included_files: Destination paths of files that were inlined into
            another file through an include directive.
        dependents: Resolved source path of an included file mapped to the
            source paths of the files that include it.
        include_targets: Resolved source path of an included file mapped to
            its destination path.
    """

    files_transformed: dict[Path, None] = field(default_factory=dict)
    included_files: dict[Path, None] = field(default_factory=dict)
    dependents: dict[Path, list[Path]] = field(default_factory=dict)
    include_targets: dict[Path, Path] = field(default_factory=dict)

    def record_change(self, destination: Path) -> None:
        self.files_transformed[destination] = None

    def discard_change(self, destination: Path) -> None:
        self.files_transformed.pop(destination, None)

    def record_include(
        self, including: Path, included: Path, destination: Path
    ) -> None:
        """Record that *including* inlines *included* (published at *destination*)."""
        key = Path(included).resolve()
        self.included_files[destination] = None
        self.include_targets[key] = destination
        parents = self.dependents.setdefault(key, [])
        if including not in parents:
            parents.append(including)

    def dependents_of(self, source: Path) -> list[Path]:
        """Return the files known to include *source*, in discovery order."""
        return list(self.dependents.get(Path(source).resolve(), []))

    def forget_includes_of(self, including: Path) -> list[Path]:
        """Drop every include recorded for *including*.

        Called before *including* is rendered again, so directives removed
        from it stop routing their targets to it.

        Returns:
            Resolved source paths that no file includes any more.
        """
        key = Path(including).resolve()
        released: list[Path] = []
        for included, parents in list(self.dependents.items()):
            remaining = [p for p in parents if Path(p).resolve() != key]
            if len(remaining) == len(parents):
                continue
            if remaining:
                self.dependents[included] = remaining
                continue
            del self.dependents[included]
            destination = self.include_targets.pop(included, None)
            if destination is not None:
                self.included_files.pop(destination, None)
            released.append(included)
        return released

    @property
    def has_changes(self) -> bool:
        return bool(self.files_transformed)


class WatchEventKind(str, Enum):
    """Filesystem notifications the watch loop understands."""

    ADD = "add"
    ADD_DIR = "addDir"
    CHANGE = "change"
    UNLINK = "unlink"
    UNLINK_DIR = "unlinkDir"


@dataclass(frozen=True)
class WatchEvent:
    """A single filesystem notification for a path under the source root."""

    kind: WatchEventKind
    path: Path


class SyncReport(BaseModel):
    """Aggregate report for one batch run.

    Attributes:
        verify_only: Whether the run only compared (nothing written).
        source_root: Source tree that was read.
        destination_root: Destination tree that was compared against.
        counts: Number of discovered files per kind.
        changed: Destination paths that differed, in processing order.
        removed_includes: Destination paths deleted because their content
            was inlined by an include directive.
        staged: Whether the destination tree was handed to ``git add``.
        started_at: ISO 8601 timestamp when the run started.
        completed_at: ISO 8601 timestamp when the run completed.
    """

    verify_only: bool = False
    source_root: str
    destination_root: str
    counts: dict[FileKind, int] = {}
    changed: list[str] = []
    removed_includes: list[str] = []
    staged: bool = False
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    @property
    def exit_code(self) -> int:
        """1 when verification found stale destination files, else 0."""
        return 1 if self.verify_only and self.changed else 0

