"""Path mapper and file discovery for the docs sync engine.

Translates source-tree paths into destination-tree paths and selects the
files each transform phase operates on.

Pattern matching:

1. Patterns are POSIX globs relative to the source root.
2. ``*`` and ``**`` both cross ``/``; a leading ``**/`` also matches at
   the root (``**/*.md`` matches ``index.md``).
3. A path is selected when it matches at least one include pattern and no
   exclude pattern.
"""

from __future__ import annotations

import fnmatch
from pathlib import Path, PurePosixPath

from docs_sync.errors import FilesystemError
from docs_sync.transform.common import FileKind

MARKDOWN_PATTERNS: tuple[str, ...] = ("**/*.md",)
HTML_PATTERNS: tuple[str, ...] = ("**/*.html",)
OTHER_PATTERNS: tuple[str, ...] = ("**",)


class PathMapper:
    """Map source paths to destination paths and discover source files.

    Args:
        source_root: Root of the authored documentation tree.
        destination_root: Root of the published tree.
        exclude: Glob patterns never selected in any phase.
    """

    def __init__(
        self,
        source_root: Path,
        destination_root: Path,
        exclude: list[str] | tuple[str, ...] = (),
    ) -> None:
        self.source_root = Path(source_root)
        self.destination_root = Path(destination_root)
        self.exclude = tuple(exclude)

    # ------------------------------------------------------------------
    # Source -> Destination
    # ------------------------------------------------------------------

    def destination_for(self, source_path: Path | str) -> Path:
        """Return the destination path for *source_path* without touching disk.

        Raises:
            ValueError: If *source_path* is not under the source root.
        """
        return self.destination_root / self.relative_path(source_path)

    def map_to_destination(self, source_path: Path | str) -> Path:
        """Return the destination path and make sure its parent exists.

        Raises:
            FilesystemError: If the parent directory cannot be created.
        """
        destination = self.destination_for(source_path)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FilesystemError("create directory", destination.parent, exc) from exc
        return destination

    def relative_path(self, source_path: Path | str) -> PurePosixPath:
        """Return *source_path* relative to the source root, POSIX-style.

        Absolute paths (as delivered by the filesystem notifier) are
        compared against the resolved source root.
        """
        path = Path(source_path)
        try:
            rel = path.relative_to(self.source_root)
        except ValueError:
            try:
                rel = path.resolve().relative_to(self.source_root.resolve())
            except ValueError:
                raise ValueError(
                    f"{source_path} is not under source root {self.source_root}"
                ) from None
        return PurePosixPath(rel.as_posix())

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(
        self,
        patterns: tuple[str, ...] | list[str],
        exclude: tuple[str, ...] | list[str] = (),
    ) -> list[Path]:
        """Scan the source root for files selected by *patterns*.

        The full list is built before it is returned, so no file is
        processed before enumeration completes.

        Args:
            patterns: Include globs relative to the source root.
            exclude: Extra exclude globs on top of the mapper's own.

        Returns:
            Sorted list of paths (prefixed with the source root).
        """
        if not self.source_root.is_dir():
            return []

        result: list[Path] = []
        for path in sorted(self.source_root.rglob("*")):
            if path.is_file() and self.matches(path, patterns, exclude):
                result.append(path)
        return result

    def matches(
        self,
        source_path: Path | str,
        patterns: tuple[str, ...] | list[str],
        exclude: tuple[str, ...] | list[str] = (),
    ) -> bool:
        """Return ``True`` if *source_path* is selected by *patterns*."""
        try:
            rel = str(self.relative_path(source_path))
        except ValueError:
            return False

        for pattern in (*self.exclude, *exclude):
            if _glob_match(rel, pattern):
                return False
        return any(_glob_match(rel, pattern) for pattern in patterns)

    def classify(self, source_path: Path | str) -> FileKind | None:
        """Return the transform phase for *source_path*.

        Markdown and HTML patterns are checked first; anything else that
        is not excluded is a passthrough file.  Returns ``None`` for
        excluded paths.
        """
        if self.matches(source_path, MARKDOWN_PATTERNS):
            return FileKind.MARKDOWN
        if self.matches(source_path, HTML_PATTERNS):
            return FileKind.HTML
        if self.matches(
            source_path, OTHER_PATTERNS, MARKDOWN_PATTERNS + HTML_PATTERNS
        ):
            return FileKind.OTHER
        return None


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------


def _glob_match(rel_path: str, pattern: str) -> bool:
    """Match a POSIX relative path against a glob with ``**`` support.

    ``fnmatch`` lets ``*`` cross ``/``, so ``**`` behaves like ``*``; the
    only extra case is a leading ``**/`` matching at the root.
    """
    if fnmatch.fnmatchcase(rel_path, pattern):
        return True
    if pattern.startswith("**/") and _glob_match(rel_path, pattern[3:]):
        return True
    return False
