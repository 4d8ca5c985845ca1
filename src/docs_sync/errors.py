"""Exception hierarchy for the docs sync engine.

All errors raised by the engine derive from ``DocsSyncError`` so the CLI
can report them uniformly.  Verification mismatches are not errors: they
surface as ``SyncReport.exit_code``.
"""

from __future__ import annotations

from pathlib import Path


class DocsSyncError(Exception):
    """Base class for docs sync failures."""


class FilesystemError(DocsSyncError):
    """A read, write, or mkdir failed for a reason other than a missing
    destination file during comparison.

    The underlying ``OSError`` is chained as ``__cause__``.
    """

    def __init__(self, operation: str, path: Path | str, cause: OSError):
        self.operation = operation
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Failed to {operation} {path}: {cause}")


class IncludeResolutionError(DocsSyncError):
    """An ``@include`` directive referenced a file that could not be read.

    Attributes:
        directive: The include target as written in the directive.
        including_file: The file that contains the directive.
        cause: The underlying exception.
    """

    def __init__(
        self, directive: str, including_file: Path | str, cause: Exception
    ):
        self.directive = directive
        self.including_file = Path(including_file)
        self.cause = cause
        super().__init__(
            f'Failed to resolve include "{directive}" in '
            f'"{including_file}": {cause}'
        )
