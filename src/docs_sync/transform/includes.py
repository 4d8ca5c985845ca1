"""Include directive resolution for markdown sources.

A directive ``<!-- @include: ./fragment.md -->`` is replaced by the raw
content of the referenced file, resolved relative to the including file.
Resolution is single level: directives inside the inlined content are left
as they are.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import TYPE_CHECKING

from docs_sync.errors import FilesystemError, IncludeResolutionError
from docs_sync.file_handler import read_text

if TYPE_CHECKING:
    from docs_sync.sync.mapper import PathMapper
    from docs_sync.sync.models import RunState

logger = logging.getLogger(__name__)

INCLUDE_RE = re.compile(r"<!--\s*@include:\s*(.*?)\s*-->")


def resolve_include_path(file_path: Path, directive: str) -> Path:
    """Resolve *directive* against the directory of *file_path*.

    The result is normalised but stays relative when *file_path* is
    relative, so it maps through the same source-root prefix.
    """
    return Path(os.path.normpath(Path(file_path).parent / directive))


def resolve_includes(
    file_path: Path,
    text: str,
    mapper: PathMapper,
    state: RunState,
) -> str:
    """Inline every include directive in *text*.

    Each included file's destination path is recorded in
    ``state.included_files`` together with the including file, so the
    standalone copy can be removed once its content lives in the parent.

    Args:
        file_path: Path of the file *text* was read from.
        text: Markdown source.
        mapper: Maps included paths to their destination paths.
        state: Run state receiving the include dependencies.

    Returns:
        *text* with every directive replaced.

    Raises:
        IncludeResolutionError: If a referenced file cannot be read.
    """

    def _inline(match: re.Match) -> str:
        directive = match.group(1)
        include_path = resolve_include_path(file_path, directive)
        try:
            content = read_text(include_path)
        except (FilesystemError, UnicodeDecodeError) as exc:
            raise IncludeResolutionError(directive, file_path, exc) from exc

        try:
            destination = mapper.destination_for(include_path)
        except ValueError:
            # Outside the source tree there is no standalone copy to retire
            logger.debug(
                "Included file %s is outside %s", include_path, mapper.source_root
            )
        else:
            state.record_include(Path(file_path), include_path, destination)
        return content

    return INCLUDE_RE.sub(_inline, text)
