"""Diff-and-sync engine that publishes transformed documentation.

The ``SyncEngine`` is the only component that reads or writes the
destination tree.  A batch run:

1. Discovers markdown files, transforms each one, then removes the
   standalone output of every file that was inlined by an include.
2. Does the same for HTML files.
3. Copies every other file unchanged.
4. Stages the destination tree with ``git add`` when something changed
   and staging was requested.

Each file is written only when its freshly transformed bytes differ from
what is already published, so a second run over an unchanged source tree
writes nothing.  The first error aborts the run.
"""

from __future__ import annotations

import logging
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from docs_sync.config import Config
from docs_sync.errors import FilesystemError
from docs_sync.file_handler import (
    read_bytes,
    read_existing_bytes,
    read_text,
    write_bytes_atomic,
)
from docs_sync.sync.mapper import (
    HTML_PATTERNS,
    MARKDOWN_PATTERNS,
    OTHER_PATTERNS,
    PathMapper,
)
from docs_sync.sync.models import RunState, SyncReport
from docs_sync.transform.blocks import BlockTransformer
from docs_sync.transform.common import FileKind
from docs_sync.transform.formatter import Formatter, format_content
from docs_sync.transform.header import (
    annotate_html,
    generate_header,
    plain_notice,
    prepend_header,
)
from docs_sync.transform.includes import resolve_includes
from docs_sync.transform.placeholders import inject_placeholders

logger = logging.getLogger(__name__)

# Compared against when the destination file does not exist yet.
NEW_FILE_SENTINEL = b"#NEW FILE#"


class SyncEngine:
    """Transform source files and publish the ones whose output changed.

    Args:
        config: Resolved runtime configuration.
        formatter: Canonical formatter applied to text output before it is
            compared.
    """

    def __init__(self, config: Config, formatter: Formatter = format_content) -> None:
        self.config = config
        self.formatter = formatter
        self.mapper = PathMapper(
            config.source_root,
            config.active_destination_root,
            config.exclude_patterns,
        )
        self.blocks = BlockTransformer(config.callout_style)

    @property
    def write(self) -> bool:
        return not self.config.verify

    # ------------------------------------------------------------------
    # Diff and write
    # ------------------------------------------------------------------

    def sync_file(
        self,
        source_path: Path,
        content: bytes | None = None,
        *,
        state: RunState,
        write: bool,
    ) -> bool:
        """Publish *content* for *source_path* if it differs from the destination.

        Args:
            source_path: Source file the content was produced from.
            content: Transformed bytes; ``None`` copies the raw source bytes.
            state: Run state receiving the changed destination.
            write: Replace the destination file; ``False`` only compares.

        Returns:
            ``True`` if the destination differed (and was written when
            *write* is set).

        Raises:
            FilesystemError: If the source cannot be read or the destination
                cannot be written.
        """
        if content is None:
            content = read_bytes(source_path)

        if write:
            destination = self.mapper.map_to_destination(source_path)
        else:
            destination = self.mapper.destination_for(source_path)

        existing = read_existing_bytes(destination)
        if existing is None:
            existing = NEW_FILE_SENTINEL
        if existing == content:
            return False

        state.record_change(destination)
        if write:
            logger.info(
                "File transformed: %s, and copied to %s", source_path, destination
            )
            write_bytes_atomic(destination, content)
        else:
            logger.info("File to be transformed: %s", source_path)
        return True

    # ------------------------------------------------------------------
    # Per-kind transforms
    # ------------------------------------------------------------------

    def _inject(self, text: str) -> str:
        return inject_placeholders(
            text,
            self.config.major_version,
            self.config.cdn_url,
            version_token=self.config.version_token,
            cdn_token=self.config.cdn_token,
        )

    def render_markdown(self, source_path: Path, state: RunState) -> str:
        """Return the published text of a markdown source file."""
        text = read_text(source_path)
        text = resolve_includes(source_path, text, self.mapper, state)
        text = self._inject(text)

        if self.config.should_skip_transform(source_path):
            logger.debug("Publishing %s without block transforms", source_path)
            return self.formatter(text, FileKind.MARKDOWN)

        body = self.blocks.transform(text)
        if self.config.emit_header:
            header = generate_header(
                source_path,
                self.mapper.destination_for(source_path),
                self.config.repository_root,
            )
            body = prepend_header(header, body)
        return self.formatter(body, FileKind.MARKDOWN)

    def render_html(self, source_path: Path) -> str:
        """Return the published text of an HTML source file."""
        text = self._inject(read_text(source_path))
        if self.config.emit_header:
            text = annotate_html(
                text, plain_notice(source_path, self.config.repository_root)
            )
        return self.formatter(text, FileKind.HTML)

    def transform_markdown(self, source_path: Path, state: RunState) -> bool:
        content = self.render_markdown(source_path, state)
        return self.sync_file(
            source_path, content.encode("utf-8"), state=state, write=self.write
        )

    def transform_html(self, source_path: Path, state: RunState) -> bool:
        content = self.render_html(source_path)
        return self.sync_file(
            source_path, content.encode("utf-8"), state=state, write=self.write
        )

    def copy_passthrough(self, source_path: Path, state: RunState) -> bool:
        return self.sync_file(source_path, state=state, write=self.write)

    def transform_path(self, source_path: Path, state: RunState) -> bool | None:
        """Dispatch *source_path* to the transform for its kind.

        Returns:
            The ``sync_file`` result, or ``None`` if the path is excluded.
        """
        kind = self.mapper.classify(source_path)
        if kind is None:
            logger.debug("Ignoring excluded path %s", source_path)
            return None
        return self._handlers()[kind](source_path, state)

    def _handlers(self) -> dict[FileKind, Callable[[Path, RunState], bool]]:
        return {
            FileKind.MARKDOWN: self.transform_markdown,
            FileKind.HTML: self.transform_html,
            FileKind.OTHER: self.copy_passthrough,
        }

    # ------------------------------------------------------------------
    # Include targets
    # ------------------------------------------------------------------

    def purge_included(self, state: RunState) -> list[Path]:
        """Remove the standalone output of every file inlined by an include.

        Include targets are always dropped from the change set.  Only
        targets that are currently published are deleted, and verify mode
        deletes nothing.

        Returns:
            Destination paths that were removed.
        """
        removed: list[Path] = []
        for destination in state.included_files:
            state.discard_change(destination)
            if not self.write or not destination.exists():
                continue
            try:
                destination.unlink()
            except OSError as exc:
                raise FilesystemError("remove", destination, exc) from exc
            logger.info(
                "Removed %s as it was used inside an @include block.", destination
            )
            removed.append(destination)
        return removed

    # ------------------------------------------------------------------
    # Batch driver
    # ------------------------------------------------------------------

    def run(self, state: RunState | None = None) -> SyncReport:
        """Execute a full batch run over the source tree.

        Args:
            state: Run state to thread through the transforms; a fresh one
                is created when omitted.

        Returns:
            A ``SyncReport`` summarising what was (or would be) done.
        """
        if state is None:
            state = RunState()
        started_at = datetime.now(timezone.utc).isoformat()
        verb = "Transforming" if self.write else "Verifying"

        phases = [
            (FileKind.MARKDOWN, MARKDOWN_PATTERNS, ()),
            (FileKind.HTML, HTML_PATTERNS, ()),
            (FileKind.OTHER, OTHER_PATTERNS, MARKDOWN_PATTERNS + HTML_PATTERNS),
        ]
        handlers = self._handlers()
        counts: dict[FileKind, int] = {}
        removed: list[Path] = []

        for kind, patterns, exclude in phases:
            files = self.mapper.discover(patterns, exclude)
            counts[kind] = len(files)
            logger.info("%s %d %s files...", verb, len(files), kind.value)
            for source_path in files:
                handlers[kind](source_path, state)
            removed.extend(self.purge_included(state))

        staged = False
        if state.has_changes and self.write and self.config.git:
            staged = self.stage_changes()

        return SyncReport(
            verify_only=not self.write,
            source_root=str(self.config.source_root),
            destination_root=str(self.config.active_destination_root),
            counts=counts,
            changed=[str(p) for p in state.files_transformed],
            removed_includes=[str(p) for p in removed],
            staged=staged,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )

    # ------------------------------------------------------------------
    # Git
    # ------------------------------------------------------------------

    def stage_changes(self) -> bool:
        """Launch ``git add`` on the destination tree without waiting.

        Returns:
            ``True`` if the command was launched.
        """
        destination = str(self.config.active_destination_root)
        logger.info("Adding changes in %s folder to git", destination)
        try:
            # Not awaited; the exited child is reaped by the next Popen
            subprocess.Popen(["git", "add", destination], start_new_session=True)
        except OSError as exc:
            logger.warning("Failed to launch git add for %s: %s", destination, exc)
            return False
        return True
