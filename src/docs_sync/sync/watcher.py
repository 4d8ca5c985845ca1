"""Watch the source tree and keep the destination tree in sync."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import Change, watch as fs_watch

from docs_sync.errors import FilesystemError
from docs_sync.sync.models import RunState, WatchEvent, WatchEventKind
from docs_sync.transform.common import FileKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from docs_sync.sync.engine import SyncEngine

logger = logging.getLogger(__name__)


class WatchCoordinator:
    """Translate filesystem notifications into sync operations.

    Events are handled one at a time in delivery order.  A failing event is
    logged and the loop moves on to the next one.

    Args:
        engine: Engine that performs the transforms and writes.
        state: Run state kept for the lifetime of the watch loop, usually
            the one populated by the initial batch run so include
            dependencies are already known.
    """

    def __init__(self, engine: SyncEngine, state: RunState | None = None) -> None:
        self.engine = engine
        self.state = state if state is not None else RunState()

    @property
    def mapper(self):
        return self.engine.mapper

    # ------------------------------------------------------------------
    # Event translation
    # ------------------------------------------------------------------

    def translate(self, changes: Iterable[tuple[Change, str]]) -> Iterator[WatchEvent]:
        """Map ``watchfiles`` change pairs to watch events.

        A batch is a set, so it is sorted by path for a stable order.
        """
        for change, raw_path in sorted(changes, key=lambda c: (c[1], c[0])):
            path = Path(raw_path)
            if change == Change.added:
                kind = WatchEventKind.ADD_DIR if path.is_dir() else WatchEventKind.ADD
            elif change == Change.modified:
                if path.is_dir():
                    continue
                kind = WatchEventKind.CHANGE
            elif change == Change.deleted:
                try:
                    destination = self.mapper.destination_for(path)
                except ValueError:
                    continue
                if destination.is_dir():
                    kind = WatchEventKind.UNLINK_DIR
                else:
                    kind = WatchEventKind.UNLINK
            else:
                continue
            yield WatchEvent(kind=kind, path=path)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def handle(self, event: WatchEvent) -> None:
        """Apply one watch event to the destination tree.

        Raises:
            DocsSyncError: If a transform or filesystem operation fails.
        """
        logger.debug("Watch event %s %s", event.kind.value, event.path)

        if event.kind is WatchEventKind.UNLINK:
            self._remove_file(event.path)
        elif event.kind is WatchEventKind.UNLINK_DIR:
            self._remove_dir(event.path)
        elif event.kind in (WatchEventKind.ADD, WatchEventKind.CHANGE):
            self._publish(event.path)

    def _remove_file(self, source_path: Path) -> None:
        destination = self.mapper.destination_for(source_path)
        released = self.state.forget_includes_of(source_path)
        try:
            destination.unlink(missing_ok=True)
        except OSError as exc:
            raise FilesystemError("remove", destination, exc) from exc
        logger.info("Removed %s", destination)
        self._publish_released(released)

    def _remove_dir(self, source_path: Path) -> None:
        destination = self.mapper.destination_for(source_path)
        if not destination.is_dir():
            return
        try:
            shutil.rmtree(destination)
        except OSError as exc:
            raise FilesystemError("remove directory", destination, exc) from exc
        logger.info("Removed directory %s", destination)

    def _publish(self, source_path: Path) -> None:
        kind = self.mapper.classify(source_path)
        if kind is None:
            logger.debug("Ignoring excluded path %s", source_path)
            return

        if kind is FileKind.MARKDOWN:
            dependents = self.state.dependents_of(source_path)
            released: list[Path] = []
            if dependents:
                logger.info(
                    "%s is included by %d file(s), re-transforming them",
                    source_path,
                    len(dependents),
                )
                for parent in dependents:
                    if parent.exists():
                        released += self.state.forget_includes_of(parent)
                        self.engine.transform_markdown(parent, self.state)
            else:
                released = self.state.forget_includes_of(source_path)
                self.engine.transform_markdown(source_path, self.state)
            self.engine.purge_included(self.state)
            self._publish_released(released)
        elif kind is FileKind.HTML:
            self.engine.transform_html(source_path, self.state)
        else:
            self.engine.copy_passthrough(source_path, self.state)

    def _publish_released(self, released: list[Path]) -> None:
        """Publish files that stopped being included as standalone pages."""
        for included in dict.fromkeys(released):
            if self.state.dependents_of(included) or not included.exists():
                continue
            logger.info("%s is no longer included, publishing it", included)
            self.engine.transform_path(included, self.state)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Watch the source root until interrupted."""
        source_root = self.engine.config.source_root
        logger.info("Watching %s for changes. Press Ctrl+C to stop.", source_root)

        try:
            for changes in fs_watch(source_root):
                for event in self.translate(changes):
                    try:
                        self.handle(event)
                    except Exception:
                        logger.exception(
                            "Failed to handle %s event for %s",
                            event.kind.value,
                            event.path,
                        )
        except KeyboardInterrupt:
            logger.info("Watch stopped.")
