"""Transform-and-sync engine for the published documentation tree.

Public API for publishing an authored documentation tree (source root)
into the tree a site is built from (destination root).

Architecture
------------
Every run re-reads and re-transforms the source files and compares the
result byte for byte with what is already published; only files that
differ are written.  Run-scoped bookkeeping (changed files, include
targets, include dependents) lives in an explicit ``RunState``.

Modules:

- ``engine``    -- ``SyncEngine``: per-file transforms, diff-and-write,
  batch driver, ``git add`` staging.
- ``mapper``    -- ``PathMapper``: source-to-destination mapping and file
  discovery.
- ``models``    -- ``RunState``, ``WatchEvent``, ``SyncReport``: core data
  contracts.
- ``watcher``   -- ``WatchCoordinator``: filesystem events to sync
  operations.
- ``reporter``  -- Human-readable and JSON report formatting.

Usage example
-------------
::

    from docs_sync.config import load_config
    from docs_sync.sync import SyncEngine, format_sync_report

    config = load_config(verify=True)
    engine = SyncEngine(config)

    report = engine.run()
    print(format_sync_report(report))
    raise SystemExit(report.exit_code)
"""

from .engine import NEW_FILE_SENTINEL, SyncEngine
from .mapper import PathMapper
from .models import RunState, SyncReport, WatchEvent, WatchEventKind
from .reporter import format_sync_report, format_verify_failure, report_to_json
from .watcher import WatchCoordinator

__all__ = [
    "NEW_FILE_SENTINEL",
    "PathMapper",
    "RunState",
    "SyncEngine",
    "SyncReport",
    "WatchCoordinator",
    "WatchEvent",
    "WatchEventKind",
    "format_sync_report",
    "format_verify_failure",
    "report_to_json",
]
