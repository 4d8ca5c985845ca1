"""Sync report formatting functions.

Provides human-readable and machine-readable output for sync runs:

- ``format_sync_report`` -- post-run summary.
- ``format_verify_failure`` -- instruction printed when verification fails.
- ``report_to_json`` -- structured dict for ``--json`` style consumers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docs_sync.transform.common import FileKind

if TYPE_CHECKING:
    from .models import SyncReport

# ------------------------------------------------------------------
# Human-readable report
# ------------------------------------------------------------------


def format_sync_report(report: SyncReport) -> str:
    """Format a sync report as human-readable text.

    Sections are only included when they contain at least one path.

    Args:
        report: The completed sync report.

    Returns:
        Multi-line formatted string.
    """
    lines: list[str] = []

    mode = "Verify" if report.verify_only else "Sync"
    lines.append(f"{mode} report for {report.source_root} -> {report.destination_root}")
    lines.append(f"Started: {report.started_at}")
    if report.completed_at:
        lines.append(f"Completed: {report.completed_at}")
    lines.append("")

    lines.append(
        f"Processed {sum(report.counts.values())} files: "
        f"{report.counts.get(FileKind.MARKDOWN, 0)} markdown, "
        f"{report.counts.get(FileKind.HTML, 0)} html, "
        f"{report.counts.get(FileKind.OTHER, 0)} other"
    )
    lines.append("")

    if report.changed:
        label = "Out of date:" if report.verify_only else "Updated:"
        lines.append(label)
        for path in report.changed:
            lines.append(f"  {path}")
        lines.append("")
    else:
        lines.append("No changes needed.")
        lines.append("")

    if report.removed_includes:
        lines.append("Removed include targets:")
        for path in report.removed_includes:
            lines.append(f"  {path}")
        lines.append("")

    if report.staged:
        lines.append(f"Staged {report.destination_root} with git add")
        lines.append("")

    return "\n".join(lines).rstrip()


def format_verify_failure(source_root: str, destination_root: str) -> str:
    """Return the instruction shown when verification finds stale files."""
    return (
        f"Changed files were transformed in {source_root} but do not match "
        f"the files in {destination_root}.\n"
        f"Please run 'docs-sync' (without --verify) after making changes to "
        f"{source_root} to update the {destination_root} directory with the "
        f"transformed files."
    )


# ------------------------------------------------------------------
# JSON output
# ------------------------------------------------------------------


def report_to_json(report: SyncReport) -> dict:
    """Convert a sync report to a structured dict for JSON serialisation.

    Args:
        report: The sync report.

    Returns:
        Dict with run info, counts, and changed paths.
    """
    return {
        "verify_only": report.verify_only,
        "source_root": report.source_root,
        "destination_root": report.destination_root,
        "started_at": report.started_at,
        "completed_at": report.completed_at,
        "counts": {kind.value: count for kind, count in report.counts.items()},
        "changed": list(report.changed),
        "removed_includes": list(report.removed_includes),
        "staged": report.staged,
        "exit_code": report.exit_code,
    }
