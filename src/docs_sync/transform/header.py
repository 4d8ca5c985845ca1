"""Provenance notices for published files.

Markdown files get a blockquote prepended that points back to the source
file.  HTML files get the same notice as a comment inside the root element.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePath

from lxml import etree, html

from .frontmatter import join_frontmatter, split_frontmatter

logger = logging.getLogger(__name__)

AUTOGENERATED_NOTICE = "THIS IS AN AUTOGENERATED FILE. DO NOT EDIT."


def _posix(path: str) -> str:
    return PurePath(path).as_posix()


def source_from_repository(source_path: Path, repository_root: Path) -> str:
    """Return the source path relative to the repository root, with a leading ``/``."""
    rel = os.path.relpath(os.path.abspath(source_path), os.path.abspath(repository_root))
    return "/" + _posix(rel)


def source_from_destination(source_path: Path, destination_path: Path) -> str:
    """Return the path from the destination's directory back to the source file."""
    rel = os.path.relpath(
        os.path.abspath(source_path),
        os.path.dirname(os.path.abspath(destination_path)),
    )
    return _posix(rel)


def generate_header(
    source_path: Path, destination_path: Path, repository_root: Path
) -> str:
    """Build the markdown provenance header for a published file.

    Args:
        source_path: Authored source file.
        destination_path: Where the transformed file is published.
        repository_root: Root the displayed source path is relative to.

    Returns:
        A warning blockquote, without trailing blank line.
    """
    shown = source_from_repository(source_path, repository_root)
    link = source_from_destination(source_path, destination_path)
    return (
        "> **Warning**\n"
        ">\n"
        f"> ## {AUTOGENERATED_NOTICE}\n"
        ">\n"
        f"> ## Please edit the corresponding file in [{shown}]({link})."
    )


def plain_notice(source_path: Path, repository_root: Path) -> str:
    """Plain-text notice used inside HTML comments."""
    shown = source_from_repository(source_path, repository_root)
    notice = (
        f" {AUTOGENERATED_NOTICE} "
        f"Please edit the corresponding file in {shown}. "
    )
    # "--" may not appear inside an HTML comment
    while "--" in notice:
        notice = notice.replace("--", "-")
    return notice


def prepend_header(header: str, body: str) -> str:
    """Place *header* and a blank line before a markdown *body*.

    Frontmatter stays first, so the header goes right after it.
    """
    frontmatter, rest = split_frontmatter(body)
    rest = rest.lstrip("\n")
    return join_frontmatter(frontmatter, f"{header}\n\n{rest}")


def annotate_html(text: str, notice: str) -> str:
    """Insert *notice* as a comment at the start of the root element.

    The document is parsed with ``lxml.html`` and re-serialized, doctype
    included.  An empty document is returned unchanged.
    """
    if not text.strip():
        logger.debug("Empty HTML document, no notice inserted")
        return text

    root = html.document_fromstring(text)
    root.insert(0, etree.Comment(notice))
    return html.tostring(root.getroottree(), encoding="unicode")
