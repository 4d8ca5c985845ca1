"""Canonical output formatting applied before content is compared.

The sync engine accepts any callable with the ``Formatter`` signature, so a
project can plug in a stricter formatter.  The default only normalizes what
the transforms themselves can make inconsistent: line endings and the
trailing newline.  Line content is never touched, so code blocks survive
byte for byte.
"""

from __future__ import annotations

from typing import Callable

from .common import FileKind

Formatter = Callable[[str, FileKind], str]


def format_content(text: str, kind: FileKind) -> str:
    """Normalize line endings and end the text with exactly one newline.

    Examples:
        >>> format_content("a\\r\\nb\\n\\n\\n", FileKind.MARKDOWN)
        'a\\nb\\n'
        >>> format_content("", FileKind.HTML)
        ''
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    stripped = text.rstrip("\n")
    if not stripped:
        return ""
    return stripped + "\n"
