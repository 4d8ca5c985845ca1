"""Leading YAML frontmatter handling.

Frontmatter is site-generator metadata, not markdown: the parser would read
its fences as a thematic break and a setext heading.  It is split off before
parsing and kept as the first thing in the published file.
"""

from __future__ import annotations

import re

FRONTMATTER_RE = re.compile(r"\A---\n.*?\n---\n", re.DOTALL)


def split_frontmatter(text: str) -> tuple[str, str]:
    """Split *text* into ``(frontmatter, body)``.

    The frontmatter includes both ``---`` fences and the newline after the
    closing one.  It is ``""`` when *text* does not start with a block.

    Examples:
        >>> split_frontmatter("---\\ntitle: A\\n---\\n\\n# A\\n")
        ('---\\ntitle: A\\n---\\n', '\\n# A\\n')
        >>> split_frontmatter("# A\\n")
        ('', '# A\\n')
    """
    m = FRONTMATTER_RE.match(text)
    if m is None:
        return "", text
    return text[: m.end()], text[m.end() :]


def join_frontmatter(frontmatter: str, body: str) -> str:
    """Place *frontmatter* back in front of *body*, one blank line apart."""
    if not frontmatter:
        return body
    body = body.lstrip("\n")
    if not body:
        return frontmatter
    return f"{frontmatter}\n{body}"
