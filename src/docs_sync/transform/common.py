"""Common types for the content transforms."""

from __future__ import annotations

from enum import Enum


class FileKind(str, Enum):
    """How a source file is transformed before it is synced."""

    MARKDOWN = "markdown"
    HTML = "html"
    OTHER = "other"


# =============================================================================
# Diagram code blocks
# =============================================================================
#
# A fenced block tagged with any diagram alias is published twice: once under
# the tag the site renders as a diagram, once under the tag it shows as
# source code.  All aliases collapse to the same two tags.
# =============================================================================

DIAGRAM_RENDER_TAG = "mermaid"
DIAGRAM_SOURCE_TAG = "mermaid-example"


class DiagramAlias(str, Enum):
    """Fence languages recognised as diagram source."""

    MERMAID = "mermaid"
    MMD = "mmd"
    MERMAID_EXAMPLE = "mermaid-example"

    @classmethod
    def from_tag(cls, tag: str | None) -> DiagramAlias | None:
        """Return the alias for a fence language, or ``None``."""
        try:
            return cls(tag)
        except ValueError:
            return None

    @property
    def render_tag(self) -> str:
        return DIAGRAM_RENDER_TAG

    @property
    def source_tag(self) -> str:
        return DIAGRAM_SOURCE_TAG


# =============================================================================
# Callout code blocks
# =============================================================================


class CalloutStyle(str, Enum):
    """Markup a callout is rewritten into.

    ``BLOCKQUOTE`` renders anywhere markdown does; ``ADMONITION`` is the
    ``::: kind`` container syntax understood by the site generator.
    """

    BLOCKQUOTE = "blockquote"
    ADMONITION = "admonition"


# Icon prefixed to the default or custom title, per kind.
_CALLOUT_ICONS: dict[str, str] = {
    "note": "",
    "tip": "💡 ",
    "warning": "",
    "danger": "‼️ ",
}

# Container names differ from fence tags only for notes.
_ADMONITION_NAMES: dict[str, str] = {
    "note": "info",
    "tip": "tip",
    "warning": "warning",
    "danger": "danger",
}


class CalloutKind(str, Enum):
    """Fence languages rewritten into callouts."""

    NOTE = "note"
    TIP = "tip"
    WARNING = "warning"
    DANGER = "danger"

    @classmethod
    def from_tag(cls, tag: str | None) -> CalloutKind | None:
        """Return the callout kind for a fence language, or ``None``."""
        try:
            return cls(tag)
        except ValueError:
            return None

    @property
    def icon(self) -> str:
        return _CALLOUT_ICONS[self.value]

    @property
    def admonition_name(self) -> str:
        return _ADMONITION_NAMES[self.value]

    def title(self, caption: str | None = None) -> str:
        """Title line text: icon followed by the caption or capitalised kind.

        Examples:
            >>> CalloutKind.TIP.title()
            '💡 Tip'
            >>> CalloutKind.WARNING.title("Careful")
            'Careful'
        """
        return f"{self.icon}{caption or self.value.capitalize()}"
