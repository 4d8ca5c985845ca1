"""Content transforms applied to documentation sources before publishing."""

from .blocks import BlockTransformer, transform_markdown_text
from .common import CalloutKind, CalloutStyle, DiagramAlias, FileKind
from .formatter import Formatter, format_content
from .frontmatter import join_frontmatter, split_frontmatter
from .header import annotate_html, generate_header, plain_notice, prepend_header
from .includes import INCLUDE_RE, resolve_includes
from .placeholders import inject_placeholders, major_version

__all__ = [
    "BlockTransformer",
    "CalloutKind",
    "CalloutStyle",
    "DiagramAlias",
    "FileKind",
    "Formatter",
    "INCLUDE_RE",
    "annotate_html",
    "format_content",
    "join_frontmatter",
    "generate_header",
    "inject_placeholders",
    "major_version",
    "plain_notice",
    "prepend_header",
    "resolve_includes",
    "split_frontmatter",
    "transform_markdown_text",
]
