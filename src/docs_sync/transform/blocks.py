"""Structural rewriting of fenced code blocks using the mistune AST."""

from __future__ import annotations

import copy
import logging
from typing import Any

import mistune
from mistune.renderers.markdown import MarkdownRenderer

from .common import CalloutKind, CalloutStyle, DiagramAlias
from .frontmatter import join_frontmatter, split_frontmatter

logger = logging.getLogger(__name__)

Token = dict[str, Any]

# Block tokens whose children can hold a fenced code block.
_CONTAINER_TYPES = frozenset(
    {"block_quote", "list", "list_item", "task_list_item"}
)


def _create_parser() -> mistune.Markdown:
    return mistune.create_markdown(renderer=None, plugins=["table"])


def split_info(token: Token) -> tuple[str | None, str]:
    """Split a fence info string into ``(language, meta)``.

    Examples:
        ```mermaid Flowchart  ->  ("mermaid", "Flowchart")
        ```                   ->  (None, "")
    """
    info = (token.get("attrs") or {}).get("info", "").strip()
    if not info:
        return None, ""
    lang, _, meta = info.partition(" ")
    return lang, meta.strip()


def _retag(token: Token, lang: str, meta: str) -> Token:
    tagged = copy.deepcopy(token)
    tagged["attrs"] = {"info": f"{lang} {meta}".strip()}
    return tagged


# ----------------------------------------------------------------------
# Callout text
# ----------------------------------------------------------------------


def callout_blockquote(kind: CalloutKind, content: str, caption: str = "") -> str:
    """Render a callout as a blockquote with a bold title line.

    >>> callout_blockquote(CalloutKind.TIP, "Hello")
    '> **💡 Tip** \\n> Hello'
    """
    body = content.replace("\n", "\n> ")
    return f"> **{kind.title(caption or None)}** \n> {body}"


def callout_admonition(kind: CalloutKind, content: str, caption: str = "") -> str:
    """Render a callout as a ``:::`` container block."""
    opening = f"::: {kind.admonition_name} {caption}".rstrip()
    return f"{opening}\n{content}\n:::"


# ----------------------------------------------------------------------
# Engine
# ----------------------------------------------------------------------


class BlockTransformer:
    """Rewrite diagram and callout code blocks in a markdown document.

    Each fenced block becomes zero or more replacement tokens:

    - diagram aliases are emitted twice, a copy tagged for rendering
      followed by a copy tagged as source;
    - callout tags are rewritten into a blockquote or admonition, parsed
      with the same parser and spliced in;
    - any other block is kept as is.

    Args:
        callout_style: Markup callouts are rewritten into.
    """

    def __init__(self, callout_style: CalloutStyle = CalloutStyle.BLOCKQUOTE):
        self.callout_style = callout_style
        self._markdown = _create_parser()
        self._renderer = MarkdownRenderer()

    def transform(self, text: str) -> str:
        """Parse *text*, rewrite its code blocks and serialize it back.

        Leading frontmatter is not parsed; it is kept verbatim at the top.
        """
        frontmatter, body = split_frontmatter(text)
        if frontmatter and not body.strip():
            return frontmatter
        tokens, state = self._markdown.parse(body)
        tokens = self.transform_tokens(tokens)
        return join_frontmatter(frontmatter, self._renderer(tokens, state))

    def transform_tokens(self, tokens: list[Token]) -> list[Token]:
        """Return a new token list with every code block replaced.

        Container tokens are rewritten in place so nested blocks are
        reached in document order.
        """
        result: list[Token] = []
        for token in tokens:
            if token.get("type") == "block_code":
                result.extend(self.transform_code_block(token))
                continue
            if token.get("type") in _CONTAINER_TYPES and "children" in token:
                token["children"] = self.transform_tokens(token["children"])
            result.append(token)
        return result

    def transform_code_block(self, token: Token) -> list[Token]:
        lang, meta = split_info(token)

        alias = DiagramAlias.from_tag(lang)
        if alias is not None:
            return [
                _retag(token, alias.render_tag, meta),
                _retag(token, alias.source_tag, meta),
            ]

        kind = CalloutKind.from_tag(lang)
        if kind is not None:
            content = token.get("raw", "").rstrip("\n")
            if self.callout_style is CalloutStyle.ADMONITION:
                replacement = callout_admonition(kind, content, meta)
            else:
                replacement = callout_blockquote(kind, content, meta)
            logger.debug("Rewrote %s block as %s", kind.value, self.callout_style.value)
            spliced, _ = self._markdown.parse(replacement)
            return [t for t in spliced if t.get("type") != "blank_line"]

        return [token]


def transform_markdown_text(
    text: str, callout_style: CalloutStyle = CalloutStyle.BLOCKQUOTE
) -> str:
    """Rewrite diagram and callout code blocks in *text*.

    Args:
        text: Markdown document.
        callout_style: Markup callouts are rewritten into.

    Returns:
        The re-serialized document.
    """
    return BlockTransformer(callout_style).transform(text)
