"""Unified configuration schema for docs_sync.

Defines Pydantic models for the unified config structure with dedicated
sections for the docs trees and logging.

Usage:
    from docs_sync.config_schema import UnifiedConfig, build_config

    raw = load_hierarchical_config()
    unified = build_config(raw)
    config = load_config(yaml_fallbacks=unified.docs.model_dump())
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Excluded from discovery in every build mode.
DEFAULT_EXCLUDE: list[str] = [
    "**/dist/**",
    "**/redirect.spec.ts",
    "**/landing/**",
    "**/node_modules/**",
]

# Excluded only outside the alternate (vitepress) output mode: the site
# build config, the site entry page and its supporting files.
DEFAULT_STANDARD_EXCLUDE: list[str] = [
    "**/.vitepress/**",
    "**/vite.config.ts",
    "index.md",
    "**/package.json",
    "**/user-avatars/**",
]


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class DocsConfig(BaseModel):
    """Source and destination trees plus build-time substitutions.

    Paths are relative to the working directory the command runs in.
    """

    source_root: str = Field(
        default="src/docs", description="Authored documentation tree"
    )
    destination_root: str = Field(
        default="docs", description="Published documentation tree"
    )
    alternate_destination_root: str = Field(
        default="src/vitepress",
        description="Destination tree used in alternate output mode",
    )
    repository_root: str = Field(
        default=".",
        description="Root used to display source paths in the provenance header",
    )
    release_version: str = Field(
        default="0.0.0",
        description="Release version; its major component replaces the version token",
    )
    version_file: str | None = Field(
        default=None,
        description="package.json to read the release version from",
    )
    cdn_url: str = Field(
        default="https://cdn.jsdelivr.net/npm",
        description="Base URL that replaces the CDN token",
    )
    version_token: str = Field(default="<MERMAID_VERSION>")
    cdn_token: str = Field(default="<CDN_URL>")
    entry_file: str = Field(
        default="index.md",
        description="Entry page (relative to source_root) copied untransformed "
        "in alternate output mode",
    )
    emit_header: bool = Field(
        default=True, description="Prepend the provenance header"
    )
    exclude: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    standard_exclude: list[str] = Field(
        default_factory=lambda: list(DEFAULT_STANDARD_EXCLUDE)
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level unified config
# ---------------------------------------------------------------------------


class UnifiedConfig(BaseModel):
    """Top-level unified configuration.

    Aggregates all config sections. Every section has sensible defaults,
    so ``UnifiedConfig()`` (zero-config) is always valid.
    """

    docs: DocsConfig = Field(default_factory=DocsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Factory function
# ---------------------------------------------------------------------------


def build_config(raw_data: dict) -> UnifiedConfig:
    """Construct a ``UnifiedConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Missing sections get their defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``UnifiedConfig`` instance.
    """
    if not raw_data:
        return UnifiedConfig()

    return UnifiedConfig(**raw_data)
