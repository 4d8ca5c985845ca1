"""Runtime configuration for the docs sync command.

Reads tree locations and build-time substitutions from CLI flags,
environment variables, .env files, and YAML config file fallbacks, and
derives the build-mode policy (destination, header, callout style,
exclusions, entry-file skip) from the selected mode.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    DOCS_SYNC_SOURCE_ROOT: Authored documentation tree (default: src/docs)
    DOCS_SYNC_DESTINATION_ROOT: Published documentation tree (default: docs)
    DOCS_SYNC_RELEASE_VERSION: Release version for the version token
    DOCS_SYNC_CDN_URL: Base URL for the CDN token
    DOCS_SYNC_NO_HEADER: Disable the provenance header (optional, default: false)
    DOCS_SYNC_DEBUG: Enable debug logging (optional, default: false)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from docs_sync.config_schema import DEFAULT_EXCLUDE, DEFAULT_STANDARD_EXCLUDE
from docs_sync.transform.common import CalloutStyle
from docs_sync.transform.placeholders import (
    DEFAULT_CDN_TOKEN,
    DEFAULT_VERSION_TOKEN,
    major_version,
    read_release_version,
)

logger = logging.getLogger(__name__)


@dataclass
class Config:
    source_root: Path
    destination_root: Path
    alternate_destination_root: Path = Path("src/vitepress")
    repository_root: Path = Path(".")
    release_version: str = "0.0.0"
    cdn_url: str = "https://cdn.jsdelivr.net/npm"
    version_token: str = DEFAULT_VERSION_TOKEN
    cdn_token: str = DEFAULT_CDN_TOKEN
    entry_file: str = "index.md"
    header: bool = True
    verify: bool = False
    git: bool = False
    watch: bool = False
    vitepress: bool = False
    debug: bool = False
    exclude: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    standard_exclude: list[str] = field(
        default_factory=lambda: list(DEFAULT_STANDARD_EXCLUDE)
    )

    # ------------------------------------------------------------------
    # Build-mode policy
    # ------------------------------------------------------------------

    @property
    def active_destination_root(self) -> Path:
        """Destination tree for the selected output mode."""
        if self.vitepress:
            return self.alternate_destination_root
        return self.destination_root

    @property
    def emit_header(self) -> bool:
        return self.header and not self.vitepress

    @property
    def callout_style(self) -> CalloutStyle:
        if self.vitepress:
            return CalloutStyle.ADMONITION
        return CalloutStyle.BLOCKQUOTE

    @property
    def exclude_patterns(self) -> list[str]:
        """Discovery exclusions; the standard set only applies outside
        alternate output mode."""
        if self.vitepress:
            return list(self.exclude)
        return [*self.exclude, *self.standard_exclude]

    @property
    def major_version(self) -> str:
        return major_version(self.release_version)

    def should_skip_transform(self, path: Path) -> bool:
        """Return ``True`` when *path* is published without block transforms
        or header (the entry page in alternate output mode)."""
        if not self.vitepress:
            return False
        entry = self.source_root / self.entry_file
        return Path(path).resolve() == entry.resolve()


def validate_config(config: Config) -> None:
    """Validate configuration values and raise ValueError if invalid.

    Args:
        config: Config instance to validate.

    Raises:
        ValueError: If the source tree is missing, the version is empty, or
            source and destination are the same tree.
    """
    config.release_version = config.release_version.strip()
    if not config.release_version:
        raise ValueError(
            "Release version cannot be empty. Set DOCS_SYNC_RELEASE_VERSION "
            "or add 'release_version' to the docs section of config.yml."
        )

    if not config.source_root.is_dir():
        raise ValueError(
            f"Source root '{config.source_root}' is not a directory. Set "
            "DOCS_SYNC_SOURCE_ROOT or add 'source_root' to config.yml."
        )

    if config.source_root.resolve() == config.active_destination_root.resolve():
        raise ValueError(
            f"Source root and destination root are the same: '{config.source_root}'"
        )

    # Strip trailing slash so "<CDN_URL>/pkg" stays well-formed
    config.cdn_url = config.cdn_url.strip().removesuffix("/")


def load_config(
    verify: bool = False,
    git: bool = False,
    watch: bool = False,
    vitepress: bool = False,
    no_header: bool = False,
    debug: bool = False,
    source_root: str | None = None,
    destination_root: str | None = None,
    yaml_fallbacks: dict | None = None,
) -> Config:
    """Load configuration with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        verify: Compare only, write nothing (CLI flag).
        git: Stage the destination tree after changes (CLI flag).
        watch: Keep syncing on filesystem events (CLI flag).
        vitepress: Alternate output mode (CLI flag).
        no_header: Disable the provenance header (CLI flag).
        debug: Enable debug logging (CLI flag).
        source_root: Override the source tree.
        destination_root: Override the destination tree.
        yaml_fallbacks: Dict of values from the YAML ``docs`` section.

    Returns:
        Validated Config instance.

    Raises:
        ValueError: If a value is invalid after checking all sources, or
            the configured version file cannot be read.
    """
    fb = yaml_fallbacks or {}

    # --- Path fields: CLI > env > YAML > default ---

    final_source = (
        source_root
        or os.getenv("DOCS_SYNC_SOURCE_ROOT")
        or fb.get("source_root")
        or "src/docs"
    )
    final_destination = (
        destination_root
        or os.getenv("DOCS_SYNC_DESTINATION_ROOT")
        or fb.get("destination_root")
        or "docs"
    )

    # --- Substitutions: env > version file > YAML > default ---

    release_version = os.getenv("DOCS_SYNC_RELEASE_VERSION")
    if not release_version and fb.get("version_file"):
        try:
            release_version = read_release_version(Path(fb["version_file"]))
        except (OSError, ValueError) as exc:
            raise ValueError(
                f"Cannot read release version from '{fb['version_file']}': {exc}"
            ) from exc
    if not release_version:
        release_version = fb.get("release_version") or "0.0.0"

    cdn_url = (
        os.getenv("DOCS_SYNC_CDN_URL")
        or fb.get("cdn_url")
        or "https://cdn.jsdelivr.net/npm"
    )

    # --- Boolean fields: CLI > env > YAML > default ---

    def get_bool_env(key: str) -> bool | None:
        """Return True/False from env var, or None if unset."""
        val = os.getenv(key)
        if val is None:
            return None
        return val.lower() in ("true", "1", "yes", "on")

    if no_header:
        final_header = False
    else:
        env_no_header = get_bool_env("DOCS_SYNC_NO_HEADER")
        if env_no_header is not None:
            final_header = not env_no_header
        else:
            final_header = bool(fb.get("emit_header", True))

    if debug:
        final_debug = True
    else:
        final_debug = bool(get_bool_env("DOCS_SYNC_DEBUG"))

    config = Config(
        source_root=Path(final_source),
        destination_root=Path(final_destination),
        alternate_destination_root=Path(
            fb.get("alternate_destination_root") or "src/vitepress"
        ),
        repository_root=Path(fb.get("repository_root") or "."),
        release_version=str(release_version),
        cdn_url=cdn_url,
        version_token=fb.get("version_token") or DEFAULT_VERSION_TOKEN,
        cdn_token=fb.get("cdn_token") or DEFAULT_CDN_TOKEN,
        entry_file=fb.get("entry_file") or "index.md",
        header=final_header,
        verify=verify,
        git=git,
        watch=watch,
        vitepress=vitepress,
        debug=final_debug,
        exclude=list(fb.get("exclude", DEFAULT_EXCLUDE)),
        standard_exclude=list(fb.get("standard_exclude", DEFAULT_STANDARD_EXCLUDE)),
    )

    validate_config(config)

    return config
