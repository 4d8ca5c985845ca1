"""
YAML config files for docs-sync.

A config file has two optional sections, ``docs`` (tree locations,
substitutions, exclusion lists) and ``logging`` (level, file).  Files are
looked up in this order, first wins per key:

    $DOCS_SYNC_CONFIG > ./.docs_sync/config.yml|yaml > ~/.config/docs_sync/config.yml

String values may reference the environment as ``${VAR}`` or
``${VAR:-fallback}``.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DOCS_SYNC_CONFIG"
PROJECT_CONFIG_DIR = ".docs_sync"
SECTIONS = ("docs", "logging")

_ENV_REF = re.compile(r"\$\{(?P<name>[^}:]+?)(?::-(?P<fallback>.*?))?\}")


def expand_env(value: Any) -> Any:
    """Substitute ``${VAR}`` references in every string of *value*.

    An unset or empty variable takes the ``:-`` fallback, or ``""``
    without one.  Dicts and lists are walked; other values pass through.
    """
    if isinstance(value, str):
        return _ENV_REF.sub(
            lambda m: os.environ.get(m["name"]) or (m["fallback"] or ""), value
        )
    if isinstance(value, dict):
        return {key: expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    return value


def project_config_path() -> Path:
    """Default location of the project config file."""
    return Path.cwd() / PROJECT_CONFIG_DIR / "config.yml"


def _candidate_paths() -> list[Path]:
    candidates: list[Path] = []
    explicit = os.environ.get(CONFIG_ENV_VAR)
    if explicit:
        candidates.append(Path(explicit).expanduser().resolve())
    project = project_config_path()
    candidates += [project, project.with_suffix(".yaml")]
    candidates.append(Path.home() / ".config" / "docs_sync" / "config.yml")
    return candidates


def discover_config_files() -> list[Path]:
    """Return the config files that exist, highest precedence first."""
    return [path for path in _candidate_paths() if path.is_file()]


def read_config_file(path: Path) -> dict[str, dict]:
    """Read the known sections of one config file.

    An empty file, or one whose root is not a mapping, contributes
    nothing.  Unknown sections are reported and ignored.

    Raises:
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If a known section is not a mapping.
    """
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Ignoring %s: expected a mapping, got %s", path, type(data).__name__
        )
        return {}

    sections: dict[str, dict] = {}
    for name, values in data.items():
        if name not in SECTIONS:
            logger.warning("Ignoring unknown section %r in %s", name, path)
            continue
        if values is None:
            continue
        if not isinstance(values, dict):
            raise ValueError(f"{path}: section {name!r} must be a mapping")
        sections[name] = values
    return sections


def load_hierarchical_config() -> dict[str, dict]:
    """Merge every discovered config file into one ``{section: values}`` dict.

    Keys are merged within each section, so a project file that only sets
    ``docs.source_root`` keeps the global ``docs.destination_root``.
    ``${VAR}`` references are expanded after the merge.

    Returns:
        The merged sections; empty when no config file exists.
    """
    paths = discover_config_files()
    if not paths:
        logger.debug("No config file found, using defaults")
        return {}

    merged: dict[str, dict] = {}
    for path in reversed(paths):
        logger.debug("Reading config %s", path)
        for section, values in read_config_file(path).items():
            merged.setdefault(section, {}).update(values)
    return expand_env(merged)


_STARTER_CONFIG = """\
# docs-sync configuration
#
# Environment variables override these values:
#   DOCS_SYNC_SOURCE_ROOT, DOCS_SYNC_DESTINATION_ROOT,
#   DOCS_SYNC_RELEASE_VERSION, DOCS_SYNC_CDN_URL, DOCS_SYNC_NO_HEADER
#
# docs:
#   source_root: src/docs
#   destination_root: docs
#   alternate_destination_root: src/vitepress
#   repository_root: .
#   version_file: package.json
#   cdn_url: https://cdn.jsdelivr.net/npm
#   exclude:
#     - "**/dist/**"
#     - "**/node_modules/**"
#
# logging:
#   level: INFO
#   file: null
"""


def ensure_config(target: Path | None = None) -> Path:
    """Return the active config file, writing a starter one if there is none.

    The starter file is entirely commented out, so creating it does not
    change any setting.

    Args:
        target: Where to write the starter file.  Defaults to
            ``./.docs_sync/config.yml``.
    """
    existing = discover_config_files()
    if existing:
        logger.debug("Config file already exists: %s", existing[0])
        return existing[0]

    path = target or project_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(_STARTER_CONFIG, encoding="utf-8")
    logger.info("Created starter config: %s", path)
    return path
