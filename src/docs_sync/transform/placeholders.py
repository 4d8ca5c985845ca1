"""Build-time placeholder substitution."""

import json
from pathlib import Path

DEFAULT_VERSION_TOKEN = "<MERMAID_VERSION>"
DEFAULT_CDN_TOKEN = "<CDN_URL>"


def inject_placeholders(
    text: str,
    major_version: str,
    cdn_url: str,
    *,
    version_token: str = DEFAULT_VERSION_TOKEN,
    cdn_token: str = DEFAULT_CDN_TOKEN,
) -> str:
    """Replace every version token and every CDN token in *text*.

    Examples:
        >>> inject_placeholders("v<MERMAID_VERSION>", "10", "https://cdn")
        'v10'
    """
    return text.replace(version_token, major_version).replace(
        cdn_token, cdn_url
    )


def major_version(release_version: str) -> str:
    """Return the first dot-separated component of a release version."""
    return release_version.strip().split(".")[0]


def read_release_version(version_file: Path) -> str:
    """Read the ``version`` field of a ``package.json``-style file.

    Raises:
        ValueError: If the file has no string ``version`` field.
    """
    with open(version_file, encoding="utf-8") as fh:
        data = json.load(fh)
    version = data.get("version") if isinstance(data, dict) else None
    if not isinstance(version, str) or not version:
        raise ValueError(f"No version field in {version_file}")
    return version
