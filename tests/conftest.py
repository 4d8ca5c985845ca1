"""Shared pytest fixtures for docs-sync tests."""

from pathlib import Path

import pytest

from docs_sync.config import Config

_DOCS_SYNC_ENV = (
    "DOCS_SYNC_SOURCE_ROOT",
    "DOCS_SYNC_DESTINATION_ROOT",
    "DOCS_SYNC_RELEASE_VERSION",
    "DOCS_SYNC_CDN_URL",
    "DOCS_SYNC_NO_HEADER",
    "DOCS_SYNC_DEBUG",
    "DOCS_SYNC_CONFIG",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep developer environment variables out of every test."""
    for key in _DOCS_SYNC_ENV:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def docs_tree(tmp_path, monkeypatch):
    """A project directory with an empty ``src/docs`` tree, used as CWD.

    Paths in configs built from it are relative, as in a real run from the
    repository root.
    """
    (tmp_path / "src" / "docs").mkdir(parents=True)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_source(docs_tree):
    """Factory fixture writing a file under ``src/docs``."""

    def _write(rel: str, content: str | bytes) -> Path:
        path = Path("src/docs") / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_config(docs_tree):
    """Factory fixture for a Config rooted at the ``docs_tree`` project."""

    def _make(**overrides) -> Config:
        values = {
            "source_root": Path("src/docs"),
            "destination_root": Path("docs"),
            "release_version": "10.2.4",
        }
        values.update(overrides)
        return Config(**values)

    return _make
