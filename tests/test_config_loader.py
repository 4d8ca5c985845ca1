"""Tests for docs_sync.config_loader: config file discovery and merging."""

import textwrap
from pathlib import Path

import pytest
import yaml

from docs_sync.config_loader import (
    discover_config_files,
    ensure_config,
    expand_env,
    load_hierarchical_config,
    read_config_file,
)


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """CWD and HOME both point into tmp_path; no config exists yet."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return tmp_path


def _project_config(root: Path, text: str, name: str = "config.yml") -> Path:
    path = root / ".docs_sync" / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text))
    return path


def _global_config(root: Path, text: str) -> Path:
    path = root / "home" / ".config" / "docs_sync" / "config.yml"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text))
    return path


# -------------------------------------------------------------------------
# ${VAR} expansion
# -------------------------------------------------------------------------


class TestExpandEnv:
    def test_set_variable(self, monkeypatch):
        monkeypatch.setenv("DOCS_ROOT", "site/docs")
        assert expand_env("${DOCS_ROOT}") == "site/docs"

    def test_unset_variable_is_empty(self, monkeypatch):
        monkeypatch.delenv("DOCS_SYNC_UNSET", raising=False)
        assert expand_env("v${DOCS_SYNC_UNSET}") == "v"

    def test_fallback_for_unset_or_empty(self, monkeypatch):
        monkeypatch.delenv("DOCS_SYNC_UNSET", raising=False)
        monkeypatch.setenv("DOCS_SYNC_EMPTY", "")
        assert expand_env("${DOCS_SYNC_UNSET:-11.0.0}") == "11.0.0"
        assert expand_env("${DOCS_SYNC_EMPTY:-11.0.0}") == "11.0.0"

    def test_fallback_ignored_when_set(self, monkeypatch):
        monkeypatch.setenv("RELEASE", "10.9.1")
        assert expand_env("${RELEASE:-11.0.0}") == "10.9.1"

    def test_unclosed_reference_kept(self):
        assert expand_env("${NO_CLOSE") == "${NO_CLOSE"

    def test_walks_sections(self, monkeypatch):
        monkeypatch.setenv("CDN", "https://cdn.example.com")
        data = {"docs": {"cdn_url": "${CDN}", "exclude": ["${CDN}/x", 3], "flag": True}}
        assert expand_env(data) == {
            "docs": {
                "cdn_url": "https://cdn.example.com",
                "exclude": ["https://cdn.example.com/x", 3],
                "flag": True,
            }
        }


# -------------------------------------------------------------------------
# Reading one file
# -------------------------------------------------------------------------


class TestReadConfigFile:
    def test_sections(self, tmp_path):
        path = tmp_path / "c.yml"
        path.write_text("docs:\n  source_root: src/docs\nlogging:\n  level: DEBUG\n")
        assert read_config_file(path) == {
            "docs": {"source_root": "src/docs"},
            "logging": {"level": "DEBUG"},
        }

    def test_empty_file(self, tmp_path):
        path = tmp_path / "c.yml"
        path.write_text("# nothing yet\n")
        assert read_config_file(path) == {}

    def test_non_mapping_root_ignored(self, tmp_path, caplog):
        path = tmp_path / "c.yml"
        path.write_text("- item1\n- item2\n")
        assert read_config_file(path) == {}
        assert "expected a mapping" in caplog.text

    def test_unknown_section_ignored(self, tmp_path, caplog):
        path = tmp_path / "c.yml"
        path.write_text("trac:\n  url: x\ndocs:\n  destination_root: site\n")
        assert read_config_file(path) == {"docs": {"destination_root": "site"}}
        assert "unknown section 'trac'" in caplog.text

    def test_empty_section_skipped(self, tmp_path):
        path = tmp_path / "c.yml"
        path.write_text("docs:\nlogging:\n  level: INFO\n")
        assert read_config_file(path) == {"logging": {"level": "INFO"}}

    def test_non_mapping_section_rejected(self, tmp_path):
        path = tmp_path / "c.yml"
        path.write_text("docs: [src/docs]\n")
        with pytest.raises(ValueError, match="'docs' must be a mapping"):
            read_config_file(path)

    def test_python_tags_rejected(self, tmp_path):
        """The safe loader refuses arbitrary Python object tags."""
        path = tmp_path / "c.yml"
        path.write_text("docs: !!python/object/apply:os.system ['true']\n")
        with pytest.raises(yaml.YAMLError):
            read_config_file(path)


# -------------------------------------------------------------------------
# Discovery
# -------------------------------------------------------------------------


class TestDiscoverConfigFiles:
    def test_env_var_takes_highest_precedence(self, isolated, monkeypatch):
        custom = isolated / "custom.yml"
        custom.write_text("docs: {}\n")
        project = _project_config(isolated, "docs: {}\n")
        monkeypatch.setenv("DOCS_SYNC_CONFIG", str(custom))

        result = discover_config_files()
        assert result[0] == custom.resolve()
        assert project in result

    def test_project_before_global(self, isolated):
        project = _project_config(isolated, "docs: {}\n")
        global_cfg = _global_config(isolated, "docs: {}\n")

        result = discover_config_files()
        assert result.index(project) < result.index(global_cfg)

    def test_yaml_extension_discovered(self, isolated):
        alt = _project_config(isolated, "docs: {}\n", name="config.yaml")
        assert discover_config_files() == [alt]

    def test_missing_files_excluded(self, isolated, monkeypatch):
        monkeypatch.setenv("DOCS_SYNC_CONFIG", str(isolated / "missing.yml"))
        assert discover_config_files() == []

    def test_directory_not_a_config_file(self, isolated):
        (isolated / ".docs_sync" / "config.yml").mkdir(parents=True)
        assert discover_config_files() == []


# -------------------------------------------------------------------------
# Merging
# -------------------------------------------------------------------------


class TestLoadHierarchicalConfig:
    def test_zero_config_returns_empty_dict(self, isolated):
        assert load_hierarchical_config() == {}

    def test_project_keys_win_within_section(self, isolated):
        _global_config(
            isolated,
            """\
            docs:
              source_root: global/docs
              destination_root: global/out
            logging:
              level: WARNING
            """,
        )
        _project_config(
            isolated,
            """\
            docs:
              source_root: project/docs
            """,
        )

        result = load_hierarchical_config()
        assert result["docs"] == {
            "source_root": "project/docs",
            "destination_root": "global/out",
        }
        assert result["logging"] == {"level": "WARNING"}

    def test_explicit_file_beats_project(self, isolated, monkeypatch):
        _project_config(isolated, "docs:\n  destination_root: site\n")
        custom = isolated / "ci.yml"
        custom.write_text("docs:\n  destination_root: ci-site\n")
        monkeypatch.setenv("DOCS_SYNC_CONFIG", str(custom))

        assert load_hierarchical_config()["docs"]["destination_root"] == "ci-site"

    def test_env_expanded_after_merge(self, isolated, monkeypatch):
        monkeypatch.setenv("RELEASE", "11.2.0")
        _project_config(
            isolated,
            """\
            docs:
              release_version: "${RELEASE}"
            """,
        )
        assert load_hierarchical_config()["docs"]["release_version"] == "11.2.0"

    def test_non_mapping_root_contributes_nothing(self, isolated, monkeypatch):
        bad = isolated / "bad.yml"
        bad.write_text("- item1\n- item2\n")
        monkeypatch.setenv("DOCS_SYNC_CONFIG", str(bad))
        assert load_hierarchical_config() == {}

    def test_invalid_yaml_raises(self, isolated):
        _project_config(isolated, "docs: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_hierarchical_config()


# -------------------------------------------------------------------------
# Starter config
# -------------------------------------------------------------------------


class TestEnsureConfig:
    def test_noop_when_exists(self, isolated):
        existing = _project_config(isolated, "docs: {}\n")
        assert ensure_config() == existing
        assert existing.read_text() == "docs: {}\n"

    def test_creates_starter_file(self, isolated):
        path = ensure_config()

        assert path == isolated / ".docs_sync" / "config.yml"
        text = path.read_text()
        assert "source_root" in text
        # Everything is commented out, so the starter config changes nothing
        assert read_config_file(path) == {}

    def test_uses_explicit_target(self, isolated):
        target = isolated / "nested" / "dir" / "docs-sync.yml"
        assert ensure_config(target) == target
        assert target.exists()
