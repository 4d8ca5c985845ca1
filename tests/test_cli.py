"""Tests for the docs-sync command line."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from docs_sync import __version__
from docs_sync.cli import (
    EXIT_CONFIG_ERROR,
    EXIT_FAILURE,
    EXIT_OK,
    build_parser,
    main,
    run,
)


@pytest.fixture(autouse=True)
def quiet_cli(docs_tree, monkeypatch):
    """Run every CLI test from the ``docs_tree`` project with no global config."""
    monkeypatch.setenv("HOME", str(docs_tree / "home"))
    with patch("docs_sync.cli.setup_logging") as mock_logging, \
            patch("docs_sync.cli.load_dotenv"):
        yield mock_logging


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.verify is False
        assert args.git is False
        assert args.watch is False
        assert args.vitepress is False
        assert args.no_header is False
        assert args.source is None

    def test_flags(self):
        args = build_parser().parse_args(
            ["--verify", "--git", "--vitepress", "--no-header", "--source", "s"]
        )
        assert (args.verify, args.git, args.vitepress, args.no_header) == (
            True,
            True,
            True,
            True,
        )
        assert args.source == "s"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["--version"])
        assert excinfo.value.code == 0
        assert f"docs-sync version {__version__}" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_sync_writes_destination(self, write_source, docs_tree):
        write_source("intro.md", "# Intro\n")
        assert main([]) == EXIT_OK
        assert (docs_tree / "docs" / "intro.md").exists()

    def test_logging_configured_from_flags(self, quiet_cli):
        main(["--debug", "--log-file", "run.log"])
        quiet_cli.assert_called_with(debug=True, log_file="run.log", level="INFO")

    def test_verify_stale_exits_one(self, write_source, docs_tree, caplog):
        write_source("intro.md", "# Intro\n")

        assert main(["--verify"]) == EXIT_FAILURE

        assert not (docs_tree / "docs").exists()
        assert "do not match the files in docs" in caplog.text

    def test_verify_clean_exits_zero(self, write_source):
        write_source("intro.md", "# Intro\n")
        main([])
        assert main(["--verify"]) == EXIT_OK

    def test_missing_source_is_config_error(self, caplog):
        assert main(["--source", "does/not/exist"]) == EXIT_CONFIG_ERROR
        assert "Configuration error" in caplog.text

    def test_invalid_yaml_is_config_error(self, docs_tree):
        config_dir = docs_tree / ".docs_sync"
        config_dir.mkdir()
        (config_dir / "config.yml").write_text("docs: [unclosed\n")
        assert main([]) == EXIT_CONFIG_ERROR

    def test_config_file_destination(self, write_source, docs_tree):
        config_dir = docs_tree / ".docs_sync"
        config_dir.mkdir()
        (config_dir / "config.yml").write_text("docs:\n  destination_root: site\n")
        write_source("a.md", "# A\n")

        assert main([]) == EXIT_OK
        assert (docs_tree / "site" / "a.md").exists()

    def test_destination_flag_beats_config_file(self, write_source, docs_tree):
        config_dir = docs_tree / ".docs_sync"
        config_dir.mkdir()
        (config_dir / "config.yml").write_text("docs:\n  destination_root: site\n")
        write_source("a.md", "# A\n")

        assert main(["--destination", "out"]) == EXIT_OK
        assert (docs_tree / "out" / "a.md").exists()
        assert not (docs_tree / "site").exists()

    def test_include_error_exits_one(self, write_source, caplog):
        write_source("page.md", "<!-- @include: ./missing.md -->\n")
        assert main([]) == EXIT_FAILURE
        assert "missing.md" in caplog.text

    def test_init_config(self, docs_tree, capsys):
        assert main(["--init-config"]) == EXIT_OK
        path = docs_tree / ".docs_sync" / "config.yml"
        assert path.exists()
        assert f"Config file: {path}" in capsys.readouterr().out

    def test_watch_starts_after_initial_run(self, write_source):
        write_source("a.md", "# A\n")
        with patch("docs_sync.cli.WatchCoordinator") as mock_coordinator:
            assert main(["--watch"]) == EXIT_OK
        mock_coordinator.return_value.run.assert_called_once_with()

    def test_watch_ignored_with_verify(self, caplog):
        with patch("docs_sync.cli.WatchCoordinator") as mock_coordinator:
            assert main(["--watch", "--verify"]) == EXIT_OK
        mock_coordinator.assert_not_called()
        assert "--watch is ignored" in caplog.text


class TestRun:
    def test_exit_code_forwarded(self):
        with patch("docs_sync.cli.main", return_value=EXIT_FAILURE):
            with pytest.raises(SystemExit) as excinfo:
                run()
        assert excinfo.value.code == EXIT_FAILURE

    def test_keyboard_interrupt(self, capsys):
        with patch("docs_sync.cli.main", side_effect=KeyboardInterrupt):
            with pytest.raises(SystemExit) as excinfo:
                run()
        assert excinfo.value.code == 0
        assert "Interrupted." in capsys.readouterr().err
