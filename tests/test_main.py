# Tests for the dirindex CLI.
# Created: 2026-10-17

import os
from unittest.mock import patch

import pytest

from dirindex.__main__ import build_parser, main


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("DIRINDEX_"):
            monkeypatch.delenv(key)


@pytest.fixture
def mock_run():
    with (
        patch("dirindex.serve.run_server") as run,
        patch("dirindex.__main__.setup_logging") as _logging,
    ):
        yield run


class TestParser:
    def test_defaults_are_none(self):
        args = build_parser().parse_args([])
        assert args.root is None
        assert args.port is None
        assert args.hide_hidden is None

    def test_template_options_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--templates", "a", "--template", "b"])


class TestMain:
    def test_defaults(self, mock_run):
        main([])
        settings = mock_run.call_args[0][0]
        assert str(settings.root) == "."
        assert settings.port == 8888
        assert settings.hide_hidden is False

    def test_flags(self, mock_run, tmp_path):
        (tmp_path / "tpl").mkdir()
        main(
            [
                str(tmp_path),
                "-p",
                "9000",
                "--host",
                "0.0.0.0",
                "--templates",
                str(tmp_path / "tpl"),
                "--mount",
                "files/",
                "--hide-hidden",
                "--log-level",
                "debug",
            ]
        )
        settings = mock_run.call_args[0][0]
        assert settings.root == tmp_path
        assert settings.port == 9000
        assert settings.host == "0.0.0.0"
        assert settings.templates_dir == tmp_path / "tpl"
        assert settings.mount_path == "/files"
        assert settings.hide_hidden is True
        assert settings.log_level == "DEBUG"

    def test_env_used_when_flag_missing(self, mock_run, monkeypatch):
        monkeypatch.setenv("DIRINDEX_PORT", "7000")
        main([])
        assert mock_run.call_args[0][0].port == 7000

    def test_root_must_be_directory(self, mock_run, tmp_path):
        (tmp_path / "file.txt").write_text("x")
        with pytest.raises(SystemExit, match="Not a directory"):
            main([str(tmp_path / "file.txt")])
        mock_run.assert_not_called()

    def test_invalid_port(self, mock_run):
        with pytest.raises(SystemExit, match="Invalid configuration"):
            main(["-p", "70000"])

    def test_missing_template_file(self, mock_run):
        with pytest.raises(SystemExit, match="Invalid configuration"):
            main(["--template", "missing.html"])
        mock_run.assert_not_called()

    def test_keyboard_interrupt(self, mock_run):
        mock_run.side_effect = KeyboardInterrupt
        main([])
