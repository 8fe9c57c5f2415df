import logging
from pathlib import Path

import pytest

from simpl_sh import __version__, app
from simpl_sh.cli import build_parser, main
from simpl_sh.logs import configure_logging


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_arguments():
    args = build_parser().parse_args(["--config", "/tmp/shell", "--debug"])
    assert args.config == Path("/tmp/shell")
    assert args.debug is True


def test_defaults():
    args = build_parser().parse_args([])
    assert args.config is None
    assert args.debug is False


def test_configure_logging_writes_file(tmp_path):
    log_file = tmp_path / "shell.log"
    configure_logging(debug=True, log_file=log_file)

    logger = logging.getLogger("simpl_sh.tests")
    logger.debug("hello from the test")
    for handler in logging.getLogger("simpl_sh").handlers:
        handler.flush()

    assert "hello from the test" in log_file.read_text()
    configure_logging()


def test_broken_config_exits_with_message(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    (config_dir / "config.ini").write_text("[general]\ndebug = maybe\n")

    assert app.main(config_dir=config_dir) == 1
    assert "Failed to load configuration" in capsys.readouterr().out
