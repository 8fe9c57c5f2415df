import io
import os

import pytest
from rich.console import Console

from simpl_sh.commands import ExecutionContext
from simpl_sh.config import ShellConfig


@pytest.fixture
def config(tmp_path):
    return ShellConfig(
        config_dir=tmp_path / "config",
        history_file=str(tmp_path / "history"),
        save_history=False,
        prompt_color="none",
        aliases={"ll": "ls -la"},
        path_dirs=[],
    )


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=120, color_system=None)


@pytest.fixture
def output(console):
    def read() -> str:
        return console.file.getvalue()

    return read


@pytest.fixture
def context(console):
    return ExecutionContext(console=console)


@pytest.fixture
def restore_cwd():
    cwd = os.getcwd()
    yield cwd
    os.chdir(cwd)
