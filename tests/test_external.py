import sys
import threading
import time

import pytest

from simpl_sh.commands import Command, CommandKind
from simpl_sh.errors import CommandCancelled, CommandFailed, CommandNotFound, ExecutionFailed


def python_command(code, *extra):
    return Command(CommandKind.EXTERNAL, sys.executable, ["-c", code, *extra])


def test_successful_command(context, config):
    python_command("import sys; sys.exit(0)").execute(context, config)


def test_nonzero_exit_is_reported(context, config):
    with pytest.raises(CommandFailed) as excinfo:
        python_command("import sys; sys.exit(3)").execute(context, config)
    assert excinfo.value.exit_code == 3


def test_missing_program(context, config):
    command = Command(CommandKind.EXTERNAL, "simpl-sh-no-such-program", [])
    with pytest.raises(CommandNotFound) as excinfo:
        command.execute(context, config)
    assert excinfo.value.category == "not_found"


def test_non_executable_file(tmp_path, context, config):
    script = tmp_path / "script.sh"
    script.write_text("echo hi\n")
    script.chmod(0o644)

    with pytest.raises(ExecutionFailed) as excinfo:
        Command(CommandKind.EXTERNAL, str(script), []).execute(context, config)
    assert excinfo.value.category == "permission"


def test_environment_overlay_reaches_child(tmp_path, context, config):
    target = tmp_path / "value.txt"
    config.environment["SIMPL_SH_CHILD_VALUE"] = "42"
    python_command(
        "import os, sys; open(sys.argv[1], 'w').write(os.environ['SIMPL_SH_CHILD_VALUE'])",
        str(target),
    ).execute(context, config)
    assert target.read_text() == "42"


def test_cancellation_kills_child(context, config):
    timer = threading.Timer(0.2, context.cancel_token.cancel)
    timer.start()
    started = time.monotonic()
    try:
        with pytest.raises(CommandCancelled):
            python_command("import time; time.sleep(30)").execute(context, config)
    finally:
        timer.cancel()
    assert time.monotonic() - started < 10
