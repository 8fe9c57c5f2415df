#!/usr/bin/env python3
from __future__ import annotations

import logging
import os
import subprocess
from typing import TYPE_CHECKING, Optional

from ..config import ShellConfig
from ..core.cancellation import CancellationToken
from ..errors import CommandCancelled, CommandFailed, CommandNotFound, ExecutionFailed

if TYPE_CHECKING:
    from .dispatch import Command, ExecutionContext

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1


def run_external(command: Command, context: ExecutionContext, config: ShellConfig) -> None:
    """Run a program with the shell's stdio, killing it on cancellation."""
    shell_env = os.environ.copy()
    shell_env.update(config.environment)

    logger.debug("Spawning %s %s", command.name, command.args)
    try:
        process = subprocess.Popen([command.name, *command.args], env=shell_env)
    except FileNotFoundError:
        raise CommandNotFound(command.name) from None
    except OSError as error:
        raise ExecutionFailed(command.name, error) from error

    interrupted = False
    try:
        while True:
            exit_code = _wait(process, context.cancel_token)
            if exit_code is not None or context.cancel_token.cancelled:
                break
            # Ctrl+C reached the child as well; let it decide whether to exit.
            interrupted = True
    finally:
        if process.poll() is None:
            process.kill()
            process.wait()

    if exit_code is None:
        raise CommandCancelled(command.name)
    if interrupted and exit_code != 0:
        raise KeyboardInterrupt
    if exit_code != 0:
        raise CommandFailed(command.name, exit_code)


def _wait(process: subprocess.Popen, token: CancellationToken) -> Optional[int]:
    """Wait for ``process``; ``None`` means cancelled or interrupted."""
    while not token.cancelled:
        try:
            return process.wait(timeout=POLL_INTERVAL)
        except subprocess.TimeoutExpired:
            continue
        except KeyboardInterrupt:
            return None
    return None
