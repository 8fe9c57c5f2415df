#!/usr/bin/env python3
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, List

from rich.table import Table

from ..config import ShellConfig, split_assignment
from ..errors import (
    DirectoryNotFound,
    ExecutionFailed,
    HomeDirectoryUnresolvable,
    InvalidFormat,
    PermissionDenied,
)
from ..ui.manager import build_help_panel

if TYPE_CHECKING:
    from ..context.history import HistoryEntry
    from .dispatch import Command, ExecutionContext

logger = logging.getLogger(__name__)


def resolve_home() -> str:
    try:
        home = str(Path.home())
    except (RuntimeError, KeyError) as error:
        raise HomeDirectoryUnresolvable() from error
    if not home or home == "~":
        raise HomeDirectoryUnresolvable()
    return home


def change_directory(command: Command, context: ExecutionContext, config: ShellConfig) -> None:
    if not command.args:
        target = resolve_home()
    elif command.args[0] == "-":
        if not config.previous_directory:
            raise DirectoryNotFound("-", "no previous directory")
        target = config.previous_directory
        context.console.print(target, markup=False, highlight=False, soft_wrap=True)
    else:
        target = command.args[0]

    # Only the "~/" form is rewritten here; a bare "~" is passed through.
    if target.startswith("~/"):
        target = os.path.join(resolve_home(), target[2:])

    try:
        old_dir = os.getcwd()
    except OSError:
        old_dir = None

    try:
        os.chdir(target)
    except FileNotFoundError as error:
        raise DirectoryNotFound(target) from error
    except NotADirectoryError as error:
        raise DirectoryNotFound(target, "not a directory") from error
    except PermissionError as error:
        raise PermissionDenied(target) from error
    except OSError as error:
        raise DirectoryNotFound(target, error.strerror or str(error)) from error

    if old_dir is not None:
        config.previous_directory = old_dir
    logger.debug("Changed directory to %s", target)


def print_working_directory(command: Command, context: ExecutionContext, config: ShellConfig) -> None:
    try:
        cwd = os.getcwd()
    except FileNotFoundError as error:
        raise DirectoryNotFound(".", "current directory no longer exists") from error
    context.console.print(cwd, markup=False, highlight=False, soft_wrap=True)


def exit_shell(command: Command, context: ExecutionContext, config: ShellConfig) -> None:
    code = 0
    if command.args:
        try:
            code = int(command.args[0])
        except ValueError as error:
            raise InvalidFormat(f"exit: {command.args[0]}: numeric argument required") from error
    sys.exit(code)


def show_help(command: Command, context: ExecutionContext, config: ShellConfig) -> None:
    context.console.print(build_help_panel())


def show_history(command: Command, context: ExecutionContext, config: ShellConfig) -> None:
    history = context.history
    console = context.console
    if history is None:
        console.print("History functionality not available")
        return

    if not command.args:
        _print_entries(console, history.entries, start=1)
        return

    action = command.args[0]
    if action in {"-c", "clear"}:
        history.clear()
        return

    if action in {"-s", "--stats"}:
        table = Table(title="History", show_header=True, header_style="bold cyan")
        table.add_column("Property", style="bold")
        table.add_column("Value", style="green")
        for key, value in history.stats().items():
            table.add_row(key.replace("_", " "), str(value))
        console.print(table)
        return

    if action in {"-w", "--export"}:
        if len(command.args) < 2:
            raise InvalidFormat("history: usage: history --export FILE [bash|json]")
        fmt = command.args[2] if len(command.args) > 2 else "bash"
        history.export(command.args[1], fmt)
        console.print(f"[green]History exported to[/green] {command.args[1]}")
        return

    try:
        count = int(action)
    except ValueError:
        for entry in history.search(action):
            console.print(f"  {entry.command}", markup=False, highlight=False)
        return

    entries = history.recent(count)
    _print_entries(console, entries, start=len(history.entries) - len(entries) + 1)


def _print_entries(console, entries: List[HistoryEntry], start: int) -> None:
    for offset, entry in enumerate(entries):
        console.print(f"{start + offset:4d}  {entry.command}", markup=False, highlight=False)


def define_alias(command: Command, context: ExecutionContext, config: ShellConfig) -> None:
    if not command.args:
        if not config.aliases:
            context.console.print("[yellow]No aliases defined[/yellow]")
            return

        table = Table(title="Aliases", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="bold")
        table.add_column("Value", style="green")
        for name, value in sorted(config.aliases.items()):
            table.add_row(name, value)
        context.console.print(table)
        return

    name, value = split_assignment(
        " ".join(command.args), "alias: invalid format, use: alias name=value"
    )
    config.aliases[name] = value
    logger.debug("Alias %s set to %r", name, value)


def export_variable(command: Command, context: ExecutionContext, config: ShellConfig) -> None:
    if not command.args:
        for name, value in sorted(config.environment.items()):
            context.console.print(f"export {name}='{value}'", markup=False, highlight=False)
        return

    name, value = split_assignment(
        " ".join(command.args), "export: invalid format, use: export NAME=value"
    )

    try:
        os.environ[name] = value
    except (ValueError, OSError) as error:
        raise ExecutionFailed("export", error) from error

    config.environment[name] = value
    if name == "PATH":
        config.refresh_path_dirs(value)
    logger.debug("Exported %s", name)
