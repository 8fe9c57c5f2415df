#!/usr/bin/env python3
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from rich.console import Console

from ..config import ShellConfig
from ..context.history import HistoryStore
from ..core.cancellation import CancellationToken
from ..core.expansion import expand_variables
from . import builtins, external


class CommandKind(str, Enum):
    NOOP = "noop"
    CD = "cd"
    PWD = "pwd"
    EXIT = "exit"
    HELP = "help"
    HISTORY = "history"
    ALIAS = "alias"
    EXPORT = "export"
    EXTERNAL = "external"


BUILTIN_COMMANDS: Dict[str, CommandKind] = {
    "cd": CommandKind.CD,
    "pwd": CommandKind.PWD,
    "exit": CommandKind.EXIT,
    "help": CommandKind.HELP,
    "history": CommandKind.HISTORY,
    "alias": CommandKind.ALIAS,
    "export": CommandKind.EXPORT,
}


@dataclass
class ExecutionContext:
    console: Console
    history: Optional[HistoryStore] = None
    cancel_token: CancellationToken = field(default_factory=CancellationToken)


@dataclass
class Command:
    kind: CommandKind
    name: str = ""
    args: List[str] = field(default_factory=list)

    @property
    def is_builtin(self) -> bool:
        return self.kind in BUILTIN_COMMANDS.values()

    def execute(self, context: ExecutionContext, config: ShellConfig) -> None:
        HANDLERS[self.kind](self, context, config)


def _noop(command: Command, context: ExecutionContext, config: ShellConfig) -> None:
    return None


HANDLERS: Dict[CommandKind, Callable[[Command, ExecutionContext, ShellConfig], None]] = {
    CommandKind.NOOP: _noop,
    CommandKind.CD: builtins.change_directory,
    CommandKind.PWD: builtins.print_working_directory,
    CommandKind.EXIT: builtins.exit_shell,
    CommandKind.HELP: builtins.show_help,
    CommandKind.HISTORY: builtins.show_history,
    CommandKind.ALIAS: builtins.define_alias,
    CommandKind.EXPORT: builtins.export_variable,
    CommandKind.EXTERNAL: external.run_external,
}


def noop() -> Command:
    return Command(CommandKind.NOOP)


def resolve_builtin(tokens: Sequence[str]) -> Optional[Command]:
    if not tokens:
        return None

    kind = BUILTIN_COMMANDS.get(tokens[0])
    if kind is None:
        return None

    return Command(kind, tokens[0], list(tokens[1:]))


def build_external(
    tokens: Sequence[str],
    overlay: Mapping[str, str],
    system_env: Optional[Mapping[str, str]] = None,
) -> Command:
    if system_env is None:
        system_env = os.environ

    expanded = [expand_variables(token, overlay, system_env) for token in tokens]
    return Command(CommandKind.EXTERNAL, expanded[0], expanded[1:])
