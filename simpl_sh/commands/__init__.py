from .dispatch import (
    BUILTIN_COMMANDS,
    Command,
    CommandKind,
    ExecutionContext,
    build_external,
    noop,
    resolve_builtin,
)

__all__ = [
    "BUILTIN_COMMANDS",
    "Command",
    "CommandKind",
    "ExecutionContext",
    "build_external",
    "noop",
    "resolve_builtin",
]
