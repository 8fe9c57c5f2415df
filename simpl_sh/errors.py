#!/usr/bin/env python3
from typing import Optional


class ShellError(Exception):
    """Base class for every error the shell reports without exiting."""

    category = "generic"


class UnclosedQuoteError(ShellError):
    category = "syntax"

    def __init__(self, quote: str = "") -> None:
        self.quote = quote
        super().__init__(f"unclosed quote {quote}".strip())


class InvalidFormat(ShellError):
    category = "syntax"


class DirectoryNotFound(ShellError):
    category = "not_found"

    def __init__(self, path: str, reason: str = "no such file or directory") -> None:
        self.path = path
        super().__init__(f"cd: {path}: {reason}")


class PermissionDenied(ShellError):
    category = "permission"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"cd: {path}: permission denied")


class HomeDirectoryUnresolvable(ShellError):
    def __init__(self) -> None:
        super().__init__("failed to get home directory")


class CommandNotFound(ShellError):
    category = "not_found"

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"command not found: {name}")


class CommandFailed(ShellError):
    def __init__(self, name: str, exit_code: int) -> None:
        self.name = name
        self.exit_code = exit_code
        super().__init__(f"command '{name}' exited with code {exit_code}")


class ExecutionFailed(ShellError):
    def __init__(self, name: str, cause: Optional[BaseException] = None) -> None:
        self.name = name
        self.cause = cause
        if isinstance(cause, PermissionError):
            self.category = "permission"
        message = f"failed to execute '{name}'"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class CommandCancelled(ShellError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"command '{name}' cancelled")


class DirectoryReadError(ShellError):
    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        if isinstance(cause, PermissionError):
            self.category = "permission"
        elif isinstance(cause, FileNotFoundError):
            self.category = "not_found"
        super().__init__(f"cannot read directory {path}: {cause}")


class UnsupportedFormat(ShellError):
    def __init__(self, fmt: str) -> None:
        self.format = fmt
        super().__init__(f"unsupported export format: {fmt}")
