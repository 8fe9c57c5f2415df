from typing import Optional

from ..config import ShellConfig
from ..core.git import GitManager
from .completer import ShellCompleter
from .context import CompletionContext, classify, current_word
from .manager import CompletionManager, CompletionResult
from .utils import format_completions, get_common_prefix, remove_duplicates


def create_completion_manager(config: ShellConfig, git: Optional[GitManager] = None) -> CompletionManager:
    return CompletionManager(config, git)


__all__ = [
    "CompletionContext",
    "CompletionManager",
    "CompletionResult",
    "ShellCompleter",
    "classify",
    "create_completion_manager",
    "current_word",
    "format_completions",
    "get_common_prefix",
    "remove_duplicates",
]
