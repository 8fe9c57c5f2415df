from .manager import UIManager, build_help_panel
from .prompt import PromptManager

__all__ = ["UIManager", "PromptManager", "build_help_panel"]
