#!/usr/bin/env python3
import logging
from typing import Iterable

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from ..commands.dispatch import BUILTIN_COMMANDS
from ..errors import ShellError
from .context import CompletionContext
from .manager import CompletionManager

logger = logging.getLogger(__name__)


class ShellCompleter(Completer):
    """prompt_toolkit front end for ``CompletionManager``."""

    def __init__(self, manager: CompletionManager) -> None:
        self.manager = manager

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        try:
            result = self.manager.complete(document.text, document.cursor_position)
        except ShellError as error:
            logger.debug("Completion failed: %s", error)
            return

        for candidate in result.candidates:
            yield Completion(
                candidate,
                start_position=-result.replace_length,
                display_meta=self._describe(candidate, result.context),
            )

    def _describe(self, candidate: str, context: CompletionContext) -> str:
        if context is not CompletionContext.EMPTY_OR_FIRST_TOKEN:
            return ""
        if candidate in BUILTIN_COMMANDS:
            return "builtin"
        if candidate in self.manager.config.aliases:
            return "alias"
        return ""
