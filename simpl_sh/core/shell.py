#!/usr/bin/env python3
import logging
import signal
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.application import run_in_terminal
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.lexers import PygmentsLexer
from pygments.lexers import find_lexer_class_by_name
from pygments.util import ClassNotFound
from rich.console import Console

from .. import __version__
from ..commands import BUILTIN_COMMANDS, CommandKind, ExecutionContext
from ..completion import ShellCompleter, create_completion_manager, format_completions, get_common_prefix
from ..config import ShellConfig
from ..context import HistoryManager, HistoryStore, ShellHistory
from ..errors import CommandNotFound, ShellError
from ..ui import PromptManager, UIManager
from .cancellation import CancellationToken
from .git import GitManager
from .parser import Parser

logger = logging.getLogger(__name__)

DEBUG_HINTS = {
    "not_found": "Check if the path exists and you have permission",
    "permission": "Check file permissions or try with sudo",
    "syntax": "Check your command syntax",
}


def is_similar(a: str, b: str) -> bool:
    if not a or not b:
        return False
    if a[0] == b[0] and abs(len(a) - len(b)) <= 2:
        return True
    if min(len(a), len(b)) >= 2:
        return a[:2] == b[:2]
    return False


class Shell:

    def __init__(
        self,
        config: ShellConfig,
        console: Optional[Console] = None,
        history: Optional[HistoryStore] = None,
        git: Optional[GitManager] = None,
    ) -> None:
        self.config = config
        self.console = console or Console()
        self.ui = UIManager(self.console)

        self.git = git or GitManager(config)
        self.history = history if history is not None else HistoryManager(config)
        self.parser = Parser(config)
        self.prompt = PromptManager(config, self.git)

        self.completion_manager = create_completion_manager(config, self.git)
        self.completer = ShellCompleter(self.completion_manager)

        self.cancel_token = CancellationToken()
        self.context = ExecutionContext(
            console=self.console,
            history=self.history,
            cancel_token=self.cancel_token,
        )

        self._setup_keybindings()
        self.prompt_lexer = self._create_prompt_lexer()
        self.session = self._create_session()

    def _create_session(self) -> PromptSession:
        return PromptSession(history=ShellHistory(self.history))

    def _setup_keybindings(self) -> None:
        self.bindings = KeyBindings()

        @self.bindings.add("escape", "h")
        def show_help(event):
            run_in_terminal(self.ui.show_help)

        @self.bindings.add("escape", "r")
        def refresh_completion(event):
            self.completion_manager.update_cache()

        @self.bindings.add("escape", "l")
        def list_completions(event):
            buffer = event.app.current_buffer
            candidates = self.list_completions(buffer.text, buffer.cursor_position)
            lines = format_completions(candidates, self.console.width)
            prefix = get_common_prefix(candidates)
            run_in_terminal(lambda: self.ui.display_completions(lines, prefix))

    def _create_prompt_lexer(self) -> Optional[PygmentsLexer]:
        choice = self.config.prompt_lexer.strip()
        if not choice or choice.lower() == "auto":
            return None

        try:
            lexer_cls = find_lexer_class_by_name(choice)
        except ClassNotFound:
            logger.warning("Unknown prompt lexer %r, highlighting disabled", choice)
            return None

        return PygmentsLexer(lexer_cls)

    def list_completions(self, line: str, cursor: int) -> List[str]:
        try:
            return self.completion_manager.complete(line, cursor).candidates
        except ShellError as error:
            logger.debug("Completion failed: %s", error)
            return []

    def run(self) -> None:
        previous_handler = self._install_signal_handler()

        if self.config.show_welcome:
            self.ui.show_welcome(__version__)

        try:
            while not self.cancel_token.cancelled:
                try:
                    line = self.session.prompt(
                        self.prompt.formatted(),
                        key_bindings=self.bindings,
                        style=self.ui.get_style(),
                        auto_suggest=AutoSuggestFromHistory(),
                        completer=self.completer if self.config.completion_enabled else None,
                        lexer=self.prompt_lexer,
                    )
                except KeyboardInterrupt:
                    continue
                except EOFError:
                    if not self.cancel_token.cancelled:
                        self.ui.display_goodbye()
                    break

                self.execute_line(line)
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGTERM, previous_handler)

    def execute_line(self, line: str) -> None:
        try:
            command = self.parser.parse(line)
            command.execute(self.context, self.config)
        except ShellError as error:
            self.handle_error(error, line)
            return
        except KeyboardInterrupt:
            self.ui.display_interrupt()
            return

        if command.kind is CommandKind.HISTORY and command.args[:1] in (["-c"], ["clear"]):
            # The session caches loaded history strings; start a fresh one.
            self.session = self._create_session()

    def handle_error(self, error: ShellError, line: str) -> None:
        logger.debug("Command %r failed: %r", line, error)

        hint = None
        if self.config.debug:
            hint = DEBUG_HINTS.get(error.category, f"Error type: {type(error).__name__}")
            if isinstance(error, CommandNotFound):
                hint = f"Input was '{line}'"

        self.ui.display_error(str(error), error.category, hint)

        if isinstance(error, CommandNotFound):
            self.ui.display_suggestions(self.suggest_similar(line))

    def suggest_similar(self, line: str) -> List[str]:
        fields = line.split()
        if not fields:
            return []

        name = fields[0]
        suggestions = [builtin for builtin in BUILTIN_COMMANDS if is_similar(name, builtin)]
        suggestions.extend(alias for alias in self.config.aliases if is_similar(name, alias))
        return suggestions

    def _install_signal_handler(self):
        try:
            return signal.signal(signal.SIGTERM, self._handle_sigterm)
        except (ValueError, OSError):
            # Not on the main thread, or the platform has no SIGTERM.
            return None

    def _handle_sigterm(self, signum, frame) -> None:
        self.console.print("\n[yellow]Terminating simpl-sh...[/yellow]")
        self.cancel_token.cancel()

        app = self.session.app
        if app.is_running and app.loop is not None:
            app.loop.call_soon_threadsafe(lambda: app.exit(exception=EOFError()))
