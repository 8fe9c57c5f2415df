#!/usr/bin/env python3
from typing import List, Optional

from prompt_toolkit.styles import Style
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

BUILTIN_HELP = [
    ("cd [dir|-|~/path]", "Change directory (no argument: home, '-': previous)"),
    ("pwd", "Print the current directory"),
    ("exit [code]", "Leave the shell"),
    ("help", "Show this help"),
    ("history [n|-c|term]", "List, clear or search command history"),
    ("history --stats", "Show history statistics"),
    ("history --export FILE [bash|json]", "Write history to a file"),
    ("alias [name=value]", "List or define aliases"),
    ("export [NAME=value]", "List or set environment variables"),
]

KEYBINDING_HELP = [
    ("Tab", "Complete commands, files and git arguments"),
    ("Alt+H", "Show this help"),
    ("Alt+R", "Refresh the completion cache"),
    ("Alt+L", "List completions for the current word"),
    ("Ctrl+C", "Discard the current line"),
    ("Ctrl+D", "Exit"),
]

COMPLETION_STYLES = {
    "completion.menu": "#0a0a0a",
    "scrollbar.background": "bg:#0a7e98 bold",
    "completion-menu.completion": "bg:#0a0a0a fg:#aaaaaa bold",
    "completion-menu.completion.current": "bg:#888888 fg:#0a0a0a bold",
    "completion-menu.meta.completion": "bg:#0a0a0a fg:#aaaaaa bold",
    "completion-menu.meta.completion.current": "bg:#888888",
    "auto-suggestion": "#666666",
}

INFO_BORDER = "#8caaee"

# category -> (title, border colour)
ERROR_PANELS = {
    "generic": ("Error", "#e78284"),
    "syntax": ("Syntax Error", "#e78284"),
    "not_found": ("Not Found", "#ef9f76"),
    "permission": ("Permission Denied", "#e5c890"),
}


def _panel(renderable, title: str, border: str, fit: bool = False) -> Panel:
    factory = Panel.fit if fit else Panel
    return factory(
        renderable,
        title=Text(title, style=f"bold {border}"),
        title_align="left",
        border_style=border,
        padding=(0, 1),
    )


def _two_column_table(rows, header: str) -> Table:
    table = Table(show_header=True, header_style="bold cyan", box=None, padding=(0, 2))
    table.add_column(header, style="bold green", no_wrap=True)
    table.add_column("Description")
    for name, description in rows:
        table.add_row(escape(name), description)
    return table


def build_help_panel():
    return _panel(
        Group(
            _two_column_table(BUILTIN_HELP, "Builtin"),
            Text(""),
            _two_column_table(KEYBINDING_HELP, "Key"),
        ),
        "Help",
        INFO_BORDER,
    )


class UIManager:
    def __init__(self, console: Console) -> None:
        self.console = console

    def show_welcome(self, version: str) -> None:
        message = Text.assemble(
            ("simpl-sh ", "bold cyan"),
            (version, "dim"),
            "\nType ",
            ("help", "bold green"),
            " for builtins, ",
            ("exit", "bold green"),
            " or Ctrl+D to quit.",
        )
        self.console.print(_panel(message, "Welcome", INFO_BORDER, fit=True))

    def show_help(self) -> None:
        self.console.print(build_help_panel())

    def display_error(self, message: str, category: str = "generic", hint: Optional[str] = None) -> None:
        body = Text(message)
        if hint:
            body.append(f"\n{hint}", style="dim")
        title, border = ERROR_PANELS.get(category, ERROR_PANELS["generic"])
        self.console.print(_panel(body, title, border, fit=True))

    def display_suggestions(self, suggestions: List[str]) -> None:
        if not suggestions:
            return
        names = ", ".join(f"[cyan]{escape(name)}[/cyan]" for name in suggestions)
        self.console.print(f"[yellow]Did you mean:[/yellow] {names}")

    def display_completions(self, lines: List[str], common_prefix: str = "") -> None:
        if not lines:
            self.console.print("[dim]No completions[/dim]")
            return
        for line in lines:
            self.console.print(line, markup=False, highlight=False)
        if common_prefix:
            self.console.print(f"[dim]Common prefix:[/dim] {escape(common_prefix)}", highlight=False)

    def display_interrupt(self) -> None:
        self.console.print("[dim]^C[/dim]")

    def display_goodbye(self) -> None:
        self.console.print("[cyan]Goodbye![/cyan]")

    @staticmethod
    def get_style() -> Style:
        return Style.from_dict(COMPLETION_STYLES)
