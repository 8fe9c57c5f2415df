#!/usr/bin/env python3
import getpass
import logging
import os
import socket
from datetime import datetime
from typing import List, Optional, Tuple

from prompt_toolkit.formatted_text import ANSI

from ..config import DEFAULT_PROMPT_FORMAT, ShellConfig
from ..core.git import GitManager

logger = logging.getLogger(__name__)

UNKNOWN = "unknown"

COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
}

# Segment role -> color for the "auto"/"default" scheme.
ROLE_COLORS = {
    "user": "green",
    "host": "green",
    "cwd": "blue",
    "git": "yellow",
}


class PromptManager:
    def __init__(self, config: ShellConfig, git: Optional[GitManager] = None) -> None:
        self.config = config
        self.git = git if git is not None else GitManager(config)

    def generate(self) -> str:
        segments = self._expand(self.config.prompt_format or DEFAULT_PROMPT_FORMAT)
        return self._colorize(segments)

    def formatted(self) -> ANSI:
        return ANSI(self.generate())

    def _expand(self, prompt_format: str) -> List[Tuple[str, str]]:
        """Split the format into ``(role, text)`` segments."""
        segments: List[Tuple[str, str]] = []
        index = 0
        while index < len(prompt_format):
            char = prompt_format[index]
            if char == "%" and index + 1 < len(prompt_format):
                segments.append(self._expand_escape(prompt_format[index + 1]))
                index += 2
            else:
                segments.append(("text", char))
                index += 1
        return segments

    def _expand_escape(self, code: str) -> Tuple[str, str]:
        if code == "u":
            return "user", self.username()
        if code == "h":
            return "host", self.hostname()
        if code == "w":
            return "cwd", self.working_directory()
        if code == "W":
            return "cwd", self.working_directory_basename()
        if code == "g":
            return "git", self.git_segment() if self.config.show_git_info else ""
        if code == "t":
            return "text", self.timestamp() if self.config.show_timestamp else ""
        if code == "$":
            return "char", self.prompt_char()
        if code == "%":
            return "text", "%"
        return "text", "%" + code

    def _colorize(self, segments: List[Tuple[str, str]]) -> str:
        scheme = (self.config.prompt_color or "none").lower()
        plain = "".join(text for _, text in segments)

        if scheme in ("none", "off"):
            return plain
        if scheme == "bright":
            return COLORS["bold"] + plain + COLORS["reset"]

        parts = []
        for role, text in segments:
            color = None
            if scheme in ("auto", "default"):
                color = ROLE_COLORS.get(role)
            elif scheme == "minimal" and role == "char":
                color = "red" if text == "#" else "green"

            if color and text:
                parts.append(COLORS[color] + text + COLORS["reset"])
            else:
                parts.append(text)
        return "".join(parts)

    @staticmethod
    def username() -> str:
        try:
            return getpass.getuser()
        except (KeyError, OSError):
            return UNKNOWN

    @staticmethod
    def hostname() -> str:
        try:
            return socket.gethostname() or "localhost"
        except OSError:
            return "localhost"

    @staticmethod
    def _home() -> Optional[str]:
        try:
            return os.path.expanduser("~")
        except (KeyError, RuntimeError):
            return None

    def working_directory(self) -> str:
        try:
            cwd = os.getcwd()
        except OSError:
            return UNKNOWN

        home = self._home()
        if home and home != "~" and (cwd == home or cwd.startswith(home.rstrip(os.sep) + os.sep)):
            return "~" + cwd[len(home):]
        return cwd

    def working_directory_basename(self) -> str:
        try:
            cwd = os.getcwd()
        except OSError:
            return UNKNOWN

        if cwd == self._home():
            return "~"
        return os.path.basename(cwd) or cwd

    def git_segment(self) -> str:
        if not self.config.git_enabled:
            return ""

        info = self.git.get_info()
        if info is None:
            return ""

        parts = []
        if self.config.git_show_branch and info.branch:
            parts.append(info.branch)

        if self.config.git_show_status:
            indicators = ""
            if info.has_uncommitted:
                indicators += "*"
            if info.has_untracked:
                indicators += "?"
            if info.has_staged:
                indicators += "+"
            if indicators:
                parts.append(indicators)

        if self.config.git_show_ahead:
            if info.ahead > 0:
                parts.append(f"↑{info.ahead}")
            if info.behind > 0:
                parts.append(f"↓{info.behind}")

        if not parts:
            return ""
        return " (" + " ".join(parts) + ")"

    @staticmethod
    def timestamp() -> str:
        return datetime.now().strftime("%H:%M:%S")

    @staticmethod
    def prompt_char() -> str:
        geteuid = getattr(os, "geteuid", None)
        if geteuid is not None and geteuid() == 0:
            return "#"
        return "$"
