#!/usr/bin/env python3
import logging
import subprocess
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from ..config import ShellConfig

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 3

Runner = Callable[[Sequence[str]], subprocess.CompletedProcess]


def run_git(args: Sequence[str]) -> subprocess.CompletedProcess:
    return subprocess.run(
        list(args),
        capture_output=True,
        text=True,
        timeout=GIT_TIMEOUT,
    )


@dataclass
class GitInfo:
    branch: str = ""
    has_uncommitted: bool = False
    has_untracked: bool = False
    has_staged: bool = False
    ahead: int = 0
    behind: int = 0


class GitManager:
    def __init__(self, config: ShellConfig, runner: Optional[Runner] = None) -> None:
        self.config = config
        self.runner = runner or run_git

    @property
    def enabled(self) -> bool:
        return self.config.git_enabled

    def _run(self, *args: str) -> Optional[str]:
        try:
            result = self.runner(["git", *args])
        except (OSError, subprocess.SubprocessError) as error:
            logger.debug("git %s failed: %s", " ".join(args), error)
            return None

        if result.returncode != 0:
            return None
        return result.stdout or ""

    def _lines(self, *args: str) -> List[str]:
        if not self.is_repo():
            return []
        output = self._run(*args)
        if not output:
            return []
        return [line.strip() for line in output.splitlines() if line.strip()]

    def is_repo(self) -> bool:
        return self._run("rev-parse", "--git-dir") is not None

    def current_branch(self) -> Optional[str]:
        output = self._run("symbolic-ref", "--short", "HEAD")
        if output and output.strip():
            return output.strip()

        # Detached HEAD: show the short commit hash instead.
        output = self._run("rev-parse", "--short", "HEAD")
        if output and output.strip():
            return f"({output.strip()})"
        return None

    def get_info(self) -> Optional[GitInfo]:
        if not self.enabled or not self.is_repo():
            return None

        info = GitInfo(branch=self.current_branch() or "")

        status = self._run("status", "--porcelain")
        if status:
            self._apply_status(info, status)

        counts = self._run("rev-list", "--count", "--left-right", "@{upstream}...HEAD")
        if counts:
            self._apply_ahead_behind(info, counts)

        return info

    @staticmethod
    def _apply_status(info: GitInfo, output: str) -> None:
        for line in output.splitlines():
            if len(line) < 2:
                continue
            staged, unstaged = line[0], line[1]
            if staged not in (" ", "?"):
                info.has_staged = True
            if unstaged not in (" ", "?"):
                info.has_uncommitted = True
            if staged == "?" and unstaged == "?":
                info.has_untracked = True

    @staticmethod
    def _apply_ahead_behind(info: GitInfo, output: str) -> None:
        parts = output.split()
        if len(parts) != 2:
            logger.debug("Unexpected git rev-list output: %r", output)
            return
        try:
            info.behind, info.ahead = int(parts[0]), int(parts[1])
        except ValueError:
            logger.debug("Unexpected git rev-list output: %r", output)

    def branches(self) -> List[str]:
        return self._lines("branch", "--format=%(refname:short)")

    def remotes(self) -> List[str]:
        return self._lines("remote")

    def modified_files(self) -> List[str]:
        return self._lines("diff", "--name-only")

    def untracked_files(self) -> List[str]:
        return self._lines("ls-files", "--others", "--exclude-standard")
