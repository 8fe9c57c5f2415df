#!/usr/bin/env python3
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..commands.dispatch import BUILTIN_COMMANDS
from ..config import ShellConfig
from ..core.git import GitManager
from ..errors import DirectoryReadError, HomeDirectoryUnresolvable
from .context import Classification, CompletionContext, classify
from .utils import remove_duplicates

logger = logging.getLogger(__name__)

GIT_SUBCOMMANDS = [
    "add", "branch", "checkout", "clone", "commit", "diff", "fetch", "init",
    "log", "merge", "pull", "push", "rebase", "remote", "reset", "show",
    "status", "switch", "tag",
]
GIT_COMMIT_OPTIONS = ["-m", "--message", "-a", "--all", "--amend", "-v", "--verbose"]
GIT_REMOTE_SUBCOMMANDS = ["add", "remove", "rename", "show", "prune", "update"]

FALLBACK_BRANCHES = ["main", "master", "develop", "feature/", "bugfix/", "hotfix/"]
FALLBACK_REMOTES = ["origin", "upstream"]
FALLBACK_REFS = ["HEAD", "main", "master", "develop", "origin/main", "origin/master"]


@dataclass
class CompletionResult:
    candidates: List[str] = field(default_factory=list)
    replace_length: int = 0
    context: CompletionContext = CompletionContext.DISABLED
    word: str = ""

    def suffixes(self) -> List[str]:
        """Candidates reduced to the text that goes after the typed word."""
        return [
            candidate[len(self.word):]
            for candidate in self.candidates
            if candidate.startswith(self.word)
        ]

    def __bool__(self) -> bool:
        return bool(self.candidates)


class CompletionManager:
    def __init__(self, config: ShellConfig, git: Optional[GitManager] = None) -> None:
        self.config = config
        self.git = git if git is not None else GitManager(config)
        self._path_cache: Dict[Tuple[str, ...], List[str]] = {}

        self._completers: Dict[CompletionContext, Callable[[Classification], List[str]]] = {
            CompletionContext.DISABLED: lambda _: [],
            CompletionContext.EMPTY_OR_FIRST_TOKEN: self._complete_commands,
            CompletionContext.GIT_SUBCOMMAND: self._complete_git_subcommands,
            CompletionContext.GIT_BRANCHISH: self._complete_git_branches,
            CompletionContext.GIT_FILEISH: self._complete_git_files,
            CompletionContext.GIT_COMMIT_OPTION: self._complete_git_commit_options,
            CompletionContext.GIT_REMOTE: self._complete_git_remotes,
            CompletionContext.GIT_REMOTE_SUBCOMMAND: self._complete_git_remote_subcommands,
            CompletionContext.GIT_REF: self._complete_git_refs,
            CompletionContext.GENERIC_FILE: self._complete_files,
        }

    def complete(self, line: str, cursor: int) -> CompletionResult:
        """Candidates for the word under ``cursor``.

        Candidates are full words; ``replace_length`` is the length of the
        word already typed, which the caller replaces with a candidate.
        Raises ``DirectoryReadError`` when file completion cannot list a
        directory.
        """
        classification = classify(line, cursor, self.config.completion_enabled)
        candidates = self._completers[classification.context](classification)

        logger.debug(
            "Completion %s for %r: %d candidates",
            classification.context.value,
            classification.word,
            len(candidates),
        )
        return CompletionResult(
            candidates=candidates,
            replace_length=len(classification.word),
            context=classification.context,
            word=classification.word,
        )

    # ------------------------------------------------------------------
    # Matching helpers
    # ------------------------------------------------------------------

    def _matches(self, candidate: str, prefix: str) -> bool:
        if self.config.completion_case_insensitive:
            return candidate.lower().startswith(prefix.lower())
        return candidate.startswith(prefix)

    def _filter(self, candidates: Iterable[str], prefix: str) -> List[str]:
        return remove_duplicates(
            candidate for candidate in candidates if candidate.startswith(prefix)
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _complete_commands(self, classification: Classification) -> List[str]:
        prefix = classification.word
        names = list(BUILTIN_COMMANDS)
        names.extend(self.config.aliases)
        names.extend(self.get_path_executables())
        return sorted(self._filter(names, prefix))

    def get_path_executables(self) -> List[str]:
        key = tuple(self.config.path_dirs)
        cached = self._path_cache.get(key)
        if cached is not None:
            return cached

        executables = self._scan_path(key)
        self._path_cache[key] = executables
        return executables

    @staticmethod
    def _scan_path(directories: Iterable[str]) -> List[str]:
        found: List[str] = []
        seen = set()
        for directory in directories:
            if not directory:
                continue
            try:
                entries = list(os.scandir(directory))
            except OSError:
                continue
            for entry in entries:
                if entry.name in seen:
                    continue
                try:
                    if entry.is_file() and os.access(entry.path, os.X_OK):
                        seen.add(entry.name)
                        found.append(entry.name)
                except OSError:
                    continue
        return found

    def clear_cache(self) -> None:
        self._path_cache.clear()
        logger.debug("Completion cache cleared")

    def update_cache(self) -> None:
        self.clear_cache()
        self.get_path_executables()

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def _complete_files(self, classification: Classification) -> List[str]:
        return self.complete_path(classification.word)

    def complete_path(self, word: str) -> List[str]:
        if "/" in word:
            typed_dir, name_prefix = word.rsplit("/", 1)
            typed_dir += "/"
            search_dir = self._expand_home(typed_dir[:-1] or "/")
        else:
            typed_dir, name_prefix = "", word
            search_dir = "."

        try:
            with os.scandir(search_dir) as iterator:
                entries = list(iterator)
        except OSError as error:
            raise DirectoryReadError(search_dir, error) from error

        candidates = []
        for entry in entries:
            name = entry.name
            if name.startswith(".") and not self.config.completion_show_hidden:
                continue
            if not self._matches(name, name_prefix):
                continue
            try:
                is_dir = entry.is_dir()
            except OSError:
                is_dir = False
            candidates.append(typed_dir + name + ("/" if is_dir else ""))

        return sorted(candidates)

    @staticmethod
    def _expand_home(directory: str) -> str:
        if directory != "~" and not directory.startswith("~/"):
            return directory
        try:
            home = str(Path.home())
        except (RuntimeError, KeyError) as error:
            raise DirectoryReadError(directory, HomeDirectoryUnresolvable()) from error
        return home + directory[1:]

    # ------------------------------------------------------------------
    # Git
    # ------------------------------------------------------------------

    def _complete_git_subcommands(self, classification: Classification) -> List[str]:
        return self._filter(GIT_SUBCOMMANDS, classification.word)

    def _live_branches(self) -> Optional[List[str]]:
        """Branches of the current repository, or None when git support is off."""
        if not self.config.git_enabled:
            return None
        return self.git.branches()

    def _complete_git_branches(self, classification: Classification) -> List[str]:
        branches = self._live_branches()
        if branches is None:
            return []
        return self._filter(branches or FALLBACK_BRANCHES, classification.word)

    def _complete_git_files(self, classification: Classification) -> List[str]:
        files: List[str] = []
        if self.config.git_enabled:
            files = self.git.modified_files() + self.git.untracked_files()

        matches = self._filter(files, classification.word)
        if matches:
            return matches
        return self._complete_files(classification)

    def _complete_git_commit_options(self, classification: Classification) -> List[str]:
        return self._filter(GIT_COMMIT_OPTIONS, classification.word)

    def _complete_git_remotes(self, classification: Classification) -> List[str]:
        remotes: List[str] = []
        if self.config.git_enabled:
            remotes = self.git.remotes()
        return self._filter(remotes or FALLBACK_REMOTES, classification.word)

    def _complete_git_remote_subcommands(self, classification: Classification) -> List[str]:
        return self._filter(GIT_REMOTE_SUBCOMMANDS, classification.word)

    def _complete_git_refs(self, classification: Classification) -> List[str]:
        branches = self._live_branches()
        if branches:
            refs = ["HEAD", *branches, *(f"origin/{branch}" for branch in branches)]
        else:
            refs = FALLBACK_REFS
        return self._filter(refs, classification.word)
