#!/usr/bin/env python3
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

WORD_SEPARATORS = " \t"


class CompletionContext(str, Enum):
    DISABLED = "disabled"
    EMPTY_OR_FIRST_TOKEN = "command"
    GIT_SUBCOMMAND = "git_subcommand"
    GIT_BRANCHISH = "git_branch"
    GIT_FILEISH = "git_file"
    GIT_COMMIT_OPTION = "git_commit_option"
    GIT_REMOTE = "git_remote"
    GIT_REMOTE_SUBCOMMAND = "git_remote_subcommand"
    GIT_REF = "git_ref"
    GENERIC_FILE = "file"


GIT_SUBCOMMAND_CONTEXTS: Dict[str, CompletionContext] = {
    "checkout": CompletionContext.GIT_BRANCHISH,
    "co": CompletionContext.GIT_BRANCHISH,
    "switch": CompletionContext.GIT_BRANCHISH,
    "branch": CompletionContext.GIT_BRANCHISH,
    "merge": CompletionContext.GIT_BRANCHISH,
    "add": CompletionContext.GIT_FILEISH,
    "commit": CompletionContext.GIT_COMMIT_OPTION,
    "push": CompletionContext.GIT_REMOTE,
    "pull": CompletionContext.GIT_REMOTE,
    "remote": CompletionContext.GIT_REMOTE_SUBCOMMAND,
    "log": CompletionContext.GIT_REF,
    "show": CompletionContext.GIT_REF,
    "diff": CompletionContext.GIT_REF,
}


@dataclass
class Classification:
    context: CompletionContext
    word: str = ""
    tokens: List[str] = field(default_factory=list)


def current_word(line: str, cursor: int) -> str:
    """Characters between the cursor and the nearest space/tab (or line start)."""
    cursor = max(0, min(cursor, len(line)))
    start = cursor
    while start > 0 and line[start - 1] not in WORD_SEPARATORS:
        start -= 1
    return line[start:cursor]


def split_words(text: str) -> List[str]:
    """Split on the same separators `current_word` stops at."""
    return [word for word in text.replace("\t", " ").split(" ") if word]


def classify(line: str, cursor: int, enabled: bool = True) -> Classification:
    if not enabled:
        return Classification(CompletionContext.DISABLED)

    cursor = max(0, min(cursor, len(line)))
    before = line[:cursor]
    tokens = split_words(before)
    word = current_word(line, cursor)
    after_space = bool(before) and before[-1] in WORD_SEPARATORS

    if not tokens or (len(tokens) == 1 and not after_space):
        return Classification(CompletionContext.EMPTY_OR_FIRST_TOKEN, word, tokens)

    if tokens[0] != "git":
        return Classification(CompletionContext.GENERIC_FILE, word, tokens)

    if len(tokens) == 1 or (len(tokens) == 2 and not after_space):
        return Classification(CompletionContext.GIT_SUBCOMMAND, word, tokens)

    context = GIT_SUBCOMMAND_CONTEXTS.get(tokens[1], CompletionContext.GENERIC_FILE)
    return Classification(context, word, tokens)
