#!/usr/bin/env python3
from typing import List

from ..errors import UnclosedQuoteError

QUOTE_CHARS = ('"', "'")
SEPARATORS = (" ", "\t")


def tokenize(text: str) -> List[str]:
    """Split a command line into unescaped words.

    A backslash escapes the next character, inside or outside quotes.
    Single or double quotes group whitespace into one word and are
    dropped from the output. An unterminated quote raises
    ``UnclosedQuoteError``; a trailing lone backslash is dropped.
    """
    tokens: List[str] = []
    current: List[str] = []
    quote_char = ""
    escaped = False

    for char in text:
        if escaped:
            current.append(char)
            escaped = False
            continue

        if char == "\\":
            escaped = True
            continue

        if not quote_char and char in QUOTE_CHARS:
            quote_char = char
            continue

        if quote_char and char == quote_char:
            quote_char = ""
            continue

        if not quote_char and char in SEPARATORS:
            if current:
                tokens.append("".join(current))
                current = []
            continue

        current.append(char)

    if quote_char:
        raise UnclosedQuoteError(quote_char)

    if current:
        tokens.append("".join(current))

    return tokens
