#!/usr/bin/env python3
from typing import Iterable, List


def get_common_prefix(candidates: List[str]) -> str:
    """Longest prefix shared by every candidate, used for display hints only."""
    if not candidates:
        return ""
    if len(candidates) == 1:
        return candidates[0]

    prefix = candidates[0]
    for candidate in candidates[1:]:
        length = 0
        for left, right in zip(prefix, candidate):
            if left != right:
                break
            length += 1
        prefix = prefix[:length]
        if not prefix:
            break
    return prefix


def remove_duplicates(candidates: Iterable[str]) -> List[str]:
    seen = set()
    unique: List[str] = []
    for candidate in candidates:
        if candidate not in seen:
            seen.add(candidate)
            unique.append(candidate)
    return unique


def format_completions(candidates: List[str], max_width: int) -> List[str]:
    if not candidates:
        return []
    if len(candidates) == 1:
        return [candidates[0]]

    col_width = max(len(candidate) for candidate in candidates) + 2
    columns = max(1, max_width // col_width)

    lines: List[str] = []
    for start in range(0, len(candidates), columns):
        row = candidates[start:start + columns]
        lines.append("".join(candidate.ljust(col_width) for candidate in row))
    return lines
