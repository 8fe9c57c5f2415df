#!/usr/bin/env python3
from typing import Mapping, Tuple


def expand_alias(line: str, aliases: Mapping[str, str]) -> Tuple[str, bool]:
    """Replace the first word of ``line`` with its alias, once.

    The expansion is not scanned again, so an alias whose value starts
    with another alias name runs that name literally.
    """
    fields = line.split()
    if not fields:
        return line, False

    expansion = aliases.get(fields[0])
    if expansion is None:
        return line, False

    fields[0] = expansion
    return " ".join(fields), True


def _is_name_char(char: str) -> bool:
    return char == "_" or ("a" <= char <= "z") or ("A" <= char <= "Z") or ("0" <= char <= "9")


def expand_variables(
    token: str,
    overlay: Mapping[str, str],
    system_env: Mapping[str, str],
) -> str:
    """Substitute ``$NAME`` and ``${NAME}`` in a single token.

    Names resolve against ``overlay`` first, then ``system_env``, and
    default to an empty string. Inserted values are not rescanned.
    """

    def lookup(name: str) -> str:
        if name in overlay:
            return overlay[name]
        return system_env.get(name, "")

    result = []
    index = 0
    length = len(token)

    while index < length:
        char = token[index]
        if char != "$" or index + 1 >= length:
            result.append(char)
            index += 1
            continue

        if token[index + 1] == "{":
            close = token.find("}", index + 2)
            if close == -1:
                result.append(char)
                index += 1
                continue
            result.append(lookup(token[index + 2 : close]))
            index = close + 1
            continue

        end = index + 1
        while end < length and _is_name_char(token[end]):
            end += 1

        if end == index + 1:
            result.append(char)
            index += 1
            continue

        result.append(lookup(token[index + 1 : end]))
        index = end

    return "".join(result)
