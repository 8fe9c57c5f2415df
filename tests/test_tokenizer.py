import pytest

from simpl_sh.core import expand_alias, expand_variables, tokenize
from simpl_sh.errors import UnclosedQuoteError


@pytest.mark.parametrize(
    "line, expected",
    [
        ("echo hello world", ["echo", "hello", "world"]),
        ('echo "hello world"', ["echo", "hello world"]),
        ("echo 'a b'   c", ["echo", "a b", "c"]),
        ("echo hello\\ world", ["echo", "hello world"]),
        ('echo \\"quoted\\"', ["echo", '"quoted"']),
        ('echo "hello \\"world\\""', ["echo", 'hello "world"']),
        ('a"b c"d', ["ab cd"]),
        ("echo \"it's\"", ["echo", "it's"]),
        ("ls\t-l", ["ls", "-l"]),
        ("echo trailing\\", ["echo", "trailing"]),
    ],
)
def test_tokenize(line, expected):
    assert tokenize(line) == expected


@pytest.mark.parametrize("line", ["", "   ", "\t \t"])
def test_tokenize_blank_input_is_empty(line):
    assert tokenize(line) == []


@pytest.mark.parametrize("line", ['echo "unterminated', "echo 'oops", "say \"it's"])
def test_tokenize_unclosed_quote(line):
    with pytest.raises(UnclosedQuoteError):
        tokenize(line)


def test_expand_alias_replaces_first_word_once():
    aliases = {"ll": "ls -la", "ls": "ls --color"}
    assert expand_alias("ll  /tmp", aliases) == ("ls -la /tmp", True)


def test_expand_alias_leaves_other_lines_alone():
    assert expand_alias("echo ll", {"ll": "ls -la"}) == ("echo ll", False)
    assert expand_alias("", {"ll": "ls -la"}) == ("", False)


def test_expand_variables_prefers_overlay():
    overlay = {"NAME": "overlay"}
    system = {"NAME": "system", "HOME": "/home/me"}
    assert expand_variables("$NAME", overlay, system) == "overlay"
    assert expand_variables("${HOME}/bin", overlay, system) == "/home/me/bin"


def test_expand_variables_unknown_and_bare():
    assert expand_variables("a${MISSING}b", {}, {}) == "ab"
    assert expand_variables("cost: $", {}, {}) == "cost: $"
    assert expand_variables("$-x", {}, {}) == "$-x"
    assert expand_variables("${open", {}, {}) == "${open"


def test_expand_variables_does_not_rescan_values():
    overlay = {"A": "$B", "B": "nope"}
    assert expand_variables("$A", overlay, {}) == "$B"
