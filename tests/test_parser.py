import pytest

from simpl_sh.commands import CommandKind, build_external, resolve_builtin
from simpl_sh.core.parser import Parser
from simpl_sh.errors import UnclosedQuoteError


def test_blank_line_is_noop(config):
    parser = Parser(config, system_env={})
    assert parser.parse("").kind is CommandKind.NOOP
    assert parser.parse("   ").kind is CommandKind.NOOP
    assert parser.parse('""').kind is CommandKind.NOOP


def test_builtins_are_resolved(config):
    parser = Parser(config, system_env={})
    command = parser.parse("cd /tmp")
    assert command.kind is CommandKind.CD
    assert command.args == ["/tmp"]
    assert command.is_builtin


def test_alias_expands_to_external(config):
    command = Parser(config, system_env={}).parse("ll /tmp")
    assert command.kind is CommandKind.EXTERNAL
    assert command.name == "ls"
    assert command.args == ["-la", "/tmp"]
    assert not command.is_builtin


def test_alias_to_builtin(config):
    config.aliases["up"] = "cd .."
    command = Parser(config, system_env={}).parse("up")
    assert command.kind is CommandKind.CD
    assert command.args == [".."]


def test_variables_expand_in_external_commands_only(config):
    config.environment["GREETING"] = "hi"
    parser = Parser(config, system_env={"HOME": "/home/me"})

    external = parser.parse("echo $GREETING ${HOME}")
    assert external.args == ["hi", "/home/me"]

    builtin = parser.parse("cd $HOME")
    assert builtin.args == ["$HOME"]


def test_quoted_arguments(config):
    command = Parser(config, system_env={}).parse("echo 'a  b' c\\ d")
    assert command.args == ["a  b", "c d"]


def test_unclosed_quote_aborts_parse(config):
    with pytest.raises(UnclosedQuoteError):
        Parser(config, system_env={}).parse('echo "oops')


def test_resolve_builtin_unknown_name():
    assert resolve_builtin(["ls", "-l"]) is None
    assert resolve_builtin([]) is None


def test_build_external_expands_program_name():
    command = build_external(["$EDITOR", "file"], {"EDITOR": "vim"}, {})
    assert command.name == "vim"
    assert command.args == ["file"]
