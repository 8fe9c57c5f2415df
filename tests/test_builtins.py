import os
from pathlib import Path

import pytest

from simpl_sh.commands import Command, CommandKind
from simpl_sh.context import HistoryManager
from simpl_sh.core.parser import Parser
from simpl_sh.errors import (
    DirectoryNotFound,
    HomeDirectoryUnresolvable,
    InvalidFormat,
)


def run(line, context, config):
    Parser(config, system_env={}).parse(line).execute(context, config)


def same_path(a, b) -> bool:
    return os.path.realpath(a) == os.path.realpath(b)


class TestChangeDirectory:

    def test_cd_into_directory(self, tmp_path, context, config, restore_cwd):
        run(f"cd {tmp_path}", context, config)
        assert same_path(os.getcwd(), tmp_path)
        assert config.previous_directory == restore_cwd

    def test_cd_without_args_goes_home(self, tmp_path, monkeypatch, context, config, restore_cwd):
        monkeypatch.setenv("HOME", str(tmp_path))
        run("cd", context, config)
        assert same_path(os.getcwd(), tmp_path)

    def test_cd_tilde_slash_is_expanded(self, tmp_path, monkeypatch, context, config, restore_cwd):
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "projects").mkdir()
        run("cd ~/projects", context, config)
        assert same_path(os.getcwd(), tmp_path / "projects")

    def test_cd_bare_tilde_is_not_expanded(self, tmp_path, monkeypatch, context, config, restore_cwd):
        home = tmp_path / "home"
        work = tmp_path / "work"
        home.mkdir()
        work.mkdir()
        monkeypatch.setenv("HOME", str(home))
        os.chdir(work)

        with pytest.raises(DirectoryNotFound):
            run("cd ~", context, config)

        # A directory literally named "~" is what a bare tilde refers to.
        (work / "~").mkdir()
        run("cd ~", context, config)
        assert same_path(os.getcwd(), work / "~")

    def test_cd_missing_directory(self, tmp_path, context, config, restore_cwd):
        with pytest.raises(DirectoryNotFound) as excinfo:
            run(f"cd {tmp_path / 'missing'}", context, config)
        assert excinfo.value.category == "not_found"

    def test_cd_into_file(self, tmp_path, context, config, restore_cwd):
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(DirectoryNotFound):
            run(f"cd {target}", context, config)

    def test_cd_dash_returns_to_previous(self, tmp_path, context, config, output, restore_cwd):
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()

        run(f"cd {first}", context, config)
        run(f"cd {second}", context, config)
        run("cd -", context, config)

        assert same_path(os.getcwd(), first)
        assert os.path.realpath(first) in output()

    def test_cd_dash_without_previous(self, context, config, restore_cwd):
        with pytest.raises(DirectoryNotFound):
            run("cd -", context, config)

    def test_cd_home_unresolvable(self, monkeypatch, context, config, restore_cwd):
        def no_home():
            raise RuntimeError("no home")

        monkeypatch.setattr(Path, "home", staticmethod(no_home))
        with pytest.raises(HomeDirectoryUnresolvable):
            run("cd", context, config)


def test_pwd_prints_cwd(tmp_path, context, config, output, restore_cwd):
    os.chdir(tmp_path)
    run("pwd", context, config)
    assert same_path(output().strip(), tmp_path)


def test_exit_with_code(context, config):
    with pytest.raises(SystemExit) as excinfo:
        run("exit 3", context, config)
    assert excinfo.value.code == 3


def test_exit_default_code(context, config):
    with pytest.raises(SystemExit) as excinfo:
        run("exit", context, config)
    assert excinfo.value.code == 0


def test_exit_rejects_non_numeric(context, config):
    with pytest.raises(InvalidFormat):
        run("exit soon", context, config)


def test_help_lists_builtins(context, config, output):
    run("help", context, config)
    text = output()
    for name in ("cd", "pwd", "history", "alias", "export"):
        assert name in text


class TestAlias:

    def test_define_alias_strips_quotes(self, context, config):
        run("alias gs='git status'", context, config)
        assert config.aliases["gs"] == "git status"

    def test_define_alias_with_spaces_around_value(self, context, config):
        run('alias greet="echo hello world"', context, config)
        assert config.aliases["greet"] == "echo hello world"

    def test_alias_without_equals(self, context, config):
        with pytest.raises(InvalidFormat):
            run("alias broken", context, config)

    def test_alias_listing(self, context, config, output):
        run("alias", context, config)
        assert "ll" in output()
        assert "ls -la" in output()

    def test_alias_listing_empty(self, context, config, output):
        config.aliases.clear()
        run("alias", context, config)
        assert "No aliases defined" in output()


class TestExport:

    def test_export_sets_overlay_and_environment(self, monkeypatch, context, config):
        monkeypatch.setenv("SIMPL_SH_TEST_VAR", "old")
        run("export SIMPL_SH_TEST_VAR='new value'", context, config)
        assert config.environment["SIMPL_SH_TEST_VAR"] == "new value"
        assert os.environ["SIMPL_SH_TEST_VAR"] == "new value"

    def test_export_without_equals(self, context, config):
        with pytest.raises(InvalidFormat):
            run("export NOVALUE", context, config)

    def test_export_path_refreshes_search_dirs(self, monkeypatch, context, config):
        monkeypatch.setenv("PATH", os.environ.get("PATH", ""))
        value = os.pathsep.join(["/opt/one", "/opt/two"])
        run(f"export PATH={value}", context, config)
        assert config.path_dirs == ["/opt/one", "/opt/two"]

    def test_export_listing(self, context, config, output):
        config.environment["EDITOR"] = "vim"
        run("export", context, config)
        assert "export EDITOR='vim'" in output()


class TestHistoryBuiltin:

    @pytest.fixture
    def history(self, config, context):
        history = HistoryManager(config)
        for line in ("ls", "pwd", "echo hi"):
            history.append(line)
        context.history = history
        return history

    def test_list_all(self, history, context, config, output):
        Command(CommandKind.HISTORY, "history").execute(context, config)
        assert "   1  ls" in output()
        assert "   3  echo hi" in output()

    def test_recent_keeps_absolute_numbers(self, history, context, config, output):
        run("history 2", context, config)
        lines = output().splitlines()
        assert lines == ["   2  pwd", "   3  echo hi"]

    def test_search_is_case_insensitive(self, history, context, config, output):
        run("history ECHO", context, config)
        assert output().splitlines() == ["  echo hi"]

    def test_clear(self, history, context, config):
        run("history -c", context, config)
        assert len(history) == 0

    def test_export(self, history, context, config, tmp_path):
        target = tmp_path / "export.txt"
        run(f"history --export {target}", context, config)
        assert target.read_text().splitlines() == ["ls", "pwd", "echo hi"]

    def test_without_store(self, context, config, output):
        run("history", context, config)
        assert "not available" in output()
